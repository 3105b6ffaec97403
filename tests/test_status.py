from execomatic.status import StatusParser, parse_status
from execomatic.types import StatusReport


def test_mysqlimport_summary_line():
    """Verify the mysqlimport summary line yields the table and every metric."""
    report = parse_status("fcc_uls.lo: Records: 21  Deleted: 0  Skipped: 0  Warnings: 326  Time: 6")
    assert report == {
        "Table": "fcc_uls.lo",
        "Records": "21",
        "Deleted": "0",
        "Skipped": "0",
        "Warnings": "326",
        "Time": "6",
    }


def test_unmatched_lines_leave_report_unchanged():
    """Verify free text adds nothing to the report."""
    parser = StatusParser()
    assert parser.feed("Connecting to server...") == {}
    assert parser.report == {}


def test_later_lines_overwrite_earlier_metrics():
    """Verify metrics accumulate additively with last value winning."""
    report = StatusReport()
    parser = StatusParser(report, label_key=None)
    parser("Records: 1  Warnings: 2")
    parser("Records: 5")
    assert report == {"Records": "5", "Warnings": "2"}


def test_status_report_coerces_values():
    """Verify report values are always strings and the ignored marker works."""
    report = StatusReport(Size=1024)
    report["Files"] = 3
    assert report["Size"] == "1024"
    report.update(Duration=12)
    assert report["Files"] == "3"
    assert report["Duration"] == "12"
    assert not report.ignored
    assert report.mark_ignored().ignored
