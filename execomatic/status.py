"""
Line-oriented metric extraction for wrapped-program output.

``mysqlimport`` reports one line per processed file::

    fcc_uls.lo: Records: 21  Deleted: 0  Skipped: 0  Warnings: 326

:class:`StatusParser` turns every ``word: number`` pair into a metric and the
leading ``label:`` field (when present) into :attr:`StatusParser.label_key`.
Parsing is line-local; the accumulated report is updated additively so a
later line overwrites an earlier metric of the same name.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Pattern

from .types import StatusReport

log = logging.getLogger(__name__)

#: ``<word>: <digits>`` at line start or after whitespace.
METRIC_PATTERN: Pattern[str] = re.compile(r"(?:^|\s)(\w+): (\d+)")

#: Leading ``<token>:`` that is *not* itself a metric (no number follows).
LABEL_PATTERN: Pattern[str] = re.compile(r"^\s*([^\s:]+):(?!\s*\d)")


class StatusParser:
    """Accumulate metrics from output lines into a :class:`StatusReport`.

    Args:
        report: Report to update; a fresh one is created when omitted.
        label_key: Metric name under which the leading label is stored, or
            ``None`` to ignore labels.
        metric_pattern: Regex with two groups (name, value).
    """

    def __init__(
        self,
        report: Optional[StatusReport] = None,
        *,
        label_key: Optional[str] = "Table",
        metric_pattern: Pattern[str] = METRIC_PATTERN,
    ) -> None:
        self.report = report if report is not None else StatusReport()
        self.label_key = label_key
        self.metric_pattern = metric_pattern

    def parse_line(self, line: str) -> dict[str, str]:
        """Return the metrics found in *line* without touching the report."""
        found: dict[str, str] = {}
        if self.label_key:
            label = LABEL_PATTERN.match(line)
            if label:
                found[self.label_key] = label.group(1)
        for match in self.metric_pattern.finditer(line):
            found[match.group(1)] = match.group(2)
        return found

    def feed(self, line: str) -> dict[str, str]:
        """Parse *line*, merge its metrics into the report and return them."""
        line = line.rstrip("\r\n")
        found = self.parse_line(line)
        if found:
            self.report.update(found)
        elif line.strip():
            log.debug("Unparsed output line: %s", line)
        return found

    # Allows passing the parser itself as a ``on_stdout`` callback.
    __call__ = feed


def parse_status(line: str, *, label_key: Optional[str] = "Table") -> StatusReport:
    """Parse a single line into a new :class:`StatusReport`."""
    parser = StatusParser(label_key=label_key)
    parser.feed(line)
    return parser.report


__all__ = ["StatusParser", "parse_status", "METRIC_PATTERN", "LABEL_PATTERN"]
