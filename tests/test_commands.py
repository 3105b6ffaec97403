import shlex
from pathlib import Path

import pytest

from execomatic.commands import (
    DbviewCommand,
    MysqlExportCommand,
    MysqlImportCommand,
    MysqlQueryCommand,
    WgetCommand,
    flatten_sql,
)
from execomatic.config import FetchSettings
from execomatic.configset import ConfigSet
from execomatic.errors import ConfigurationError, ValidationError
from execomatic.utils.redact import MASK, redact

from .utils import SETTINGS


def test_flatten_sql_joins_lines_and_appends_semicolon():
    """Verify multi-line SQL is collapsed and terminated."""
    assert flatten_sql("select *\nfrom t") == "select * from t;"
    assert flatten_sql("select 1;") == "select 1;"


def test_query_argv_layout():
    """Verify the mysql argument vector and its ordering."""
    spec = MysqlQueryCommand("/opt/mysql").build(ConfigSet(SETTINGS), "show tables")
    assert spec.argv == (
        "/opt/mysql",
        "--execute=show tables;",
        "--host=db.example.org",
        "--user=loader",
        "--password=s3cr3t'pw",
        "testdb",
    )
    assert spec.tool == "mysql"
    assert spec.stdout_path is None


def test_query_requires_connection_settings():
    """Verify missing credentials are rejected before anything is built."""
    with pytest.raises(ConfigurationError, match="mysql.pass"):
        MysqlQueryCommand("mysql").build(ConfigSet({**SETTINGS, "mysql.pass": ""}), "select 1")


def test_query_rejects_blank_sql():
    """Verify blank SQL is a validation error."""
    with pytest.raises(ValidationError):
        MysqlQueryCommand("mysql").build(ConfigSet(SETTINGS), "   ")


def test_export_table_flag_and_redirect(tmp_path: Path):
    """Verify the export spec honours ``table`` and targets the staged file."""
    staged = tmp_path / "stage.part"
    spec = MysqlExportCommand("mysql").build(
        ConfigSet({**SETTINGS, "table": "true"}), "select 1", staged
    )
    assert spec.argv[1] == "--table"
    assert spec.stdout_path == staged
    assert spec.render().endswith(" > " + shlex.quote(str(staged)))


def test_mysqlimport_flag_order(tmp_path: Path):
    """Verify optional flags appear in their fixed order before connection flags."""
    src = tmp_path / "alpha.dat"
    settings = ConfigSet(
        {
            **SETTINGS,
            "mysql.force": "true",
            "mysql.delete": "yes",
            "mysql.ignore-lines": "1",
            "mysql.fields-terminated-by": ",",
            "mysql.fields-optionally-enclosed-by": '"',
            "mysql.fields-enclosed-by": "'",
        }
    )
    spec = MysqlImportCommand("mysqlimport").build(settings, src)
    assert list(spec.argv) == [
        "mysqlimport",
        "--local",
        "--force",
        "--delete",
        "--ignore",
        "--ignore-lines=1",
        "--fields-terminated-by=,",
        '--fields-optionally-enclosed-by="',
        "--lock-tables",
        "--low-priority",
        "--host=db.example.org",
        "--user=loader",
        "--password=s3cr3t'pw",
        "testdb",
        str(src),
    ]
    assert spec.cwd == tmp_path


def test_mysqlimport_replace_and_enclosed_by(tmp_path: Path):
    """Verify --replace wins over --ignore and the plain enclosed-by fallback."""
    settings = ConfigSet({**SETTINGS, "mysql.replace": "true", "mysql.fields-enclosed-by": "'"})
    argv = MysqlImportCommand("mysqlimport").build(settings, tmp_path / "a.dat").argv
    assert "--replace" in argv and "--ignore" not in argv
    assert "--fields-enclosed-by='" in argv


def test_wget_argv(tmp_path: Path):
    """Verify wget flags follow the fetch settings."""
    staged = tmp_path / "wget-1.part"
    fetch = FetchSettings(timeout=7, tries=3, max_redirect=1, connect_timeout=2)
    spec = WgetCommand("wget", fetch).build(ConfigSet(), "http://h/f.zip", staged)
    assert spec.argv == (
        "wget",
        "--quiet",
        "--max-redirect=1",
        "--tries=3",
        "--timeout=7",
        "--connect-timeout=2",
        "-O",
        str(staged),
        "http://h/f.zip",
    )


def test_dbview_runs_in_source_directory(tmp_path: Path):
    """Verify dbview receives the bare file name and the source dir as cwd."""
    src = tmp_path / "PARCELS.DBF"
    staged = tmp_path / "stage.dat"
    spec = DbviewCommand("dbview").build(ConfigSet(), src, staged)
    assert spec.argv == ("dbview", "-b", "-t", "PARCELS.DBF")
    assert spec.cwd == tmp_path
    assert spec.stdout_path == staged


def test_render_quotes_hostile_values():
    """Verify shell metacharacters survive rendering as literal text."""
    hostile = {**SETTINGS, "mysql.pass": "x'; rm -rf / #"}
    spec = MysqlQueryCommand("mysql").build(ConfigSet(hostile), "select 1")
    assert shlex.split(spec.render()) == list(spec.argv)


def test_redacted_hides_password():
    """Verify the rendered command never exposes the password."""
    spec = MysqlQueryCommand("mysql").build(ConfigSet(SETTINGS), "select 1")
    line = spec.redacted()
    assert "s3cr3t" not in line
    assert MASK in line


def test_redact_masks_password_flag_without_secret_list():
    """Verify --password= values are masked even when the secret is unknown."""
    assert redact("mysql --password=hunter2 db") == f"mysql --password={MASK} db"


def test_redacted_shell_line_stays_balanced():
    """Verify masking a quoted --password= token keeps its closing quote."""
    spec = MysqlQueryCommand("mysql").build(ConfigSet(SETTINGS), "select 1")
    tokens = shlex.split(spec.redacted())
    assert f"--password={MASK}" in tokens
    assert redact("mysql '--password=hunter2' db") == f"mysql '--password={MASK}' db"
