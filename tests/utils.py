"""Test helpers for execomatic modules.

Wrapped programs are replaced by small ``/bin/sh`` scripts written into the
test's temporary directory; the configuration struct points at them.
"""

from pathlib import Path

from execomatic.config import ExecConfig, load_config

SETTINGS = {
    "mysql.database": "testdb",
    "mysql.host": "db.example.org",
    "mysql.user": "loader",
    "mysql.pass": "s3cr3t'pw",
}

#: Fake ``mysql``: answers ``show tables`` and emits two rows otherwise.
MYSQL_SCRIPT = """\
echo "$@" >> "{log}"
case "$*" in
  *"show tables"*) printf 'Tables_in_testdb\\nalpha\\nbeta\\n' ;;
  *) printf 'id\\tname\\n1\\tfoo\\n2\\tbar\\n' ;;
esac
"""

#: Fake ``mysqlimport``: records its arguments and reports one file.
MYSQLIMPORT_SCRIPT = """\
echo "$@" >> "{log}"
echo "fcc_uls.lo: Records: 21  Deleted: 0  Skipped: 0  Warnings: 326"
"""

#: Fake ``wget``: writes a payload to the ``-O`` target; URLs containing
#: ``fail`` exit with the network error code.
WGET_SCRIPT = """\
out=""
url=""
while [ $# -gt 0 ]; do
  case "$1" in
    -O) out="$2"; shift 2 ;;
    *) url="$1"; shift ;;
  esac
done
case "$url" in
  *fail*) echo "connection refused" >&2; exit 4 ;;
esac
printf 'payload from %s\\n' "$url" > "$out"
"""


def make_tool(directory: Path, name: str, body: str) -> Path:
    """Write an executable shell script and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    script = directory / name
    script.write_text("#!/bin/sh\n" + body)
    script.chmod(0o755)
    return script


def fake_config(tmp_path: Path, *, fetch=None, runner=None, **tools: Path) -> ExecConfig:
    """Return the packaged config with program paths replaced by *tools*."""
    cfg = load_config()
    programs = dict(cfg.programs)
    for tool, path in tools.items():
        programs[tool] = programs[tool].model_copy(update={"path": str(path)})
    update = {"programs": programs, "scratch_root": tmp_path / "scratch"}
    if fetch:
        update["fetch"] = cfg.fetch.model_copy(update=fetch)
    if runner:
        update["runner"] = cfg.runner.model_copy(update=runner)
    return cfg.model_copy(update=update)
