from pathlib import Path

import pytest

from execomatic import Executor, ValidationError
from execomatic.errors import ProcessExitError

from .utils import fake_config, make_tool

#: Fake ``dbview``: prints the table name it was given and its cwd.
DBVIEW_SCRIPT = 'printf "%s:%s\\n" "$3" "$(pwd)"\nexit {code}\n'


def _executor(tmp_path: Path, code: int) -> Executor:
    tool = make_tool(tmp_path / "bin", "dbview", DBVIEW_SCRIPT.format(code=code))
    return Executor({}, fake_config(tmp_path, dbview=tool))


def test_convert_succeeds_on_exit_one(tmp_path: Path):
    """Verify dbview's exit status 1 counts as success."""
    data = tmp_path / "data"
    data.mkdir()
    src = data / "PARCELS.DBF"
    src.write_bytes(b"\x03")
    out = _executor(tmp_path, 1).convert(src)
    assert out == data / "parcels.dat"
    assert out.read_text() == f"PARCELS.DBF:{data.resolve()}\n"


def test_convert_fails_on_exit_zero(tmp_path: Path):
    """Verify exit status 0 from dbview is reported as a failure."""
    src = tmp_path / "parcels.dbf"
    src.write_bytes(b"\x03")
    with pytest.raises(ProcessExitError) as info:
        _executor(tmp_path, 0).convert(src)
    assert info.value.exit_code == 0
    assert not (tmp_path / "parcels.dat").exists()


def test_convert_requires_dbf(tmp_path: Path):
    """Verify only dBase files are accepted."""
    src = tmp_path / "parcels.csv"
    src.write_text("x")
    with pytest.raises(ValidationError):
        _executor(tmp_path, 1).convert(src)
