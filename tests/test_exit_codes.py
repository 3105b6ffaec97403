from execomatic.config import load_config
from execomatic.exit_codes import ExitStatusTranslator


def _translator():
    return ExitStatusTranslator.from_config(load_config())


def test_dbview_success_is_exit_one():
    """Verify dbview uses the inverted exit-code convention."""
    tr = _translator()
    assert tr.is_success("dbview", 1)
    status = tr.translate("dbview", 0)
    assert not status.success
    assert status.kind == "generic"


def test_wget_codes_are_classified():
    """Verify wget failure codes map to their categories."""
    tr = _translator()
    assert tr.translate("wget", 0).description == "OK"
    assert tr.translate("wget", 4).kind == "network"
    assert tr.translate("wget", 8).kind == "server"


def test_unknown_code_and_tool():
    """Verify unknown codes are generic and unknown tools follow zero-is-success."""
    tr = _translator()
    status = tr.translate("wget", 42)
    assert status.kind == "generic"
    assert "42" in status.description
    assert tr.is_success("something-else", 0)
    assert not tr.is_success("something-else", 1)
