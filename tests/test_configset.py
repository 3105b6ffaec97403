from pathlib import Path

import pytest

from execomatic.configset import ConfigSet
from execomatic.errors import ConfigurationError


def test_assigning_none_unsets_key():
    """Verify setting None removes the key instead of storing a null."""
    cfg = ConfigSet({"mysql.host": "db"})
    cfg["mysql.host"] = None
    assert "mysql.host" not in cfg
    assert cfg.get("mysql.host") is None


def test_last_write_wins_and_moves_key_last():
    """Verify re-assignment keeps the latest value at the end of the order."""
    cfg = ConfigSet()
    cfg["a"] = "1"
    cfg["b"] = "2"
    cfg["a"] = "3"
    assert list(cfg.items()) == [("b", "2"), ("a", "3")]


def test_values_are_strings():
    """Verify values are coerced to str, booleans to true/false."""
    cfg = ConfigSet(port=3306, replace=True)
    assert cfg["port"] == "3306"
    assert cfg["replace"] == "true"


@pytest.mark.parametrize(
    "value,expected",
    [("true", True), ("YES", True), ("on", True), ("1", True), ("false", False), ("", False)],
)
def test_flag_truthiness(value, expected):
    """Verify flag() recognises the accepted truthy spellings."""
    assert ConfigSet({"opt": value}).flag("opt") is expected


def test_flag_default_applies_only_when_unset():
    """Verify flag() falls back to the default for absent keys only."""
    cfg = ConfigSet({"replace": "false"})
    assert cfg.flag("replace", default=True) is False
    assert cfg.flag("missing", default=True) is True


def test_require_rejects_missing_and_empty():
    """Verify require() names the first missing or empty key."""
    cfg = ConfigSet({"mysql.host": "db", "mysql.user": ""})
    cfg.require("mysql.host")
    with pytest.raises(ConfigurationError, match="mysql.user is required"):
        cfg.require("mysql.host", "mysql.user")


def test_merged_leaves_original_untouched():
    """Verify merged() returns a new set with overrides on top."""
    base = ConfigSet({"mysql.host": "db", "mysql.user": "me"})
    out = base.merged({"mysql.host": "other", "mysql.user": None})
    assert out["mysql.host"] == "other"
    assert "mysql.user" not in out
    assert base["mysql.host"] == "db"


def test_from_yaml_flattens_nested_mappings(tmp_path: Path):
    """Verify nested and dotted YAML keys produce the same flat keys."""
    path = tmp_path / "settings.yaml"
    path.write_text("mysql:\n  host: db\n  replace: true\nmysql.user: me\noverwrite: null\n")
    cfg = ConfigSet.from_yaml(path)
    assert cfg["mysql.host"] == "db"
    assert cfg["mysql.replace"] == "true"
    assert cfg["mysql.user"] == "me"
    assert "overwrite" not in cfg


def test_from_yaml_missing_file(tmp_path: Path):
    """Verify unreadable settings files raise ConfigurationError."""
    with pytest.raises(ConfigurationError):
        ConfigSet.from_yaml(tmp_path / "nope.yaml")
