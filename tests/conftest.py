"""Pytest configuration for execomatic tests."""

import pytest


@pytest.fixture(autouse=True)
def _isolated_logs(tmp_path, monkeypatch):
    """Keep the rotating JSON log out of the package directory."""
    monkeypatch.setenv("EXECOMATIC_LOG_DIR", str(tmp_path / "logs"))
