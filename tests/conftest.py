"""PyTest configuration shared by the splititer tests."""

import pytest
from splititer.util.config import reset_config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep the user's ~/.splititer.toml and SPLITITER_* variables out of tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("SPLITITER_SPLIT_THREADSAFE", raising=False)
    monkeypatch.delenv("SPLITITER_LOGGER_LEVELS", raising=False)
    monkeypatch.delenv("SPLITITER_LOGGER_FILES", raising=False)
    reset_config()
    yield
    reset_config()
