"""Unit tests for logging_setup.py"""

import logging

import pytest

from mdblog.logging_setup import configure_logging


def _managed(root: logging.Logger) -> list:
    return [h for h in root.handlers if getattr(h, "_mdblog_managed", False)]


@pytest.fixture(autouse=True)
def restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_installs_one_handler():
    """Repeated calls keep a single managed handler on the root logger."""
    configure_logging()
    configure_logging()
    assert len(_managed(logging.getLogger())) == 1


def test_configure_logging_explicit_level():
    """An explicit level name is applied to the root logger."""
    configure_logging("DEBUG")
    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_env_level(monkeypatch):
    """MDBLOG_LOG_LEVEL is used when no level is passed."""
    monkeypatch.setenv("MDBLOG_LOG_LEVEL", "info")
    configure_logging()
    assert logging.getLogger().level == logging.INFO


def test_configure_logging_default_warning():
    """Without a level or env var the root logger is set to WARNING."""
    configure_logging()
    assert logging.getLogger().level == logging.WARNING
