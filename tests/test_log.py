"""
Unit tests for the logging helpers.
"""

import logging
from datetime import date

from jobmatch import log


class TestLogLevel:
    """Test LOG_LEVEL parsing."""

    def test_default_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert log.log_level() == logging.INFO

    def test_named_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", " debug ")

        assert log.log_level() == logging.DEBUG

    def test_unknown_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        assert log.log_level() == logging.INFO


class TestDailyLogPath:
    """Test the per-day log file name."""

    def test_name(self):
        path = log.daily_log_path(date(2026, 3, 1))

        assert path.name == "aggregate_2026-03-01.log"
        assert path.parent == log.LOG_DIR


def test_get_logger_returns_named_logger():
    assert log.get_logger("jobmatch.test").name == "jobmatch.test"
