"""Logging setup shared by every jobmatch module.

A console handler on stdout plus, unless ``JOBMATCH_NO_LOG_FILE`` is set,
one DEBUG file per day at ``logs/aggregate_YYYY-MM-DD.log``.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# urllib3 logs every connection at DEBUG
QUIET_LOGGERS = ("urllib3", "charset_normalizer")

_ready = False


def get_logger(name: str) -> logging.Logger:
    """Named logger; the root handlers are installed on first use."""
    global _ready
    if not _ready:
        setup_logging()
        _ready = True
    return logging.getLogger(name)


def log_level() -> int:
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def daily_log_path(day: date | None = None) -> Path:
    return LOG_DIR / f"aggregate_{(day or date.today()).isoformat()}.log"


def setup_logging() -> None:
    level = log_level()
    root = logging.getLogger()
    root.setLevel(level)
    for noisy in QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    if root.handlers:
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if os.environ.get("JOBMATCH_NO_LOG_FILE"):
        return
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(daily_log_path(), encoding="utf-8")
    except OSError:
        return
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)
