"""Date parsing for posted-at stamps: ISO/RFC-822 strings, epochs and "N days ago"."""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from jobmatch.config import FRESHNESS_DAYS

MIN_POSTED_YEAR = 2020
CLOCK_SKEW = timedelta(days=1)

_RELATIVE_RE = re.compile(r"(\d+)\+?\s*(hour|hr|day|week|month)", re.IGNORECASE)
_NUMERIC_RE = re.compile(r"^\d+(?:\.\d+)?$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def now_iso(now: datetime | None = None) -> str:
    return to_iso(now or utcnow())


def _from_epoch(value: float) -> datetime | None:
    # Millisecond epochs are 13 digits; second epochs 10
    if value > 1e11:
        value /= 1000.0
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_datetime(value: Any) -> datetime | None:
    """Parse a timestamp into an aware UTC datetime, or None when unparsable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        return _from_epoch(float(value))
    else:
        text = str(value).strip()
        if not text:
            return None
        if _NUMERIC_RE.match(text):
            if len(text) < 9:
                return None
            return _from_epoch(float(text))
        try:
            dt = date_parser.parse(text)
        except (ValueError, OverflowError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_relative(text: str | None, now: datetime | None = None) -> datetime | None:
    """Resolve "3 days ago" / "1 hour ago" / "30+ days ago" against *now*."""
    if not text:
        return None
    m = _RELATIVE_RE.search(text)
    if not m:
        return None
    value = int(m.group(1))
    unit = m.group(2).lower()
    now = now or utcnow()
    if unit in ("hour", "hr"):
        return now - timedelta(hours=value)
    if unit == "day":
        return now - timedelta(days=value)
    if unit == "week":
        return now - timedelta(weeks=value)
    return now - relativedelta(months=value)


def coerce_posted_at(value: Any, now: datetime | None = None) -> str:
    """Best-effort ISO stamp for a source date field; falls back to *now*."""
    now = now or utcnow()
    dt = parse_datetime(value)
    if dt is not None and dt.year >= MIN_POSTED_YEAR:
        return to_iso(dt)
    if isinstance(value, str):
        rel = parse_relative(value, now)
        if rel is not None:
            return to_iso(rel)
    return to_iso(now)


def is_valid_posted_at(value: Any, now: datetime | None = None) -> bool:
    dt = parse_datetime(value)
    if dt is None:
        return False
    now = now or utcnow()
    return dt.year >= MIN_POSTED_YEAR and dt <= now + CLOCK_SKEW


def is_fresh(value: Any, now: datetime | None = None, days: int = FRESHNESS_DAYS) -> bool:
    """True when *value* parses and lies within the last *days* days."""
    dt = parse_datetime(value)
    if dt is None:
        return False
    now = now or utcnow()
    return now - dt <= timedelta(days=days)


def format_relative_time(value: Any, now: datetime | None = None) -> str:
    now = now or utcnow()
    if not is_valid_posted_at(value, now):
        return "Recently"
    dt = parse_datetime(value)
    minutes = int((now - dt).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 30:
        return f"{days}d ago"
    return dt.strftime("%b %d, %Y")
