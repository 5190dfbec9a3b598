"""Persist the last aggregation result (listings plus matches) as JSON with file locking."""
from __future__ import annotations

import fcntl
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Iterable

from jobmatch.config import CACHE_PATH
from jobmatch.dates import parse_datetime, to_iso, utcnow
from jobmatch.log import get_logger
from jobmatch.models import CachedJobs, JobListing, JobMatch

log = get_logger(__name__)


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class JobCache:
    """Listings and matches are always written together, so readers never see one without the other."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else CACHE_PATH
        self._lock_path = self.path.with_name(self.path.name + ".lock")

    def save(
        self,
        jobs: Iterable[JobListing],
        matches: Iterable[JobMatch],
        refreshed_at: datetime | None = None,
    ) -> None:
        payload = {
            "refreshed_at": to_iso(refreshed_at or utcnow()),
            "jobs": [j.to_dict() for j in jobs],
            "matches": [m.to_dict() for m in matches],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(self._lock_path, "w", encoding="utf-8") as lock_file:
            _lock(lock_file)
            try:
                with open(tmp, "w", encoding="utf-8") as f:
                    json.dump(payload, f, ensure_ascii=False)
                os.replace(tmp, self.path)
            finally:
                _unlock(lock_file)
        log.debug("Cached %d jobs -> %s", len(payload["jobs"]), self.path.name)

    def load(self) -> CachedJobs:
        if not self.path.exists():
            return CachedJobs()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                try:
                    data = json.load(f)
                finally:
                    _unlock(f)
            return CachedJobs(
                jobs=[JobListing.from_dict(j) for j in data.get("jobs", [])],
                matches=[JobMatch.from_dict(m) for m in data.get("matches", [])],
                refreshed_at=data.get("refreshed_at"),
            )
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            log.warning("Ignoring unreadable job cache %s: %s", self.path, exc)
            return CachedJobs()

    def last_refresh(self) -> datetime | None:
        return parse_datetime(self.load().refreshed_at)
