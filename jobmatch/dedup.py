"""Drop stale, incomplete and duplicate listings."""
from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable

from jobmatch.dates import is_fresh, utcnow
from jobmatch.models import JobListing

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def _norm(text: str | None) -> str:
    return _NON_ALNUM_RE.sub("", (text or "").lower())


def deduplicate_jobs(jobs: Iterable[JobListing], now: datetime | None = None) -> list[JobListing]:
    """Keep the first occurrence of each listing, in input order.

    A listing is dropped when it is older than the freshness window (or has an
    unparsable ``posted_at``), lacks a title or company, repeats a
    ``(source_platform, external_id)`` pair, or repeats a normalized
    ``(title, company)`` pair seen on any platform.
    """
    now = now or utcnow()
    seen_source: set[tuple[str, str]] = set()
    seen_title_company: set[str] = set()
    out: list[JobListing] = []

    for job in jobs:
        if not is_fresh(job.posted_at, now):
            continue
        if not (job.title or "").strip() or not (job.company_name or "").strip():
            continue

        source_key = (job.source_platform, job.external_id)
        if source_key in seen_source:
            continue
        seen_source.add(source_key)

        title_key = f"{_norm(job.title)}::{_norm(job.company_name)}"
        if title_key in seen_title_company:
            continue
        seen_title_company.add(title_key)

        out.append(job)
    return out
