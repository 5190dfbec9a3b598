"""Convert source records into canonical job listings with stable ids."""
from __future__ import annotations

from datetime import datetime

from jobmatch.dates import is_valid_posted_at, now_iso, parse_datetime, to_iso, utcnow
from jobmatch.extract import djb2, fnv1a
from jobmatch.models import (
    DEFAULT_EXPERIENCE_LEVEL,
    DEFAULT_JOB_TYPE,
    EXPERIENCE_LEVELS,
    JOB_TYPES,
    JobListing,
    RawJob,
)

MAX_DESCRIPTION_CHARS = 5000


def derive_job_id(platform: str, external_id: str) -> str:
    """Deterministic id: ``<platform>-<djb2 hex><fnv1a hex>`` over ``platform:external_id``.

    Two independent 32-bit hashes are concatenated to widen the id space; each is
    taken as a signed 32-bit value, made absolute and zero-padded to 8 hex digits.
    """
    raw = f"{platform}:{external_id}"
    return f"{platform}-{abs(djb2(raw)):08x}{abs(fnv1a(raw)):08x}"


def _unique(values: list[str] | None) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()
    for value in values or []:
        if not isinstance(value, str):
            continue
        value = value.strip()
        if value and value.lower() not in seen:
            seen.add(value.lower())
            out.append(value)
    return out


def normalize_to_listing(raw: RawJob, now: datetime | None = None) -> JobListing:
    """Canonicalize one raw record.

    Raises ValueError when the record has no platform or external id; callers
    drop such records individually.
    """
    if not raw.source_platform or not str(raw.external_id or "").strip():
        raise ValueError(f"record from {raw.source_platform or '?'} has no external id")

    now = now or utcnow()
    external_id = str(raw.external_id).strip()
    job_type = raw.job_type if raw.job_type in JOB_TYPES else DEFAULT_JOB_TYPE
    level = (
        raw.experience_level
        if raw.experience_level in EXPERIENCE_LEVELS
        else DEFAULT_EXPERIENCE_LEVEL
    )
    if is_valid_posted_at(raw.posted_at, now):
        posted_at = to_iso(parse_datetime(raw.posted_at))
    else:
        posted_at = now_iso(now)

    return JobListing(
        id=derive_job_id(raw.source_platform, external_id),
        title=(raw.title or "").strip(),
        company_name=(raw.company_name or "").strip(),
        description=(raw.description or "")[:MAX_DESCRIPTION_CHARS],
        skills_required=_unique(raw.skills_required),
        location=(raw.location or "").strip() or None,
        is_remote=bool(raw.is_remote),
        salary_min=raw.salary_min,
        salary_max=raw.salary_max,
        salary_currency=raw.salary_currency or "USD",
        job_type=job_type,
        experience_level=level,
        source_platform=raw.source_platform,
        source_url=raw.source_url or None,
        external_id=external_id,
        posted_at=posted_at,
        company_logo_url=raw.company_logo_url or None,
        requirements=[r for r in (raw.requirements or []) if isinstance(r, str)],
        metadata=dict(raw.metadata or {}),
        created_at=now_iso(now),
    )
