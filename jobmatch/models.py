"""Data models for profiles, raw and canonical job listings, and match results."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

JOB_TYPES: tuple[str, ...] = (
    "full_time", "part_time", "contract", "internship", "freelance", "remote",
)
EXPERIENCE_LEVELS: tuple[str, ...] = ("entry", "mid", "senior", "lead", "executive")
LOCALITIES: tuple[str, ...] = ("city", "national", "remote", "international", "unknown")

DEFAULT_JOB_TYPE = "full_time"
DEFAULT_EXPERIENCE_LEVEL = "mid"


@dataclass
class UserProfile:
    full_name: str = ""
    headline: str | None = None
    location: str | None = None
    skills: list[str] = field(default_factory=list)
    experience_years: float = 0
    desired_job_types: list[str] = field(default_factory=list)
    desired_locations: list[str] = field(default_factory=list)
    desired_salary_min: float | None = None
    desired_salary_max: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in (data or {}).items() if k in known and v is not None}
        for key in ("skills", "desired_job_types", "desired_locations"):
            if key in kwargs:
                kwargs[key] = [str(v).strip() for v in kwargs[key] if str(v).strip()]
        if "desired_job_types" in kwargs:
            kwargs["desired_job_types"] = [
                t for t in kwargs["desired_job_types"] if t in JOB_TYPES
            ]
        return cls(**kwargs)


@dataclass
class AppSettings:
    """Optional credentials; a keyed source is disabled while its key is missing."""

    rapidapi_key: str | None = None
    jooble_api_key: str | None = None
    searchapi_key: str | None = None
    adzuna_app_id: str | None = None
    adzuna_app_key: str | None = None
    gemini_api_key: str | None = None


@dataclass
class RawJob:
    """Loosely-typed record produced by a single source call."""

    title: str
    company_name: str
    source_platform: str
    external_id: str
    description: str = ""
    skills_required: list[str] = field(default_factory=list)
    location: str | None = None
    is_remote: bool = False
    salary_min: float | None = None
    salary_max: float | None = None
    salary_currency: str = "USD"
    job_type: str = DEFAULT_JOB_TYPE
    experience_level: str = DEFAULT_EXPERIENCE_LEVEL
    source_url: str | None = None
    posted_at: str | None = None
    company_logo_url: str | None = None
    requirements: list[str] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)


@dataclass
class JobListing:
    id: str
    title: str
    company_name: str
    description: str
    skills_required: list[str]
    location: str | None
    is_remote: bool
    salary_min: float | None
    salary_max: float | None
    salary_currency: str
    job_type: str
    experience_level: str
    source_platform: str
    source_url: str | None
    external_id: str
    posted_at: str
    company_logo_url: str | None = None
    requirements: list[str] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JobListing":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class JobMatch:
    job_id: str
    match_score: int
    matched_skills: list[str] = field(default_factory=list)
    match_reasons: list[str] = field(default_factory=list)
    locality: str = "unknown"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JobMatch":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class AggregationStats:
    total: int = 0
    unique: int = 0
    platforms: list[str] = field(default_factory=list)
    failed: int = 0


@dataclass
class AggregationResult:
    jobs: list[JobListing]
    matches: list[JobMatch]
    stats: AggregationStats


@dataclass
class CachedJobs:
    jobs: list[JobListing] = field(default_factory=list)
    matches: list[JobMatch] = field(default_factory=list)
    refreshed_at: str | None = None
