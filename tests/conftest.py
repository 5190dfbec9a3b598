"""
Pytest configuration and shared fixtures

Fixtures here build profiles, raw records and canonical listings without
touching the network. HTTP in adapter tests is always patched.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Keep test runs from writing daily log files into the repo
os.environ.setdefault("JOBMATCH_NO_LOG_FILE", "1")

from jobmatch.cache import JobCache  # noqa: E402
from jobmatch.dates import to_iso  # noqa: E402
from jobmatch.models import JobListing, RawJob, UserProfile  # noqa: E402
from jobmatch.normalizer import derive_job_id  # noqa: E402

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no I/O beyond tmp_path")
    config.addinivalue_line("markers", "integration: end-to-end aggregation with in-process sources")


@pytest.fixture
def now() -> datetime:
    """Fixed clock used for freshness and posted-at checks."""
    return NOW


@pytest.fixture
def profile() -> UserProfile:
    """
    A mid-career frontend developer in Karachi.

    Returns:
        UserProfile: profile with skills, desired types, locations and salary
    """
    return UserProfile(
        full_name="Ayesha Khan",
        headline="React Developer",
        location="Karachi, Pakistan",
        skills=["React", "TypeScript", "Node.js", "AWS"],
        experience_years=4,
        desired_job_types=["full_time", "remote"],
        desired_locations=["Karachi", "Remote"],
        desired_salary_min=60000,
        desired_salary_max=90000,
    )


@pytest.fixture
def make_raw():
    """Factory for RawJob records with sensible defaults."""

    def _make(**overrides) -> RawJob:
        data = dict(
            title="Frontend Engineer",
            company_name="Acme",
            source_platform="remotive",
            external_id="1",
            description="Build UIs with React",
            skills_required=["React"],
            location="Karachi, Pakistan",
            posted_at=to_iso(NOW - timedelta(days=2)),
        )
        data.update(overrides)
        return RawJob(**data)

    return _make


@pytest.fixture
def make_listing():
    """Factory for canonical JobListing values."""

    def _make(**overrides) -> JobListing:
        platform = overrides.get("source_platform", "remotive")
        external_id = overrides.get("external_id", "1")
        data = dict(
            id=derive_job_id(platform, external_id),
            title="Frontend Engineer",
            company_name="Acme",
            description="",
            skills_required=["React"],
            location="Karachi, Pakistan",
            is_remote=False,
            salary_min=None,
            salary_max=None,
            salary_currency="USD",
            job_type="full_time",
            experience_level="mid",
            source_platform=platform,
            source_url="https://example.com/jobs/1",
            external_id=external_id,
            posted_at=to_iso(NOW - timedelta(days=2)),
            created_at=to_iso(NOW),
        )
        data.update(overrides)
        return JobListing(**data)

    return _make


@pytest.fixture
def cache(tmp_path) -> JobCache:
    """Job cache isolated in a temporary directory."""
    return JobCache(tmp_path / "jobs_cache.json")
