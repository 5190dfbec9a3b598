"""Jooble: job search aggregator; POST API keyed by the path segment."""
from __future__ import annotations

import requests

from jobmatch.extract import (
    guess_experience_level,
    looks_remote,
    map_employment_type,
    parse_salary_range,
    short_hash,
    strip_html,
)
from jobmatch.models import RawJob
from jobmatch.skills import extract_skills
from jobmatch.sources.base import JobSource

API_URL = "https://jooble.org/api"
MAX_RESULTS = 50


class JoobleSource(JobSource):
    platform_name = "jooble"
    requires_api_key = True
    location_aware = True

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        body: dict = {"keywords": query, "page": "1"}
        if location:
            body["location"] = location
        r = requests.post(f"{API_URL}/{self.api_key}", json=body, timeout=self.timeout)
        r.raise_for_status()
        data = r.json()

        jobs: list[RawJob] = []
        for hit in (data.get("jobs") or [])[:MAX_RESULTS]:
            title = hit.get("title") or ""
            company = hit.get("company") or ""
            snippet = strip_html(hit.get("snippet"))
            salary_min, salary_max = parse_salary_range(hit.get("salary"))
            loc = hit.get("location") or ""
            external_id = str(hit["id"]) if hit.get("id") else f"jooble-{short_hash(f'{title}-{company}-{loc}')}"
            jobs.append(
                RawJob(
                    title=title,
                    company_name=company,
                    source_platform=self.platform_name,
                    external_id=external_id,
                    description=snippet,
                    skills_required=extract_skills(snippet),
                    location=hit.get("location") or None,
                    is_remote=looks_remote(hit.get("location"), title),
                    salary_min=salary_min,
                    salary_max=salary_max,
                    job_type=map_employment_type(hit.get("type")),
                    experience_level=guess_experience_level(title),
                    source_url=hit.get("link") or None,
                    posted_at=hit.get("updated"),
                    metadata={"source": hit.get("source")},
                )
            )
        return jobs
