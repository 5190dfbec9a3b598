"""Arbeitnow: free job board API focused on Europe."""
from __future__ import annotations

from jobmatch.dates import coerce_posted_at
from jobmatch.extract import guess_experience_level, short_hash, strip_html
from jobmatch.models import RawJob
from jobmatch.skills import clean_tags
from jobmatch.sources.base import JobSource

API_URL = "https://www.arbeitnow.com/api/job-board-api"
MAX_RESULTS = 20


class ArbeitnowSource(JobSource):
    platform_name = "arbeitnow"

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        data = self._get_json(API_URL, params={"search": query})

        jobs: list[RawJob] = []
        for hit in (data.get("data") or [])[:MAX_RESULTS]:
            title = hit.get("title") or ""
            company = hit.get("company_name") or ""
            tags = hit.get("tags") or []
            jobs.append(
                RawJob(
                    title=title,
                    company_name=company,
                    source_platform=self.platform_name,
                    external_id=hit.get("slug") or f"an-{short_hash(title + company)}",
                    description=strip_html(hit.get("description")),
                    skills_required=clean_tags(tags, limit=30),
                    location=hit.get("location") or None,
                    is_remote=hit.get("remote") is True,
                    salary_currency="EUR",
                    experience_level=guess_experience_level(title),
                    source_url=hit.get("url") or None,
                    # created_at is a unix timestamp in seconds
                    posted_at=coerce_posted_at(hit.get("created_at")) if hit.get("created_at") else None,
                    metadata={"tags": tags},
                )
            )
        return jobs
