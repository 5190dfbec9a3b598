"""Remotive: free API for remote tech jobs (no API key required).

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

from jobmatch.extract import guess_experience_level, strip_html
from jobmatch.models import RawJob
from jobmatch.skills import clean_tags
from jobmatch.sources.base import JobSource

API_URL = "https://remotive.com/api/remote-jobs"

_JOB_TYPES: dict[str, str] = {
    "full_time": "full_time",
    "contract": "contract",
    "part_time": "part_time",
    "freelance": "freelance",
    "internship": "internship",
}


class RemotiveSource(JobSource):
    platform_name = "remotive"

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        data = self._get_json(API_URL, params={"search": query, "limit": 20})

        jobs: list[RawJob] = []
        for hit in data.get("jobs", []):
            title = hit.get("title") or ""
            tags = hit.get("tags") or []
            jobs.append(
                RawJob(
                    title=title,
                    company_name=hit.get("company_name") or "",
                    source_platform=self.platform_name,
                    external_id=str(hit.get("id") or ""),
                    description=strip_html(hit.get("description")),
                    skills_required=clean_tags(tags, limit=30),
                    location=hit.get("candidate_required_location") or None,
                    is_remote=True,
                    job_type=_JOB_TYPES.get((hit.get("job_type") or "").lower(), "full_time"),
                    experience_level=guess_experience_level(title),
                    source_url=hit.get("url") or None,
                    posted_at=hit.get("publication_date"),
                    company_logo_url=hit.get("company_logo") or None,
                    metadata={"category": hit.get("category"), "tags": tags},
                )
            )
        return jobs
