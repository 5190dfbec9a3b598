"""Jobicy: free remote-jobs API searched by tag."""
from __future__ import annotations

from jobmatch.extract import guess_experience_level, map_employment_type, positive_number, strip_html
from jobmatch.models import RawJob
from jobmatch.skills import extract_skills
from jobmatch.sources.base import JobSource

API_URL = "https://jobicy.com/api/v2/remote-jobs"
MAX_RESULTS = 25

_LEVEL_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("entry", ("entry", "junior")),
    ("senior", ("senior", "sr")),
    ("lead", ("lead", "manager", "director")),
    ("executive", ("executive", "vp", "chief")),
    ("mid", ("mid",)),
)


def map_job_level(level: str | None, title: str) -> str:
    """Jobicy's ``jobLevel`` when recognizable, else a guess from the title."""
    if level:
        lower = level.lower()
        for name, keywords in _LEVEL_KEYWORDS:
            if any(k in lower for k in keywords):
                return name
    return guess_experience_level(title)


class JobicySource(JobSource):
    platform_name = "jobicy"

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        params: dict = {"count": 50}
        if query:
            params["tag"] = query
        data = self._get_json(API_URL, params=params)

        jobs: list[RawJob] = []
        for hit in (data.get("jobs") or [])[:MAX_RESULTS]:
            title = hit.get("jobTitle") or ""
            description = strip_html(hit.get("jobDescription") or hit.get("jobExcerpt"))
            jobs.append(
                RawJob(
                    title=title,
                    company_name=hit.get("companyName") or "",
                    source_platform=self.platform_name,
                    external_id=str(hit.get("id") or ""),
                    description=description,
                    skills_required=extract_skills(description),
                    location=hit.get("jobGeo") or "Remote",
                    is_remote=True,
                    salary_min=positive_number(hit.get("annualSalaryMin")),
                    salary_max=positive_number(hit.get("annualSalaryMax")),
                    salary_currency=hit.get("salaryCurrency") or "USD",
                    job_type=map_employment_type(hit.get("jobType")),
                    experience_level=map_job_level(hit.get("jobLevel"), title),
                    source_url=hit.get("url") or None,
                    posted_at=hit.get("pubDate"),
                    company_logo_url=hit.get("companyLogo") or None,
                    metadata={"industry": hit.get("jobIndustry")},
                )
            )
        return jobs
