"""JSearch (RapidAPI): Google-for-Jobs aggregation behind a RapidAPI key."""
from __future__ import annotations

from jobmatch.extract import guess_experience_level, positive_number
from jobmatch.models import RawJob
from jobmatch.skills import extract_skills
from jobmatch.sources.base import JobSource

API_HOST = "jsearch.p.rapidapi.com"
API_URL = f"https://{API_HOST}/search"

_EMPLOYMENT_TYPES: dict[str, str] = {
    "FULLTIME": "full_time",
    "PARTTIME": "part_time",
    "CONTRACTOR": "contract",
    "INTERN": "internship",
}


class JSearchSource(JobSource):
    platform_name = "jsearch"
    requires_api_key = True
    location_aware = True

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        search = f"{query} in {location}" if location else query
        data = self._get_json(
            API_URL,
            params={"query": search, "page": 1, "num_pages": 1},
            headers={"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": API_HOST},
        )

        jobs: list[RawJob] = []
        for hit in data.get("data") or []:
            title = hit.get("job_title") or ""
            description = hit.get("job_description") or ""
            highlights = hit.get("job_highlights") or {}
            loc = ", ".join(
                str(p) for p in (hit.get("job_city"), hit.get("job_state"), hit.get("job_country")) if p
            )
            jobs.append(
                RawJob(
                    title=title,
                    company_name=hit.get("employer_name") or "",
                    source_platform=self.platform_name,
                    external_id=hit.get("job_id") or "",
                    description=description,
                    skills_required=extract_skills(description),
                    location=loc or None,
                    is_remote=hit.get("job_is_remote") is True,
                    salary_min=positive_number(hit.get("job_min_salary")),
                    salary_max=positive_number(hit.get("job_max_salary")),
                    salary_currency=hit.get("job_salary_currency") or "USD",
                    job_type=_EMPLOYMENT_TYPES.get(hit.get("job_employment_type") or "", "full_time"),
                    experience_level=guess_experience_level(title),
                    source_url=hit.get("job_apply_link") or None,
                    posted_at=hit.get("job_posted_at_datetime_utc"),
                    company_logo_url=hit.get("employer_logo") or None,
                    requirements=list(highlights.get("Qualifications") or []),
                    metadata={
                        "publisher": hit.get("job_publisher"),
                        "benefits": highlights.get("Benefits"),
                    },
                )
            )
        return jobs
