"""SearchAPI.io: Google Jobs results through the ``google_jobs`` engine."""
from __future__ import annotations

from jobmatch.dates import parse_relative, to_iso
from jobmatch.extract import (
    guess_experience_level,
    looks_remote,
    map_employment_type,
    parse_salary_range,
    strip_html,
)
from jobmatch.models import RawJob
from jobmatch.skills import extract_skills
from jobmatch.sources.base import JobSource

API_URL = "https://www.searchapi.io/api/v1/search"
MAX_RESULTS = 30


def _highlight(highlights: list, title: str) -> list[str]:
    for h in highlights:
        if isinstance(h, dict) and h.get("title") == title:
            return list(h.get("items") or [])
    return []


def _apply_url(hit: dict) -> str | None:
    links = hit.get("apply_links") or []
    first = links[0].get("link") if links and isinstance(links[0], dict) else None
    return hit.get("apply_link") or first or hit.get("sharing_link") or None


class SearchAPISource(JobSource):
    platform_name = "searchapi"
    requires_api_key = True
    location_aware = True

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        params: dict = {"engine": "google_jobs", "q": query, "api_key": self.api_key}
        if location:
            params["location"] = location
        data = self._get_json(API_URL, params=params)

        jobs: list[RawJob] = []
        for hit in (data.get("jobs") or [])[:MAX_RESULTS]:
            ext = hit.get("detected_extensions") or {}
            highlights = hit.get("job_highlights") if isinstance(hit.get("job_highlights"), list) else []
            qualifications = _highlight(highlights, "Qualifications")
            title = hit.get("title") or ""
            company = hit.get("company_name") or ""
            description = strip_html(hit.get("description"))
            salary_min, salary_max = parse_salary_range(ext.get("salary"), hourly_to_annual=True)
            posted = parse_relative(ext.get("posted_at"))
            jobs.append(
                RawJob(
                    title=title,
                    company_name=company,
                    source_platform=self.platform_name,
                    external_id=hit.get("sharing_link") or f"searchapi-{title[:30]}-{company}",
                    description=description,
                    skills_required=extract_skills(description, " ".join(qualifications)),
                    location=hit.get("location") or None,
                    is_remote=ext.get("work_from_home") is True
                    or looks_remote(hit.get("location"), title)
                    or "anywhere" in (hit.get("location") or "").lower(),
                    salary_min=salary_min,
                    salary_max=salary_max,
                    job_type=map_employment_type(ext.get("schedule")),
                    experience_level=guess_experience_level(title, " ".join(qualifications), use_years=True),
                    source_url=_apply_url(hit),
                    posted_at=to_iso(posted) if posted else None,
                    company_logo_url=hit.get("thumbnail") or None,
                    requirements=qualifications,
                    metadata={
                        "via": hit.get("via"),
                        "extensions": hit.get("extensions"),
                        "responsibilities": _highlight(highlights, "Responsibilities") or None,
                    },
                )
            )
        return jobs
