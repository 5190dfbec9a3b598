"""Adzuna: job search aggregator with per-country endpoints.

Free tier: 250 requests/day. Sign up at https://developer.adzuna.com/
"""
from __future__ import annotations

from jobmatch.extract import guess_experience_level, map_employment_type, positive_number
from jobmatch.models import RawJob
from jobmatch.sources.base import JobSource, match_country

BASE_URL = "https://api.adzuna.com/v1/api/jobs"
DEFAULT_COUNTRY = "us"

COUNTRY_CODES: dict[str, str] = {
    "australia": "au",
    "austria": "at",
    "brazil": "br",
    "canada": "ca",
    "germany": "de",
    "france": "fr",
    "uk": "gb",
    "united kingdom": "gb",
    "britain": "gb",
    "india": "in",
    "italy": "it",
    "netherlands": "nl",
    "new zealand": "nz",
    "poland": "pl",
    "russia": "ru",
    "singapore": "sg",
    "united states": "us",
    "usa": "us",
    "us": "us",
    "south africa": "za",
    # No Pakistan endpoint; gb has the broadest international coverage
    "pakistan": "gb",
}

_TITLE_TECH: tuple[str, ...] = ("Python", "Java", "React", "Node", "AWS", "SQL", "Docker", "Kubernetes")


def country_code(location: str | None) -> str:
    return match_country(location, COUNTRY_CODES, DEFAULT_COUNTRY)


class AdzunaSource(JobSource):
    platform_name = "adzuna"
    requires_api_key = True
    location_aware = True

    def __init__(self, app_id: str, app_key: str) -> None:
        self.app_id = app_id
        self.app_key = app_key

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        params: dict = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "what": query,
            "results_per_page": 20,
            "content-type": "application/json",
        }
        if location:
            params["where"] = location
        data = self._get_json(f"{BASE_URL}/{country_code(location)}/search/1", params=params)

        jobs: list[RawJob] = []
        for hit in data.get("results", []):
            title = hit.get("title") or ""
            description = hit.get("description") or ""
            category = hit.get("category") or {}
            skills = [category["tag"]] if category.get("tag") else []
            skills += [t for t in _TITLE_TECH if t.lower() in title.lower()]
            jobs.append(
                RawJob(
                    title=title,
                    company_name=(hit.get("company") or {}).get("display_name") or "",
                    source_platform=self.platform_name,
                    external_id=str(hit.get("id") or ""),
                    description=description,
                    skills_required=skills,
                    location=(hit.get("location") or {}).get("display_name") or None,
                    is_remote="remote" in title.lower() or "remote" in description.lower(),
                    salary_min=positive_number(hit.get("salary_min")),
                    salary_max=positive_number(hit.get("salary_max")),
                    job_type=map_employment_type(hit.get("contract_type")),
                    experience_level=guess_experience_level(title),
                    source_url=hit.get("redirect_url") or None,
                    posted_at=hit.get("created"),
                    metadata={"category": category},
                )
            )
        return jobs
