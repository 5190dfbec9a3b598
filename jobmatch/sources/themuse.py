"""The Muse: public job API, searched by category and location.

Docs: https://www.themuse.com/developers/api/v2
"""
from __future__ import annotations

from jobmatch.extract import guess_experience_level, strip_html
from jobmatch.models import RawJob
from jobmatch.skills import extract_skills
from jobmatch.sources.base import JobSource

API_URL = "https://www.themuse.com/api/public/jobs"
MAX_RESULTS = 25

# Checked in order against the lowercased query
_CATEGORIES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("data", "analytics"), "Data and Analytics"),
    (("design", "ui", "ux"), "Design and UX"),
    (("product", "pm"), "Product"),
    (("marketing",), "Marketing and PR"),
    (("science", "research"), "Data Science"),
)
DEFAULT_CATEGORY = "Software Engineering"


def map_category(query: str) -> str:
    lower = query.lower()
    for keywords, category in _CATEGORIES:
        if any(k in lower for k in keywords):
            return category
    return DEFAULT_CATEGORY


def _level_names(levels: list) -> list[str]:
    return [(l.get("name") or l.get("short_name") or "").lower() for l in levels if isinstance(l, dict)]


def map_levels(levels: list, title: str) -> tuple[str, str]:
    """(job_type, experience_level) from The Muse ``levels`` plus the title."""
    names = _level_names(levels)
    job_type = "full_time"
    if any("intern" in n for n in names):
        job_type = "internship"
    elif any("part" in n for n in names):
        job_type = "part_time"

    if any("intern" in n or "entry" in n or "junior" in n for n in names):
        level = "entry"
    elif any("senior" in n for n in names):
        level = "senior"
    elif any("management" in n or "director" in n for n in names):
        level = "lead"
    else:
        level = guess_experience_level(title)
    return job_type, level


class TheMuseSource(JobSource):
    platform_name = "themuse"
    location_aware = True

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        params: dict = {"page": 0}
        if query:
            params["category"] = map_category(query)
        if location:
            params["location"] = location
        data = self._get_json(API_URL, params=params)

        jobs: list[RawJob] = []
        for hit in (data.get("results") or [])[:MAX_RESULTS]:
            title = hit.get("name") or ""
            names = [l.get("name") for l in hit.get("locations") or [] if isinstance(l, dict) and l.get("name")]
            loc = ", ".join(names) or None
            description = strip_html(hit.get("contents"))
            job_type, level = map_levels(hit.get("levels") or [], title)
            jobs.append(
                RawJob(
                    title=title,
                    company_name=(hit.get("company") or {}).get("name") or "",
                    source_platform=self.platform_name,
                    external_id=str(hit.get("id") or ""),
                    description=description,
                    skills_required=extract_skills(description),
                    location=loc,
                    is_remote=bool(loc) and ("remote" in loc.lower() or "flexible" in loc.lower()),
                    job_type=job_type,
                    experience_level=level,
                    source_url=(hit.get("refs") or {}).get("landing_page") or None,
                    posted_at=hit.get("publication_date"),
                    metadata={"categories": [c.get("name") for c in hit.get("categories") or [] if isinstance(c, dict)]},
                )
            )
        return jobs
