"""Himalayas: free remote jobs API, no key required.

Docs: https://himalayas.app/api
"""
from __future__ import annotations

from jobmatch.extract import guess_experience_level, map_employment_type, positive_number, strip_html
from jobmatch.models import RawJob
from jobmatch.skills import clean_tags, extract_skills
from jobmatch.sources.base import JobSource

API_URL = "https://himalayas.app/jobs/api"
MAX_SKILLS = 15


def collect_skills(categories: list, tags: list, description: str) -> list[str]:
    """Categories and tags as skills, topped up from the description when sparse."""
    skills = clean_tags(list(categories) + list(tags), limit=MAX_SKILLS)
    if len(skills) < 3:
        for term in extract_skills(description):
            if term not in skills:
                skills.append(term)
    return skills[:MAX_SKILLS]


class HimalayasSource(JobSource):
    platform_name = "himalayas"

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        data = self._get_json(API_URL, params={"limit": 25, "q": query})

        jobs: list[RawJob] = []
        for hit in data.get("jobs", []):
            title = hit.get("title") or ""
            company = hit.get("companyName") or hit.get("company_name") or ""
            description = strip_html(hit.get("description"))
            categories = hit.get("categories") or []
            tags = hit.get("tags") or []
            jobs.append(
                RawJob(
                    title=title,
                    company_name=company,
                    source_platform=self.platform_name,
                    external_id=str(hit.get("id") or hit.get("slug") or f"{title}-{company}"),
                    description=description,
                    skills_required=collect_skills(categories, tags, description),
                    location=hit.get("location") or None,
                    is_remote=True,
                    salary_min=positive_number(hit.get("minSalary")),
                    salary_max=positive_number(hit.get("maxSalary")),
                    salary_currency=hit.get("salaryCurrency") or "USD",
                    job_type=map_employment_type(hit.get("type")),
                    experience_level=guess_experience_level(title, hit.get("seniority")),
                    source_url=hit.get("applicationUrl") or hit.get("url") or None,
                    posted_at=hit.get("pubDate") or hit.get("publishedAt") or hit.get("created_at"),
                    company_logo_url=hit.get("companyLogo") or None,
                    metadata={"categories": categories, "tags": tags},
                )
            )
        return jobs
