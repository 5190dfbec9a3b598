"""JoinRise: public jobs API with AI-generated description breakdowns."""
from __future__ import annotations

from jobmatch.extract import guess_experience_level, map_employment_type, positive_number
from jobmatch.models import RawJob
from jobmatch.sources.base import JobSource

API_URL = "https://api.joinrise.io/api/v1/jobs/public"


class JoinRiseSource(JobSource):
    platform_name = "joinrise"

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        params: dict = {
            "page": 1,
            "limit": 30,
            "sort": "desc",
            "sortedBy": "createdAt",
            "department": "Software Engineering",
        }
        if query:
            params["search"] = query
        data = self._get_json(API_URL, params=params)

        jobs: list[RawJob] = []
        for hit in (data.get("result") or {}).get("jobs", []):
            breakdown = hit.get("descriptionBreakdown") or {}
            owner = hit.get("owner") or {}
            work_model = (breakdown.get("workModel") or hit.get("type") or "").lower()
            title = hit.get("title") or ""
            jobs.append(
                RawJob(
                    title=title,
                    company_name=owner.get("companyName") or "",
                    source_platform=self.platform_name,
                    external_id=hit.get("_id") or "",
                    description=breakdown.get("oneSentenceJobSummary") or title,
                    skills_required=list(breakdown.get("keywords") or [])[:10],
                    location=hit.get("locationAddress") or None,
                    is_remote="remote" in work_model,
                    salary_min=positive_number(breakdown.get("salaryRangeMinYearly")),
                    salary_max=positive_number(breakdown.get("salaryRangeMaxYearly")),
                    job_type=map_employment_type(breakdown.get("employmentType") or hit.get("type")),
                    experience_level=guess_experience_level(hit.get("seniority")),
                    source_url=hit.get("url") or None,
                    posted_at=hit.get("createdAt"),
                    company_logo_url=owner.get("photo") or None,
                    requirements=list(hit.get("skills_suggest") or [])[:5],
                    metadata={"department": hit.get("department"), "work_model": breakdown.get("workModel")},
                )
            )
        return jobs
