"""RemoteOK: public JSON feed of remote jobs, filtered by a single tag."""
from __future__ import annotations

from jobmatch.extract import guess_experience_level, positive_number, strip_html
from jobmatch.models import RawJob
from jobmatch.sources.base import JobSource

API_URL = "https://remoteok.com/api"
MAX_RESULTS = 50

_TAG_TERMS: frozenset[str] = frozenset({
    "react", "angular", "vue", "node", "python", "java", "typescript", "javascript",
    "golang", "go", "rust", "ruby", "php", "swift", "kotlin", "flutter", "aws",
    "devops", "frontend", "backend", "fullstack", "ios", "android", "data", "ml",
    "ai", "design", "product", "marketing", "sales", "engineer", "developer",
    "docker", "kubernetes", "cloud", "security", "qa", "testing",
})

_SKILL_TAGS: frozenset[str] = frozenset({
    "javascript", "typescript", "python", "java", "go", "rust", "ruby", "php",
    "swift", "kotlin", "react", "angular", "vue", "node", "django", "flask",
    "aws", "azure", "gcp", "docker", "kubernetes", "sql", "mongodb", "postgresql",
    "git", "devops", "graphql", "redis", "elasticsearch", "terraform",
})


def query_tag(query: str) -> str:
    """First word of *query* that RemoteOK knows as a tag, else the first word."""
    words = query.lower().split()
    for word in words:
        if word in _TAG_TERMS:
            return word
    return words[0] if words else ""


class RemoteOKSource(JobSource):
    platform_name = "remoteok"

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        tag = query_tag(query)
        data = self._get_json(
            API_URL,
            params={"tags": tag} if tag else None,
            headers={"User-Agent": "JobMatch/1.0"},
        )
        # The first element is a legal notice, not a job
        hits = [h for h in (data if isinstance(data, list) else []) if isinstance(h, dict) and h.get("position")]

        jobs: list[RawJob] = []
        for hit in hits[:MAX_RESULTS]:
            title = hit.get("position") or ""
            tags = [t for t in (hit.get("tags") or []) if isinstance(t, str)]
            jobs.append(
                RawJob(
                    title=title,
                    company_name=hit.get("company") or "",
                    source_platform=self.platform_name,
                    external_id=str(hit.get("id") or hit.get("slug") or ""),
                    description=strip_html(hit.get("description")),
                    skills_required=[t[:1].upper() + t[1:] for t in tags if t.lower() in _SKILL_TAGS],
                    location=hit.get("location") or "Remote",
                    is_remote=True,
                    salary_min=positive_number(hit.get("salary_min")),
                    salary_max=positive_number(hit.get("salary_max")),
                    experience_level=guess_experience_level(title, " ".join(tags)),
                    source_url=hit.get("url") or hit.get("apply_url") or None,
                    posted_at=hit.get("date"),
                    company_logo_url=hit.get("company_logo") or hit.get("logo") or None,
                    metadata={"tags": tags},
                )
            )
        return jobs
