"""Gemini with Google Search grounding, used as a job search engine.

The grounded call asks the model to search the web for current openings.
When grounding is unavailable the model is asked for typical openings from
its own knowledge instead. Replies are free text that should hold a JSON
array; parsing tolerates fences, prose and minor JSON damage.
"""
from __future__ import annotations

import json
import re
from typing import Any

import requests

from jobmatch.dates import coerce_posted_at, utcnow
from jobmatch.extract import currency_from_text, guess_experience_level, salary_numbers, short_hash
from jobmatch.log import get_logger
from jobmatch.models import JOB_TYPES, RawJob
from jobmatch.sources.base import JobSource

log = get_logger(__name__)

API_URL = "https://generativelanguage.googleapis.com/v1beta"
GROUNDED_MODELS: tuple[str, ...] = ("gemini-2.0-flash", "gemini-2.5-flash")
FALLBACK_MODEL = "gemini-2.0-flash"

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_OBJECT_RE = re.compile(
    r'\{[^{}]*"title"\s*:\s*"[^"]+?"[^{}]*"company_name"\s*:\s*"[^"]+?"[^{}]*\}'
)

_JOB_TYPE_ALIASES: dict[str, str] = {
    "fulltime": "full_time",
    "parttime": "part_time",
    "contractor": "contract",
    "intern": "internship",
}

_FIELDS = """For each job, provide a JSON object with these fields:
- title: job title
- company_name: company name
- location: city, country
- is_remote: true/false
- job_type: full_time, part_time, contract, internship, or freelance
- salary: salary range if mentioned (e.g. "50000-80000 USD") or empty string
- apply_url: link to apply or empty string
- posted_date: {posted}
- skills: array of required skills/technologies"""


def grounded_prompt(query: str, location: str | None) -> str:
    where = f" in {location}" if location else ""
    fields = _FIELDS.format(posted='when posted (ISO date or relative like "3 days ago")')
    return (
        f'Search for 15 current job openings for "{query}"{where}.\n\n{fields}\n\n'
        "Return ONLY a JSON array. No markdown, no explanation."
    )


def knowledge_prompt(query: str, location: str | None) -> str:
    where = f" in {location}" if location else ""
    fields = _FIELDS.format(posted=f'"{utcnow().date().isoformat()}"')
    return (
        f'You are a job market expert. List 10 realistic, currently active job openings for "{query}"{where}.\n\n'
        "Use your knowledge of real companies that typically hire for this role in this location.\n\n"
        f"{fields}\n\nReturn ONLY a JSON array. No markdown fences, no explanation."
    )


def response_text(data: dict) -> str:
    """All text parts of all candidates, newline-joined."""
    chunks: list[str] = []
    for candidate in data.get("candidates") or []:
        for part in ((candidate or {}).get("content") or {}).get("parts") or []:
            if part.get("text"):
                chunks.append(part["text"])
    return "\n".join(chunks)


def parse_items(text: str) -> list[dict]:
    """Recover the list of job objects from a model reply."""
    body = text
    m = _FENCE_RE.search(body)
    if m:
        body = m.group(1).strip()
    start, end = body.find("["), body.rfind("]")
    if start != -1 and end > start:
        body = body[start:end + 1]

    try:
        items = json.loads(body)
    except json.JSONDecodeError:
        fixed = re.sub(r",\s*]", "]", body)
        fixed = re.sub(r",\s*}", "}", fixed).replace("'", '"')
        try:
            items = json.loads(fixed)
        except json.JSONDecodeError:
            log.warning("GeminiSearch: failed to parse JSON from response")
            items = []
            for obj in _OBJECT_RE.findall(text):
                try:
                    items.append(json.loads(obj))
                except json.JSONDecodeError:
                    continue
    if not isinstance(items, list):
        return []
    return [i for i in items if isinstance(i, dict) and i.get("title") and i.get("company_name")]


def normalize_job_type(value: Any) -> str:
    key = re.sub(r"[\s-]", "_", str(value or "").lower())
    key = _JOB_TYPE_ALIASES.get(key, key)
    return key if key in JOB_TYPES and key != "remote" else "full_time"


def sanitize_url(url: Any) -> str | None:
    if isinstance(url, str) and url.startswith(("http://", "https://")):
        return url
    return None


def _truthy(value: Any) -> bool:
    return value is True or str(value).lower() == "true"


class GeminiSearchSource(JobSource):
    platform_name = "gemini_search"
    requires_api_key = True
    searchable = False
    location_aware = True
    rate_limited = True

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        jobs = self._try_grounded(query, location)
        if jobs:
            return jobs
        return self._try_knowledge(query, location)

    def _generate(self, model: str, body: dict, timeout: float) -> requests.Response:
        return requests.post(
            f"{API_URL}/models/{model}:generateContent",
            params={"key": self.api_key},
            json=body,
            timeout=timeout,
        )

    def _try_grounded(self, query: str, location: str | None) -> list[RawJob]:
        body = {
            "contents": [{"role": "user", "parts": [{"text": grounded_prompt(query, location)}]}],
            "tools": [{"google_search": {}}],
            "generationConfig": {"temperature": 0.1, "maxOutputTokens": 8192},
        }
        for model in GROUNDED_MODELS:
            try:
                r = self._generate(model, body, timeout=30)
            except requests.RequestException as exc:
                log.warning("GeminiSearch grounded %s error: %s", model, exc)
                continue
            if not r.ok:
                log.warning("GeminiSearch grounded %s: %d %s", model, r.status_code, r.text[:200])
                # Grounding tool not available for this key
                if r.status_code in (400, 404):
                    break
                continue
            jobs = self._jobs_from(r)
            if jobs:
                log.info("GeminiSearch grounded (%s): %d jobs", model, len(jobs))
                return jobs
        return []

    def _try_knowledge(self, query: str, location: str | None) -> list[RawJob]:
        body = {
            "contents": [{"role": "user", "parts": [{"text": knowledge_prompt(query, location)}]}],
            "generationConfig": {"temperature": 0.3, "maxOutputTokens": 8192},
        }
        try:
            r = self._generate(FALLBACK_MODEL, body, timeout=25)
        except requests.RequestException as exc:
            log.warning("GeminiSearch knowledge fallback error: %s", exc)
            return []
        if not r.ok:
            log.warning("GeminiSearch knowledge fallback: %d", r.status_code)
            return []
        jobs = self._jobs_from(r)
        if jobs:
            log.info("GeminiSearch knowledge fallback: %d jobs", len(jobs))
        return jobs

    def _jobs_from(self, response: requests.Response) -> list[RawJob]:
        try:
            data = response.json()
        except ValueError:
            return []
        text = response_text(data)
        if not text.strip():
            return []
        return [self._to_raw(item) for item in parse_items(text)]

    def _to_raw(self, item: dict) -> RawJob:
        title = str(item["title"]).strip()
        company = str(item["company_name"]).strip()
        loc = item.get("location") or None
        loc_key = loc or ""
        salary = item.get("salary") if isinstance(item.get("salary"), str) else ""
        nums = salary_numbers(salary)
        skills = item.get("skills") if isinstance(item.get("skills"), list) else []
        return RawJob(
            title=title,
            company_name=company,
            source_platform=self.platform_name,
            external_id=f"gs-{short_hash(f'{title}-{company}-{loc_key}')}",
            skills_required=[s for s in skills if isinstance(s, str)],
            location=loc,
            is_remote=_truthy(item.get("is_remote")),
            salary_min=nums[0] if nums else None,
            salary_max=nums[1] if len(nums) > 1 else None,
            salary_currency=currency_from_text(salary),
            job_type=normalize_job_type(item.get("job_type")),
            experience_level=guess_experience_level(title),
            source_url=sanitize_url(item.get("apply_url")),
            posted_at=coerce_posted_at(item.get("posted_date")) if item.get("posted_date") else None,
            metadata={"source": "google_search_grounding"},
        )
