"""LinkedIn: public guest job search, no login.

Strategies, first non-empty wins:
  1. Guest API (``seeMoreJobPostings``), which returns bare HTML job cards
  2. Public search page: JSON-LD, then the same job cards
"""
from __future__ import annotations

import re

from bs4 import BeautifulSoup

from jobmatch.extract import (
    guess_experience_level,
    guess_job_type,
    looks_remote,
    map_employment_type,
    short_hash,
    strip_html,
)
from jobmatch.log import get_logger
from jobmatch.models import RawJob
from jobmatch.skills import extract_skills
from jobmatch.sources.base import (
    DESKTOP_HEADERS,
    MOBILE_HEADERS,
    ScrapingSource,
    clean_text,
    json_ld_identifier,
    json_ld_location,
    json_ld_postings,
    json_ld_salary,
)

log = get_logger(__name__)

GUEST_API_URL = "https://www.linkedin.com/jobs-guest/jobs/api/seeMoreJobPostings/search"
SEARCH_URL = "https://www.linkedin.com/jobs/search"
MAX_RESULTS = 25

_CARD_CLASS_RE = re.compile(r"base-card|job-search-card")
_VIEW_RE = re.compile(r"(https://\w+\.linkedin\.com/jobs/view/[^\"?]+)")
_VIEW_ID_RE = re.compile(r"/view/([^/?]+)")


def _first(card, *selectors: str) -> str:
    for selector in selectors:
        text = clean_text(card.select_one(selector))
        if text:
            return text
    return ""


class LinkedInSource(ScrapingSource):
    platform_name = "linkedin"
    timeout = 45.0

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        params: dict = {"keywords": query}
        if location:
            params["location"] = location
        return self.run_strategies([
            ("guest_api", lambda: self._try_guest_api(params)),
            ("search_page", lambda: self._try_search_page(params)),
        ])

    def _try_guest_api(self, params: dict) -> list[RawJob]:
        body = self._get_page(
            GUEST_API_URL,
            params={**params, "start": 0, "sortBy": "DD"},
            headers=MOBILE_HEADERS,
            min_length=200,
            markers=("captcha", "challenge"),
            label="LinkedIn guest API",
        )
        if body is None:
            return []
        return self.parse_cards(BeautifulSoup(body, "html.parser"))

    def _try_search_page(self, params: dict) -> list[RawJob]:
        body = self._get_page(
            SEARCH_URL,
            params=params,
            headers=DESKTOP_HEADERS,
            min_length=2000,
            label="LinkedIn search page",
        )
        if body is None:
            return []
        soup = BeautifulSoup(body, "html.parser")
        return self.parse_json_ld(soup) or self.parse_cards(soup)

    def parse_cards(self, soup: BeautifulSoup) -> list[RawJob]:
        cards = [
            li for li in soup.find_all("li")
            if _CARD_CLASS_RE.search(" ".join(li.get("class") or [])) or li.find(class_=_CARD_CLASS_RE)
        ]
        jobs = self.collect(cards, self._parse_card, MAX_RESULTS)
        if jobs:
            log.info("LinkedIn: parsed %d job cards", len(jobs))
        return jobs

    def _parse_card(self, card) -> RawJob | None:
        title = _first(card, ".base-search-card__title", ".sr-only")
        if not title:
            return None
        company = _first(card, ".base-search-card__subtitle", ".hidden-nested-link")
        loc = _first(card, ".job-search-card__location", ".base-search-card__metadata")

        url = None
        link = card.find("a", href=_VIEW_RE)
        if link is not None:
            url = _VIEW_RE.search(link["href"]).group(1)
        m = _VIEW_ID_RE.search(url or "")
        job_id = m.group(1) if m else f"li-{short_hash(title + company)}"

        time_tag = card.find("time", attrs={"datetime": True})
        logo = card.find("img", attrs={"data-delayed-url": True})
        logo_url = logo["data-delayed-url"] if logo is not None else None
        if logo_url is None:
            img = card.find("img", src=re.compile(r"^https://media\.licdn"))
            logo_url = img["src"] if img is not None else None

        return RawJob(
            title=title,
            company_name=company or "Unknown",
            source_platform=self.platform_name,
            external_id=job_id,
            skills_required=extract_skills(title),
            location=loc or None,
            is_remote=looks_remote(loc, title),
            job_type=guess_job_type(title),
            experience_level=guess_experience_level(title),
            source_url=url,
            posted_at=time_tag["datetime"] if time_tag is not None else None,
            company_logo_url=logo_url,
            metadata={"source": "linkedin_guest"},
        )

    def parse_json_ld(self, soup: BeautifulSoup) -> list[RawJob]:
        return self.collect(json_ld_postings(soup), self._ld_job)

    def _ld_job(self, posting: dict) -> RawJob | None:
        title = posting.get("title") or ""
        if not title:
            return None
        org = posting.get("hiringOrganization") or {}
        company = (org.get("name") if isinstance(org, dict) else "") or ""
        description = strip_html(posting.get("description"))[:3000]
        salary_min, salary_max, currency = json_ld_salary(posting)
        return RawJob(
            title=title,
            company_name=company,
            source_platform=self.platform_name,
            external_id=json_ld_identifier(posting) or f"li-ld-{short_hash(title + company)}",
            description=description,
            skills_required=extract_skills(title, description),
            location=json_ld_location(posting.get("jobLocation")),
            is_remote=posting.get("jobLocationType") == "TELECOMMUTE",
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=currency or "USD",
            job_type=map_employment_type(posting.get("employmentType")),
            experience_level=guess_experience_level(title),
            source_url=posting.get("url") or None,
            posted_at=posting.get("datePosted"),
            company_logo_url=(org.get("logo") if isinstance(org, dict) else None) or None,
            metadata={"source": "linkedin_jsonld"},
        )
