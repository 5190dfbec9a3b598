"""CareerJet: scraped results from the country-specific CareerJet sites."""
from __future__ import annotations

import re

from bs4 import BeautifulSoup

from jobmatch.dates import parse_relative, to_iso
from jobmatch.extract import guess_experience_level, guess_job_type, looks_remote, salary_numbers, short_hash
from jobmatch.log import get_logger
from jobmatch.models import RawJob
from jobmatch.skills import extract_skills
from jobmatch.sources.base import MOBILE_HEADERS, ScrapingSource, clean_text, match_country

log = get_logger(__name__)

DEFAULT_DOMAIN = "careerjet.com"
MAX_RESULTS = 25

COUNTRY_DOMAINS: dict[str, str] = {
    "pakistan": "careerjet.pk",
    "india": "careerjet.co.in",
    "uk": "careerjet.co.uk",
    "united kingdom": "careerjet.co.uk",
    "canada": "careerjet.ca",
    "australia": "careerjet.com.au",
    "germany": "careerjet.de",
    "france": "careerjet.fr",
    "italy": "careerjet.it",
    "netherlands": "careerjet.nl",
    "spain": "careerjet.es",
    "brazil": "careerjet.com.br",
    "mexico": "careerjet.com.mx",
    "japan": "careerjet.jp",
    "singapore": "careerjet.com.sg",
    "south africa": "careerjet.co.za",
    "nigeria": "careerjet.com.ng",
    "egypt": "careerjet.com.eg",
    "saudi arabia": "careerjet.com.sa",
    "uae": "careerjet.ae",
    "united arab emirates": "careerjet.ae",
    "qatar": "careerjet.com.qa",
    "malaysia": "careerjet.com.my",
    "philippines": "careerjet.ph",
    "indonesia": "careerjet.co.id",
    "turkey": "careerjet.com.tr",
    "ireland": "careerjet.ie",
    "sweden": "careerjet.se",
    "new zealand": "careerjet.co.nz",
    "china": "careerjet.cn",
    "hong kong": "careerjet.hk",
    "usa": "careerjet.com",
    "united states": "careerjet.com",
    "us": "careerjet.com",
}

_JOB_CLASS_RE = re.compile(r"\bjob\b")
_COMPANY_RE = re.compile(r"company|employer")
_LOCATION_RE = re.compile(r"location|place|city")
_DATE_RE = re.compile(r"date|time|posted|badge")
_SALARY_RE = re.compile(r"salary|pay|compensation")


def careerjet_domain(location: str | None) -> str:
    return match_country(location, COUNTRY_DOMAINS, DEFAULT_DOMAIN)


class CareerJetSource(ScrapingSource):
    platform_name = "careerjet"
    timeout = 45.0

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        domain = careerjet_domain(location)
        params: dict = {"s": query, "sort": "date", "radius": 50}
        city = location.split(",")[0].strip() if location else ""
        if city:
            params["l"] = city

        jobs = self.run_strategies([
            ("search_page", lambda: self._try_search_page(domain, params)),
        ])
        if jobs:
            log.info("CareerJet: %d jobs from %s", len(jobs), domain)
        return jobs

    def _try_search_page(self, domain: str, params: dict) -> list[RawJob]:
        body = self._get_page(
            f"https://www.{domain}/search/jobs",
            params=params,
            headers=MOBILE_HEADERS,
            min_length=2000,
            label=f"CareerJet ({domain})",
        )
        if body is None:
            return []
        return self.parse_listings(BeautifulSoup(body, "html.parser"), domain)

    def parse_listings(self, soup: BeautifulSoup, domain: str) -> list[RawJob]:
        for tag in ("article", "div"):
            cards = soup.find_all(tag, class_=_JOB_CLASS_RE)
            jobs = self.collect(cards, lambda card: self._parse_card(card, domain), MAX_RESULTS)
            if jobs:
                return jobs
        return self._parse_links(soup, domain)

    def _parse_card(self, card, domain: str) -> RawJob | None:
        heading = card.find(["h2", "h3", "h4"])
        link = (heading.find("a", href=True) if heading is not None else None) or card.find("a", href=True)
        title = clean_text(heading) or clean_text(link)
        if len(title) < 3:
            return None

        company = clean_text(card.find(class_=_COMPANY_RE))
        loc = clean_text(card.find(class_=_LOCATION_RE)) or None
        salary = clean_text(card.find(class_=_SALARY_RE))
        nums = salary_numbers(salary)
        posted = parse_relative(clean_text(card.find(class_=_DATE_RE)))
        return self._job(
            domain,
            title,
            company,
            loc,
            href=link["href"] if link is not None else "",
            salary_min=nums[0] if nums else None,
            salary_max=nums[1] if len(nums) > 1 else None,
            posted_at=to_iso(posted) if posted else None,
        )

    def _parse_links(self, soup: BeautifulSoup, domain: str) -> list[RawJob]:
        return self.collect(
            soup.select('a[href^="/job/"]'), lambda link: self._link_job(link, domain), MAX_RESULTS
        )

    def _link_job(self, link, domain: str) -> RawJob | None:
        title = clean_text(link)
        company_node = link.find_next(class_=_COMPANY_RE)
        loc_node = link.find_next(class_=_LOCATION_RE)
        if not title or company_node is None or loc_node is None:
            return None
        return self._job(domain, title, clean_text(company_node), clean_text(loc_node) or None, href=link["href"])

    def _job(
        self,
        domain: str,
        title: str,
        company: str,
        loc: str | None,
        *,
        href: str = "",
        salary_min: float | None = None,
        salary_max: float | None = None,
        posted_at: str | None = None,
    ) -> RawJob:
        if href.startswith("/"):
            url = f"https://www.{domain}{href}"
        elif href.startswith("http"):
            url = href
        else:
            url = None
        return RawJob(
            title=title,
            company_name=company or "Unknown",
            source_platform=self.platform_name,
            external_id=f"cj-{short_hash(title + company)}",
            skills_required=extract_skills(title),
            location=loc,
            is_remote=looks_remote(loc, title),
            salary_min=salary_min,
            salary_max=salary_max,
            job_type=guess_job_type(title),
            experience_level=guess_experience_level(title),
            source_url=url,
            posted_at=posted_at,
            metadata={"source": "careerjet", "domain": domain},
        )
