"""Indeed: scraped per-country job search.

Strategies, first non-empty wins:
  1. RSS feed (feedparser)
  2. Desktop results page: mosaic JSON blob, then JSON-LD, then job cards
  3. Mobile results page
"""
from __future__ import annotations

import json
import re

import feedparser
from bs4 import BeautifulSoup

from jobmatch.dates import coerce_posted_at, parse_relative, to_iso
from jobmatch.extract import (
    guess_experience_level,
    guess_job_type,
    looks_remote,
    map_employment_type,
    positive_number,
    salary_from_text,
    salary_numbers,
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
    match_country,
)

log = get_logger(__name__)

MAX_RESULTS = 25
FRESHNESS = "60"

COUNTRY_DOMAINS: dict[str, str] = {
    "pakistan": "pk", "india": "in", "uk": "uk", "united kingdom": "uk", "britain": "uk",
    "canada": "ca", "australia": "au", "germany": "de", "france": "fr", "italy": "it",
    "netherlands": "nl", "spain": "es", "brazil": "br", "mexico": "mx", "japan": "jp",
    "singapore": "sg", "south africa": "za", "nigeria": "ng", "kenya": "ke",
    "egypt": "eg", "saudi arabia": "sa", "uae": "ae", "united arab emirates": "ae",
    "qatar": "qa", "malaysia": "my", "philippines": "ph", "indonesia": "id",
    "thailand": "th", "vietnam": "vn", "poland": "pl", "turkey": "tr",
    "ireland": "ie", "sweden": "se", "norway": "no", "denmark": "dk", "finland": "fi",
    "switzerland": "ch", "austria": "at", "belgium": "be", "portugal": "pt",
    "argentina": "ar", "chile": "cl", "colombia": "co", "peru": "pe",
    "new zealand": "nz", "china": "cn", "south korea": "kr", "taiwan": "tw",
    "hong kong": "hk", "romania": "ro", "czech": "cz", "hungary": "hu", "greece": "gr",
    "usa": "www", "united states": "www", "us": "www",
}

DOMAIN_CURRENCIES: dict[str, str] = {
    "pk": "PKR", "in": "INR", "uk": "GBP", "ca": "CAD", "au": "AUD",
    "de": "EUR", "fr": "EUR", "it": "EUR", "nl": "EUR", "es": "EUR", "be": "EUR",
    "sg": "SGD", "za": "ZAR", "ae": "AED", "sa": "SAR", "jp": "JPY",
    "br": "BRL", "mx": "MXN", "www": "USD",
}

_RSS_HEADERS = {
    **MOBILE_HEADERS,
    "Accept": "application/rss+xml,application/xml,text/xml,*/*;q=0.1",
}

_MOSAIC_RE = re.compile(
    r'window\.mosaic\.providerData\["mosaic-provider-jobcards"\]\s*=\s*(\{.*?\});\s*</script>',
    re.DOTALL,
)
_JK_RE = re.compile(r"jk=([a-zA-Z0-9]+)")
_RSS_LOCATION_RE = re.compile(
    r"^\s*(?:<[^>]+>)*\s*([A-Z][a-zA-Z\s]+(?:,\s*[A-Z][a-zA-Z\s]+){0,2})\s*[-–—]"
)
_BOLD_LOCATION_RE = re.compile(r"<b>\s*Location:\s*</b>\s*([^<]+)", re.IGNORECASE)
_TITLE_SPLIT_RE = re.compile(r"\s+[-–—]\s+")


def indeed_domain(location: str | None) -> str:
    """Country subdomain for *location*; ``www`` (US) when unknown."""
    return match_country(location, COUNTRY_DOMAINS, "www")


def domain_currency(domain: str) -> str:
    return DOMAIN_CURRENCIES.get(domain, "USD")


def location_from_description(html: str) -> str | None:
    m = _RSS_LOCATION_RE.search(html or "")
    if m:
        return m.group(1).strip()
    m = _BOLD_LOCATION_RE.search(html or "")
    if m:
        return m.group(1).strip()
    return None


def _view_url(domain: str, jk: str) -> str:
    return f"https://{domain}.indeed.com/viewjob?jk={jk}"


def _salary_pair(salary) -> tuple[float | None, float | None]:
    if not salary:
        return None, None
    if isinstance(salary, dict):
        low, high = positive_number(salary.get("min")), positive_number(salary.get("max"))
        if low or high:
            return low, high
        salary = salary.get("text") or ""
    nums = salary_numbers(str(salary))
    return (nums[0] if nums else None), (nums[1] if len(nums) > 1 else None)


class IndeedSource(ScrapingSource):
    platform_name = "indeed"
    timeout = 45.0

    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        domain = indeed_domain(location)
        host = f"https://{domain}.indeed.com"
        params: dict = {"q": query, "sort": "date", "fromage": FRESHNESS}
        if location:
            params["l"] = location

        jobs = self.run_strategies([
            ("rss", lambda: self._try_rss(host, domain, params)),
            ("desktop", lambda: self._try_desktop(host, domain, params)),
            ("mobile", lambda: self._try_mobile(host, domain, params)),
        ])
        if not jobs:
            log.warning("Indeed: 0 jobs from %s for %r", host, query)
        return jobs

    # -- RSS --

    def _try_rss(self, host: str, domain: str, params: dict) -> list[RawJob]:
        body = self._get_page(
            f"{host}/rss",
            params=params,
            headers=_RSS_HEADERS,
            expected_types=("xml", "rss"),
            label="Indeed RSS",
        )
        if body is None:
            return []
        if "<rss" not in body and "<channel" not in body and "<item" not in body:
            log.warning("Indeed RSS: response is not XML")
            return []
        return self.parse_rss(body, domain)

    def parse_rss(self, xml: str, domain: str) -> list[RawJob]:
        feed = feedparser.parse(xml)
        jobs = self.collect(feed.entries[:MAX_RESULTS], lambda entry: self._rss_job(entry, domain))
        if jobs:
            log.info("Indeed RSS: parsed %d jobs from %s", len(jobs), domain)
        return jobs

    def _rss_job(self, entry, domain: str) -> RawJob | None:
        raw_title = (entry.get("title") or "").strip()
        if not raw_title:
            return None
        parts = _TITLE_SPLIT_RE.split(raw_title)
        title = parts[0].strip() or raw_title
        source = (entry.get("source") or {}).get("title") or ""
        company = (parts[-1].strip() if len(parts) > 1 else "") or source or "Unknown"

        summary = entry.get("summary") or entry.get("description") or ""
        loc = location_from_description(summary)
        description = strip_html(summary)[:2000]
        link = entry.get("link") or ""
        m = _JK_RE.search(link)
        jk = m.group(1) if m else f"ind-rss-{short_hash(title + company)}"
        salary_min, salary_max = salary_from_text(description)

        return RawJob(
            title=title,
            company_name=company,
            source_platform=self.platform_name,
            external_id=jk,
            description=description,
            skills_required=extract_skills(description, title),
            location=loc,
            is_remote=looks_remote(loc, title),
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=domain_currency(domain),
            job_type=guess_job_type(title),
            experience_level=guess_experience_level(title),
            source_url=link or _view_url(domain, jk),
            posted_at=coerce_posted_at(entry.get("published")) if entry.get("published") else None,
            metadata={"source": "indeed_rss", "domain": domain},
        )

    # -- desktop page --

    def _try_desktop(self, host: str, domain: str, params: dict) -> list[RawJob]:
        body = self._get_page(
            f"{host}/jobs",
            params={**params, "limit": MAX_RESULTS},
            headers=DESKTOP_HEADERS,
            min_length=5000,
            markers=("captcha", "unusual traffic"),
            label="Indeed desktop",
        )
        if body is None:
            return []
        jobs = self.parse_mosaic(body, domain)
        if jobs:
            return jobs
        soup = BeautifulSoup(body, "html.parser")
        return self.parse_json_ld(soup, domain) or self.parse_cards(soup, domain)

    def parse_mosaic(self, html: str, domain: str) -> list[RawJob]:
        m = _MOSAIC_RE.search(html)
        if not m:
            return []
        try:
            data = json.loads(m.group(1))
        except json.JSONDecodeError:
            return []
        results = _nested(data, "metaData", "mosaicProviderJobCardsModel", "results")
        if not isinstance(results, list):
            log.debug("Indeed mosaic: no results list in the embedded data")
            return []
        return self.collect(results, lambda hit: self._mosaic_job(hit, domain))

    def _mosaic_job(self, hit, domain: str) -> RawJob | None:
        if not isinstance(hit, dict):
            return None
        if not hit.get("title") or not hit.get("company") or not hit.get("jobkey"):
            return None
        title = hit["title"]
        snippet = strip_html(hit.get("snippet"))
        loc = hit.get("formattedLocation") or hit.get("jobLocationCity") or None
        salary_min, salary_max = _salary_pair(hit.get("extractedSalary") or hit.get("salarySnippet"))
        posted = parse_relative(hit.get("formattedRelativeTime"))
        return RawJob(
            title=title,
            company_name=hit["company"],
            source_platform=self.platform_name,
            external_id=hit["jobkey"],
            description=snippet,
            skills_required=extract_skills(snippet, title),
            location=loc,
            is_remote=hit.get("remoteLocation") is True or looks_remote(loc, title),
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=domain_currency(domain),
            job_type=map_employment_type(hit.get("jobTypes")),
            experience_level=guess_experience_level(title),
            source_url=_view_url(domain, hit["jobkey"]),
            posted_at=to_iso(posted) if posted else None,
            company_logo_url=(hit.get("companyBrandingAttributes") or {}).get("logoUrl") or None,
            metadata={"source": "indeed_mosaic", "domain": domain},
        )

    def parse_json_ld(self, soup: BeautifulSoup, domain: str) -> list[RawJob]:
        return self.collect(json_ld_postings(soup), lambda posting: self._ld_job(posting, domain))

    def _ld_job(self, posting: dict, domain: str) -> RawJob | None:
        title = posting.get("title") or posting.get("name") or ""
        if not title:
            return None
        org = posting.get("hiringOrganization") or {}
        company = org.get("name") if isinstance(org, dict) else ""
        description = strip_html(posting.get("description") or "")[:3000]
        salary_min, salary_max, currency = json_ld_salary(posting)
        external_id = json_ld_identifier(posting) or f"ind-ld-{short_hash(title + (company or ''))}"
        return RawJob(
            title=title,
            company_name=company or "",
            source_platform=self.platform_name,
            external_id=external_id,
            description=description,
            skills_required=extract_skills(description, title),
            location=json_ld_location(posting.get("jobLocation")),
            is_remote=posting.get("jobLocationType") == "TELECOMMUTE",
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=currency or domain_currency(domain),
            job_type=map_employment_type(posting.get("employmentType")),
            experience_level=guess_experience_level(title),
            source_url=posting.get("url") or None,
            posted_at=posting.get("datePosted"),
            company_logo_url=(org.get("logo") if isinstance(org, dict) else None) or None,
            metadata={"source": "indeed_jsonld", "domain": domain},
        )

    def parse_cards(self, soup: BeautifulSoup, domain: str) -> list[RawJob]:
        return self.collect(
            soup.select("[data-jk]"), lambda node: self._html_card_job(node, domain), MAX_RESULTS
        )

    def _html_card_job(self, node, domain: str) -> RawJob | None:
        card = _enclosing(node, lambda el: el.find(attrs={"data-testid": "company-name"}))
        if card is None:
            return None
        title = clean_text(card.find(class_=re.compile("jobTitle")))
        company = clean_text(card.find(attrs={"data-testid": "company-name"}))
        loc = clean_text(card.find(attrs={"data-testid": "text-location"}))
        if not title or not company:
            return None
        return self._card_job(domain, node["data-jk"], title, company, loc, "indeed_html")

    # -- mobile page --

    def _try_mobile(self, host: str, domain: str, params: dict) -> list[RawJob]:
        body = self._get_page(
            f"{host}/m/jobs",
            params=params,
            headers=MOBILE_HEADERS,
            min_length=3000,
            label="Indeed mobile",
        )
        if body is None:
            return []
        return self.parse_mobile(BeautifulSoup(body, "html.parser"), domain)

    def parse_mobile(self, soup: BeautifulSoup, domain: str) -> list[RawJob]:
        return self.collect(
            soup.select('a[href*="/m/viewjob?jk="]'), lambda link: self._mobile_job(link, domain), MAX_RESULTS
        )

    def _mobile_job(self, link, domain: str) -> RawJob | None:
        m = _JK_RE.search(link["href"])
        if not m:
            return None
        card = _enclosing(link, lambda el: el.find(class_=re.compile("company")))
        if card is None:
            return None
        title = clean_text(card.find(class_=re.compile("title"))) or clean_text(link)
        company = clean_text(card.find(class_=re.compile("company")))
        loc = clean_text(card.find(class_=re.compile("location")))
        if not title:
            return None
        return self._card_job(domain, m.group(1), title, company, loc, "indeed_mobile")

    def _card_job(
        self, domain: str, jk: str, title: str, company: str, loc: str, origin: str
    ) -> RawJob:
        return RawJob(
            title=title,
            company_name=company or "Unknown",
            source_platform=self.platform_name,
            external_id=jk,
            skills_required=extract_skills(title),
            location=loc or None,
            is_remote=looks_remote(loc, title),
            salary_currency=domain_currency(domain),
            experience_level=guess_experience_level(title),
            source_url=_view_url(domain, jk),
            metadata={"source": origin, "domain": domain},
        )


def _enclosing(node, has, depth: int = 6):
    """Nearest ancestor-or-self of *node* for which ``has(el)`` is truthy."""
    el = node
    for _ in range(depth):
        if el is None:
            return None
        if has(el):
            return el
        el = el.parent
    return None


def _nested(data, *keys):
    """``data[k1][k2]...``, or None where a level is missing or not a dict."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data
