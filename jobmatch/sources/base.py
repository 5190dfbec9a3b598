"""Source interface plus the HTTP and parsing helpers shared by adapters."""
from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable

import requests
from bs4 import BeautifulSoup

from jobmatch.log import get_logger
from jobmatch.models import RawJob

log = get_logger(__name__)

MOBILE_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Linux; Android 14; Pixel 8 Pro) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Mobile Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "identity",
}

DESKTOP_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "identity",
    "Connection": "keep-alive",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
}

Strategy = Callable[[], list[RawJob]]

# Structural drift in a page or record; network errors are handled separately
PARSE_ERRORS = (ValueError, TypeError, AttributeError, KeyError, IndexError)


class JobSource(ABC):
    """One job board. ``fetch`` returns raw records for a query and optional location.

    JSON API sources let HTTP and network errors propagate so the caller can
    retry them. Scraping sources swallow expected failures (HTTP errors,
    challenge pages, markup drift) per strategy and return an empty list.
    """

    platform_name: str = ""
    requires_api_key: bool = False
    searchable: bool = True
    location_aware: bool = False
    rate_limited: bool = False
    timeout: float = 30.0

    @abstractmethod
    def fetch(self, query: str, location: str | None = None) -> list[RawJob]:
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.platform_name}>"

    def _get_json(
        self,
        url: str,
        *,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> Any:
        r = requests.get(url, params=params, headers=headers, timeout=self.timeout)
        r.raise_for_status()
        return r.json()


class ScrapingSource(JobSource):
    """Base for HTML/RSS sources tried through an ordered chain of strategies."""

    location_aware = True

    def _get_page(
        self,
        url: str,
        *,
        params: dict | None = None,
        headers: dict | None = None,
        min_length: int = 0,
        markers: Iterable[str] = ("captcha",),
        expected_types: Iterable[str] = ("html",),
        label: str = "",
    ) -> str | None:
        """Page body, or None on HTTP failure or when it looks like a bot challenge.

        A response whose Content-Type names none of *expected_types* counts as a
        challenge. A missing Content-Type is accepted.
        """
        label = label or self.platform_name
        try:
            r = requests.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            log.warning("%s request error: %s", label, exc)
            return None
        if not r.ok:
            log.warning("%s HTTP %d from %s", label, r.status_code, url)
            return None
        content_type = (r.headers.get("Content-Type") or "").lower()
        if content_type and not any(t in content_type for t in expected_types):
            log.warning("%s got unexpected content type %r", label, content_type)
            return None
        body = r.text or ""
        if looks_like_challenge(body, min_length=min_length, markers=markers):
            log.warning("%s got an empty or challenge page", label)
            return None
        return body

    def run_strategies(self, strategies: Iterable[tuple[str, Strategy]]) -> list[RawJob]:
        """First non-empty result of the strategies, in order.

        A strategy that trips over unexpected page structure is skipped like an
        empty one.
        """
        for name, strategy in strategies:
            try:
                jobs = strategy()
            except PARSE_ERRORS as exc:
                log.warning("%s: %s strategy failed to parse: %r", self.platform_name, name, exc)
                continue
            if jobs:
                log.debug("%s: %s strategy returned %d jobs", self.platform_name, name, len(jobs))
                return jobs
            log.debug("%s: %s strategy returned nothing", self.platform_name, name)
        return []

    def collect(
        self,
        items: Iterable[Any],
        build: Callable[[Any], RawJob | None],
        limit: int | None = None,
    ) -> list[RawJob]:
        """Apply *build* to each item, skipping items it rejects or fails on."""
        jobs: list[RawJob] = []
        for item in items:
            if limit is not None and len(jobs) >= limit:
                break
            try:
                job = build(item)
            except PARSE_ERRORS as exc:
                log.debug("%s: skipped malformed record: %r", self.platform_name, exc)
                continue
            if job is not None:
                jobs.append(job)
        return jobs


def looks_like_challenge(
    body: str, *, min_length: int = 0, markers: Iterable[str] = ("captcha",)
) -> bool:
    if len(body) < min_length:
        return True
    lower = body.lower()
    return any(marker in lower for marker in markers)


def match_country(location: str | None, table: dict[str, str], default: str) -> str:
    """Look up the first country name of *table* that appears as a word in *location*."""
    if not location:
        return default
    lower = location.lower()
    for country, value in table.items():
        if re.search(rf"(?<![a-z]){re.escape(country)}(?![a-z])", lower):
            return value
    return default


def clean_text(node: Any) -> str:
    if node is None:
        return ""
    text = node.get_text(" ") if hasattr(node, "get_text") else str(node)
    return re.sub(r"\s+", " ", text).strip()


def json_ld_postings(soup: BeautifulSoup) -> list[dict]:
    """JobPosting objects embedded as JSON-LD, including ItemList members."""
    items: list[dict] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            data = json.loads(script.string or script.get_text() or "")
        except (json.JSONDecodeError, TypeError):
            continue
        for entry in data if isinstance(data, list) else [data]:
            if not isinstance(entry, dict):
                continue
            if entry.get("@type") == "JobPosting":
                items.append(entry)
            elif entry.get("@type") == "ItemList":
                for el in entry.get("itemListElement") or []:
                    job = el.get("item", el) if isinstance(el, dict) else None
                    if isinstance(job, dict) and job.get("@type") == "JobPosting":
                        items.append(job)
    return items


def json_ld_location(loc: Any) -> str | None:
    if not loc:
        return None
    if isinstance(loc, str):
        return loc
    if isinstance(loc, list):
        names = [
            ((l.get("address") or {}).get("addressLocality") or l.get("name") or "")
            for l in loc
            if isinstance(l, dict)
        ]
        return ", ".join(n for n in names if n) or None
    if isinstance(loc, dict):
        addr = loc.get("address") or loc
        if isinstance(addr, dict):
            country = addr.get("addressCountry")
            if isinstance(country, dict):
                country = country.get("name")
            parts = [addr.get("addressLocality"), addr.get("addressRegion"), country]
            return ", ".join(str(p) for p in parts if p) or None
    return None


def json_ld_salary(posting: dict) -> tuple[float | None, float | None, str | None]:
    base = posting.get("baseSalary") or {}
    if not isinstance(base, dict):
        return None, None, None
    value = base.get("value") or {}
    if not isinstance(value, dict):
        value = {}

    def _num(v: Any) -> float | None:
        try:
            return float(v) if v else None
        except (TypeError, ValueError):
            return None

    return _num(value.get("minValue")), _num(value.get("maxValue")), base.get("currency")


def json_ld_identifier(posting: dict) -> str | None:
    ident = posting.get("identifier")
    if isinstance(ident, dict):
        ident = ident.get("value")
    return str(ident) if ident else None
