"""Field heuristics shared by sources: HTML cleanup, level/type guesses, salary parsing."""
from __future__ import annotations

import re
from typing import Any, Iterable

from bs4 import BeautifulSoup

_WS_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)")
_INTERN_RE = re.compile(r"\bintern(?:ship)?s?\b")

_REMOTE_MARKERS: tuple[str, ...] = ("remote", "work from home", "wfh")

# Checked in order; the first level with a hit wins.
_LEVEL_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("entry", re.compile(_INTERN_RE.pattern + r"|junior|entry|\bjr\b\.?|graduate")),
    ("senior", re.compile(r"senior|\bsr\b\.?|staff|principal")),
    ("lead", re.compile(r"\blead\b|director|head of|manager")),
    ("executive", re.compile(r"\bvp\b|chief|\bcto\b|\bceo\b|executive")),
)

_SALARY_RANGE_RE = re.compile(
    r"(?:[$£€₹]|PKR|INR|USD|GBP|EUR)\s*([\d,]+(?:\.\d+)?)\s*(?:-|–|—|to)+\s*"
    r"(?:[$£€₹]|PKR|INR|USD|GBP|EUR)?\s*([\d,]+(?:\.\d+)?)",
    re.IGNORECASE,
)
_SALARY_SINGLE_RE = re.compile(r"(?:[$£€₹]|PKR|INR|USD|GBP|EUR)\s*([\d,]+)", re.IGNORECASE)

_CURRENCY_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("PKR", ("PKR", "RS", "RUPEE")),
    ("EUR", ("EUR", "€")),
    ("GBP", ("GBP", "£")),
    ("INR", ("INR", "₹")),
    ("CAD", ("CAD",)),
    ("AUD", ("AUD",)),
)


def collapse_ws(text: str | None) -> str:
    return _WS_RE.sub(" ", text or "").strip()


def strip_html(html: str | None) -> str:
    """Visible text of an HTML fragment, whitespace-collapsed."""
    if not html:
        return ""
    if "<" not in html and "&" not in html:
        return collapse_ws(html)
    return collapse_ws(BeautifulSoup(html, "html.parser").get_text(" "))


def looks_remote(*texts: str | None) -> bool:
    haystack = " ".join(t for t in texts if t).lower()
    return any(marker in haystack for marker in _REMOTE_MARKERS)


def guess_experience_level(*texts: str | None, use_years: bool = False) -> str:
    """Experience level from title/seniority keywords; ``mid`` when nothing matches."""
    haystack = " ".join(t for t in texts if t).lower()
    for level, pattern in _LEVEL_PATTERNS:
        if pattern.search(haystack):
            return level
    if use_years:
        m = _YEARS_RE.search(haystack)
        if m:
            years = int(m.group(1))
            if years <= 2:
                return "entry"
            if years <= 5:
                return "mid"
            if years <= 10:
                return "senior"
            return "lead"
    return "mid"


def guess_job_type(title: str | None) -> str:
    lower = (title or "").lower()
    if _INTERN_RE.search(lower):
        return "internship"
    if "part time" in lower or "part-time" in lower:
        return "part_time"
    if "contract" in lower or "freelance" in lower:
        return "contract"
    return "full_time"


def map_employment_type(value: Any) -> str:
    """Map a free-form employment type ("FULLTIME", ["Part-time"], "Contractor") to a job type."""
    if not value:
        return "full_time"
    if isinstance(value, (list, tuple)):
        value = " ".join(str(v) for v in value)
    lower = str(value).lower()
    if "full" in lower or "permanent" in lower:
        return "full_time"
    if "part" in lower:
        return "part_time"
    if "contract" in lower or "temp" in lower:
        return "contract"
    if _INTERN_RE.search(lower):
        return "internship"
    if "freelance" in lower:
        return "freelance"
    return "full_time"


def salary_numbers(text: str | None) -> list[float]:
    if not text:
        return []
    cleaned = str(text).replace(",", "").replace("$", "")
    return [float(n) for n in _NUMBER_RE.findall(cleaned) if float(n) > 0]


def parse_salary_range(
    text: str | None, *, hourly_to_annual: bool = False
) -> tuple[float | None, float | None]:
    """First two positive numbers of a salary string as (min, max).

    With ``hourly_to_annual`` a figure below 500 is read as an hourly rate and
    scaled by 2080 working hours.
    """
    nums = salary_numbers(text)
    if hourly_to_annual:
        nums = [round(n * 2080) if n < 500 else n for n in nums]
    low = nums[0] if nums else None
    high = nums[1] if len(nums) > 1 else None
    return low, high


def salary_from_text(text: str | None) -> tuple[float | None, float | None]:
    """Currency-prefixed salary mention in running text ("$50,000 - $80,000")."""
    if not text:
        return None, None
    m = _SALARY_RANGE_RE.search(text)
    if m:
        return float(m.group(1).replace(",", "")), float(m.group(2).replace(",", ""))
    m = _SALARY_SINGLE_RE.search(text)
    if m:
        return float(m.group(1).replace(",", "")), None
    return None, None


def currency_from_text(text: Any, default: str = "USD") -> str:
    if not text or not isinstance(text, str):
        return default
    upper = text.upper()
    for code, markers in _CURRENCY_MARKERS:
        if any(m in upper for m in markers):
            return code
    return default


def positive_number(value: Any) -> float | None:
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if num > 0 else None


def djb2(text: str) -> int:
    """32-bit signed DJB2 over UTF-16 code units."""
    h = 5381
    for unit in _utf16_units(text):
        h = _to_int32((h << 5) + h + unit)
    return h


def fnv1a(text: str) -> int:
    """32-bit signed FNV-1a over UTF-16 code units."""
    h = _to_int32(0x811C9DC5)
    for unit in _utf16_units(text):
        h = _to_int32((h ^ unit) * 0x01000193)
    return h


def short_hash(text: str) -> str:
    """Base-36 DJB2 digest, used to synthesize ids for sources without one."""
    value = abs(djb2(text))
    if value == 0:
        return "0"
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def first_text(values: Iterable[Any]) -> str:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str) -> list[int]:
    data = text.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2)]
