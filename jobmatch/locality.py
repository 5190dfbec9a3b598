"""Classify a listing's geographic relevance to the user: city, national, remote, international."""
from __future__ import annotations

import re
from typing import Iterable, NamedTuple

LOCALITY_LABELS: dict[str, str] = {
    "city": "In Your City",
    "national": "In Your Country",
    "remote": "Remote",
    "international": "International",
    "unknown": "",
}

# Sort rank for grouping results; lower first.
LOCALITY_ORDER: dict[str, int] = {
    "city": 0,
    "national": 1,
    "remote": 2,
    "unknown": 3,
    "international": 4,
}

# Location strings that carry no geography at all
_GENERIC_REMOTE: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^remote$",
        r"^remote\s*[\-/]\s*remote$",
        r"^anywhere$",
        r"^worldwide$",
        r"^global$",
        r"^work\s*from\s*home$",
        r"^remote\s*\(remote\)$",
        r"^remote\s*[\-/]\s*anywhere$",
    )
)

_DELIM = r"[\s,;/|()\-]"
MIN_NEEDLE_LEN = 3


class LocationParts(NamedTuple):
    parts: list[str]
    city: str
    country: str


def parse_location_parts(location: str) -> LocationParts:
    """Split "Karachi, Sindh, Pakistan" into lowercased parts; first is city, last country."""
    parts = [p.strip().lower() for p in location.split(",")]
    parts = [p for p in parts if len(p) > 1]
    return LocationParts(parts, parts[0] if parts else "", parts[-1] if parts else "")


def location_contains(haystack: str, needle: str) -> bool:
    """Whole-word containment, so "in" never matches "engineering"."""
    if not needle or len(needle) < MIN_NEEDLE_LEN:
        return False
    pattern = rf"(?:^|{_DELIM}){re.escape(needle)}(?:$|{_DELIM})"
    return re.search(pattern, haystack, re.IGNORECASE) is not None


def is_generic_remote(location: str) -> bool:
    text = location.strip()
    return any(p.match(text) for p in _GENERIC_REMOTE)


def classify_locality(
    user_location: str | None,
    desired_locations: Iterable[str],
    job_location: str | None,
    is_remote: bool,
) -> str:
    """Locality tier of a job for a user.

    A concrete job location is matched before the remote flag is consulted, so
    a remote role based in the user's own city still classifies as ``city``.
    """
    if not job_location or not job_location.strip():
        return "remote" if is_remote else "unknown"

    if is_generic_remote(job_location):
        return "remote"

    job_lower = job_location.strip().lower()
    home = parse_location_parts(user_location) if user_location else None
    desired = [parse_location_parts(loc) for loc in desired_locations if loc]

    if home and location_contains(job_lower, home.city):
        return "city"
    if any(location_contains(job_lower, d.city) for d in desired):
        return "city"

    if home and location_contains(job_lower, home.country):
        return "national"
    if any(location_contains(job_lower, d.country) for d in desired):
        return "national"
    if home and any(location_contains(job_lower, part) for part in home.parts[1:]):
        return "national"

    if is_remote:
        return "remote"
    return "international"
