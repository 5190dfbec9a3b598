"""Build ranked search queries and search locations from a user profile."""
from __future__ import annotations

import re
from typing import NamedTuple

from jobmatch.config import MAX_QUERIES
from jobmatch.domains import expanded_roles, resolve_user_domains
from jobmatch.log import get_logger
from jobmatch.models import UserProfile

log = get_logger(__name__)

DEFAULT_QUERY = "software developer"

_LEVEL_WORDS_RE = re.compile(r"\b(senior|junior|mid|lead|entry|intern)\b", re.IGNORECASE)


class HomeLocation(NamedTuple):
    city: str
    country: str


def parse_user_location(location: str | None) -> HomeLocation | None:
    """"Karachi, Pakistan" -> ("karachi", "pakistan"); a single part is both city and country."""
    if not location:
        return None
    parts = [p.strip().lower() for p in location.split(",")]
    parts = [p for p in parts if len(p) > 1]
    if not parts:
        return None
    return HomeLocation(parts[0], parts[-1])


def experience_level_keyword(years: float | None) -> str | None:
    years = years or 0
    if years <= 2:
        return "junior"
    if years <= 5:
        return None
    if years <= 10:
        return "senior"
    if years <= 15:
        return "lead"
    return "director"


def build_search_queries(profile: UserProfile) -> list[str]:
    """Up to ten distinct queries, most specific first.

    Position 0 is the primary query every source receives; later positions only
    reach sources that support server-side search.
    """
    queries: list[str] = []
    headline = (profile.headline or "").strip()
    top_skills = [s for s in profile.skills[:5] if s.strip()]
    roles = expanded_roles(resolve_user_domains(headline, profile.skills))
    level = experience_level_keyword(profile.experience_years)
    home = parse_user_location(profile.location)

    if headline:
        queries.append(headline)
        if level:
            base = _LEVEL_WORDS_RE.sub("", headline)
            base = re.sub(r"\s+", " ", base).strip()
            if base:
                queries.append(f"{level} {base}")

    if len(top_skills) >= 2:
        queries.append(" ".join(top_skills[:3]))

    if roles:
        queries.append(roles[0])
    if len(roles) > 1:
        queries.append(f"{level} {roles[1]}" if level else roles[1])

    anchor = headline or (roles[0] if roles else "") or " ".join(top_skills[:2])
    if anchor and home:
        queries.append(f"{anchor} {home.country}")
        if home.city != home.country:
            queries.append(f"{anchor} {home.city}")

    if anchor:
        for loc in profile.desired_locations[:2]:
            loc_lower = loc.strip().lower()
            if home and loc_lower in (home.city, home.country):
                continue
            queries.append(f"{anchor} {loc.strip()}")

    type_anchor = (top_skills[0] if top_skills else "") or (roles[0] if roles else "")
    if type_anchor:
        for job_type in profile.desired_job_types[:2]:
            if job_type == "remote":
                queries.append(f"remote {type_anchor}")
            elif job_type == "internship":
                queries.append(f"{type_anchor} internship")

    if not queries:
        queries.append(roles[0] if roles else DEFAULT_QUERY)

    unique = list(dict.fromkeys(q for q in queries if q))[:MAX_QUERIES]
    log.debug("Built %d search queries: %s", len(unique), " | ".join(unique))
    return unique


def effective_locations(profile: UserProfile) -> list[str | None]:
    """Ordered search locations; the first is the primary location.

    Desired locations lead (up to three), followed by the home location when
    none of them already covers it. Without desired locations the home location
    and its bare country are used. ``[None]`` means "search everywhere".
    """
    home = parse_user_location(profile.location)
    desired = [loc for loc in profile.desired_locations if loc and loc.strip()]
    if desired:
        locations: list[str | None] = list(desired[:3])
        if home and not any(
            home.country in d.lower() or home.city in d.lower() for d in desired
        ):
            locations.append(profile.location)
        return locations
    if profile.location and profile.location.strip():
        locations = [profile.location]
        if home and home.city != home.country:
            locations.append(home.country)
        return locations
    return [None]
