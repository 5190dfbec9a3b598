"""Score jobs against the profile: weighted skills, type, location, experience and salary."""
from __future__ import annotations

import math
from typing import Iterable

from jobmatch.locality import classify_locality
from jobmatch.models import JobListing, JobMatch, UserProfile
from jobmatch.skills import find_skill_matches

WEIGHTS: dict[str, float] = {
    "skills": 0.40,
    "job_type": 0.15,
    "location": 0.15,
    "experience": 0.15,
    "salary": 0.15,
}

NEUTRAL_SCORE = 70
DOMAIN_CREDIT = 0.4

LEVEL_YEARS: dict[str, tuple[float, float]] = {
    "entry": (0, 2),
    "mid": (2, 5),
    "senior": (5, 10),
    "lead": (8, 15),
    "executive": (12, 30),
}

_LOCALITY_REASONS: dict[str, str] = {
    "city": "Near you",
    "national": "In your country",
    "remote": "Remote position",
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_skills(
    user_skills: Iterable[str],
    job_skills: list[str],
    domain_keywords: Iterable[str] = (),
) -> tuple[float, list[str]]:
    """Skills sub-score (0-100) and the job skills the user has.

    Unmatched job skills that overlap one of the user's domain keywords earn
    partial credit.
    """
    if not job_skills:
        return NEUTRAL_SCORE, []
    matched, missing = find_skill_matches(user_skills, job_skills)

    keywords = [k.lower() for k in domain_keywords if k]
    domain_hits = 0
    if keywords:
        for skill in missing:
            low = skill.lower()
            if any(k in low or low in k for k in keywords):
                domain_hits += 1

    effective = len(matched) + domain_hits * DOMAIN_CREDIT
    return min(100.0, effective / len(job_skills) * 100), matched


def score_job_type(desired_types: list[str], job_type: str) -> int:
    if not desired_types:
        return NEUTRAL_SCORE
    return 100 if job_type in desired_types else 30


def score_location(
    desired_locations: list[str], job_location: str | None, is_remote: bool
) -> int:
    if not desired_locations:
        return NEUTRAL_SCORE
    if is_remote and any("remote" in loc.lower() for loc in desired_locations):
        return 100
    if is_remote:
        return 80
    if not job_location:
        return 50
    job_lower = job_location.lower()
    for loc in desired_locations:
        loc_lower = loc.lower()
        if loc_lower in job_lower or job_lower in loc_lower:
            return 100
    return 30


def score_experience(user_years: float, job_level: str) -> float:
    low, high = LEVEL_YEARS.get(job_level, LEVEL_YEARS["mid"])
    if low <= user_years <= high:
        return 100
    if user_years < low:
        return max(30, 100 - (low - user_years) * 20)
    return max(50, 100 - (user_years - high) * 10)


def score_salary(
    user_min: float | None,
    user_max: float | None,
    job_min: float | None,
    job_max: float | None,
) -> float:
    if not user_min and not user_max:
        return NEUTRAL_SCORE
    if not job_min and not job_max:
        return 60

    j_min = job_min or 0
    j_max = job_max or j_min * 1.3
    u_min = user_min or 0
    u_max = user_max or u_min * 1.5

    if j_max >= u_min and j_min <= u_max:
        return 100
    if j_max < u_min:
        return max(20, 100 - (u_min - j_max) / u_min * 100)
    return 70


def calculate_match_score(
    profile: UserProfile,
    job: JobListing,
    domain_keywords: Iterable[str] = (),
) -> JobMatch:
    skills, matched = score_skills(profile.skills, job.skills_required, domain_keywords)
    job_type = score_job_type(profile.desired_job_types, job.job_type)
    location = score_location(profile.desired_locations, job.location, job.is_remote)
    experience = score_experience(profile.experience_years or 0, job.experience_level)
    salary = score_salary(
        profile.desired_salary_min,
        profile.desired_salary_max,
        job.salary_min,
        job.salary_max,
    )

    total = (
        skills * WEIGHTS["skills"]
        + job_type * WEIGHTS["job_type"]
        + location * WEIGHTS["location"]
        + experience * WEIGHTS["experience"]
        + salary * WEIGHTS["salary"]
    )
    score = min(100, max(0, _round_half_up(total)))

    locality = classify_locality(
        profile.location, profile.desired_locations, job.location, job.is_remote
    )

    reasons: list[str] = []
    if matched:
        reasons.append(f"{len(matched)} matching skills")
    if job_type == 100:
        reasons.append("Preferred job type")
    if locality in _LOCALITY_REASONS:
        reasons.append(_LOCALITY_REASONS[locality])
    elif location >= 80:
        reasons.append("Good location match")
    if experience == 100:
        reasons.append("Experience level fits")
    if salary == 100:
        reasons.append("Salary in range")

    return JobMatch(
        job_id=job.id,
        match_score=score,
        matched_skills=matched,
        match_reasons=reasons,
        locality=locality,
    )
