"""Render aggregated job matches as a markdown report grouped by locality."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Union
from urllib.parse import urlparse

from jobmatch.config import REPORTS_DIR
from jobmatch.dates import format_relative_time, parse_datetime, utcnow
from jobmatch.locality import LOCALITY_LABELS, LOCALITY_ORDER
from jobmatch.log import get_logger
from jobmatch.models import AggregationResult, CachedJobs

log = get_logger(__name__)

PER_SECTION = 15


def _short_url_label(url: str) -> str:
    host = (urlparse(url).hostname or "").replace("www.", "")
    parts = host.split(".")
    return parts[0].capitalize() if parts and parts[0] else "Link"


def _salary(job) -> str:
    if not job.salary_min and not job.salary_max:
        return ""
    low = f"{job.salary_min:,.0f}" if job.salary_min else "?"
    high = f"{job.salary_max:,.0f}" if job.salary_max else "?"
    return f"{low} - {high} {job.salary_currency}"


def build_jobs_report(
    result: Union[AggregationResult, CachedJobs],
    *,
    now: datetime | None = None,
) -> str:
    now = now or utcnow()
    matches = {m.job_id: m for m in result.matches}
    lines: list[str] = [f"# Job Matches: {now.strftime('%Y-%m-%d')}", ""]

    if isinstance(result, AggregationResult):
        stats = result.stats
        lines.append(
            f"**{stats.total}** fetched | **{stats.unique}** unique | "
            f"**{len(stats.platforms)}** platforms ({', '.join(stats.platforms) or 'none'})"
            + (f" | **{stats.failed}** failed fetches" if stats.failed else "")
        )
    else:
        refreshed = parse_datetime(result.refreshed_at)
        when = refreshed.strftime("%Y-%m-%d %H:%M UTC") if refreshed else "never"
        lines.append(f"**{len(result.jobs)}** cached jobs | last refresh {when}")
    lines.append("")

    if not result.jobs:
        lines.append("_No jobs found._")
        return "\n".join(lines)

    groups: dict[str, list] = {}
    for job in result.jobs:
        match = matches.get(job.id)
        locality = match.locality if match else "unknown"
        groups.setdefault(locality, []).append(job)

    for locality in sorted(groups, key=lambda k: LOCALITY_ORDER.get(k, LOCALITY_ORDER["unknown"])):
        jobs = groups[locality]
        label = LOCALITY_LABELS.get(locality) or "Other"
        lines.append(f"## {label} ({len(jobs)})")
        lines.append("")
        for job in jobs[:PER_SECTION]:
            match = matches.get(job.id)
            score = match.match_score if match else 0
            lines.append(f"### {job.title} @ {job.company_name}")
            lines.append(f"- **Score:** {score}%")
            loc = job.location or ("Remote" if job.is_remote else "Unspecified")
            lines.append(f"- **Location:** {loc}")
            lines.append(f"- **Posted:** {format_relative_time(job.posted_at, now)} via {job.source_platform}")
            salary = _salary(job)
            if salary:
                lines.append(f"- **Salary:** {salary}")
            if match and match.match_reasons:
                lines.append(f"- **Why:** {', '.join(match.match_reasons)}")
            if match and match.matched_skills:
                lines.append(f"- **Skills:** {', '.join(match.matched_skills[:6])}")
            if job.source_url:
                lines.append(f"- **Apply:** [{_short_url_label(job.source_url)}]({job.source_url})")
            lines.append("")
        if len(jobs) > PER_SECTION:
            lines.append(f"_...and {len(jobs) - PER_SECTION} more._")
            lines.append("")

    log.info("Built jobs report: %d jobs in %d section(s)", len(result.jobs), len(groups))
    return "\n".join(lines)


def write_jobs_report(content: str, *, now: datetime | None = None) -> Path:
    REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    date = (now or utcnow()).strftime("%Y-%m-%d")
    path = REPORTS_DIR / f"jobs_{date}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written -> %s", path)
    return path
