"""
Job aggregation pipeline.

Runs: build queries -> fan out fetch tasks -> normalize -> dedup -> score -> sort -> cache.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from jobmatch.cache import JobCache
from jobmatch.config import MAX_FETCH_TASKS, RETRY_ATTEMPTS, RETRY_BASE_DELAY, fetch_workers
from jobmatch.dates import utcnow
from jobmatch.dedup import deduplicate_jobs
from jobmatch.domains import domain_keywords, resolve_user_domains
from jobmatch.locality import LOCALITY_ORDER
from jobmatch.log import get_logger
from jobmatch.models import (
    AggregationResult,
    AggregationStats,
    AppSettings,
    CachedJobs,
    JobListing,
    RawJob,
    UserProfile,
)
from jobmatch.normalizer import normalize_to_listing
from jobmatch.query_builder import build_search_queries, effective_locations, parse_user_location
from jobmatch.retry import retry
from jobmatch.scorer import calculate_match_score
from jobmatch.sources import JobSource, get_sources

log = get_logger(__name__)

# Task tiers, lowest kept first when the task list is capped
TIER_PRIMARY = 0
TIER_LOCATION = 1
TIER_QUERY = 2

SEARCH_QUERY_SLOTS = 5


@dataclass
class FetchTask:
    source: JobSource
    query: str
    location: str | None
    tier: int = TIER_PRIMARY

    @property
    def key(self) -> tuple[str, str, str | None]:
        return (self.source.platform_name, self.query, self.location)


@dataclass
class FetchOutcome:
    jobs: list[RawJob] = field(default_factory=list)
    failed: int = 0
    counts: dict[str, int] = field(default_factory=dict)


def build_fetch_tasks(
    sources: Sequence[JobSource],
    queries: Sequence[str],
    locations: Sequence[str | None],
    home_country: str | None = None,
    max_tasks: int = MAX_FETCH_TASKS,
) -> list[FetchTask]:
    """The (source, query, location) matrix for one run.

    Every source gets the primary query at the primary location. Rate-limited
    sources add only the second query at the home country. Searchable sources
    add queries 2-5 at the primary location; location-aware sources add the
    primary query at each secondary location and the second query at the home
    country. Over *max_tasks*, query expansion is dropped before location
    expansion.
    """
    if not queries:
        return []
    primary_query = queries[0]
    primary_location = locations[0] if locations else None
    second_query = queries[1] if len(queries) > 1 else None

    tasks: list[FetchTask] = []
    seen: set[tuple[str, str, str | None]] = set()

    def add(source: JobSource, query: str, location: str | None, tier: int) -> None:
        task = FetchTask(source, query, location, tier)
        if task.key not in seen:
            seen.add(task.key)
            tasks.append(task)

    for source in sources:
        add(source, primary_query, primary_location, TIER_PRIMARY)

        if source.rate_limited:
            if home_country and second_query:
                add(source, second_query, home_country, TIER_LOCATION)
            continue

        if source.searchable:
            for query in queries[1:SEARCH_QUERY_SLOTS]:
                add(source, query, primary_location, TIER_QUERY)

        if source.location_aware:
            for location in locations[1:]:
                if location:
                    add(source, primary_query, location, TIER_LOCATION)
            if home_country and second_query:
                add(source, second_query, home_country, TIER_LOCATION)

    if len(tasks) <= max_tasks:
        return tasks

    ranked = sorted(range(len(tasks)), key=lambda i: (tasks[i].tier, i))[:max_tasks]
    keep = set(ranked)
    log.info("Capping fetch tasks: %d -> %d", len(tasks), max_tasks)
    return [t for i, t in enumerate(tasks) if i in keep]


def _run_task(task: FetchTask, retry_delay: float) -> list[RawJob]:
    fetch = retry(
        max_attempts=RETRY_ATTEMPTS,
        base_delay=retry_delay,
        label=f"[{task.source.platform_name}] fetch {task.query!r}",
    )(task.source.fetch)
    return fetch(task.query, task.location) or []


def run_fetch_tasks(
    tasks: Sequence[FetchTask],
    *,
    workers: int | None = None,
    retry_delay: float = RETRY_BASE_DELAY,
) -> FetchOutcome:
    """Run every task to completion; a task that still fails after retries counts as failed.

    Results are merged in task order regardless of completion order.
    """
    outcome = FetchOutcome()
    if not tasks:
        return outcome

    results: list[list[RawJob]] = [[] for _ in tasks]
    with ThreadPoolExecutor(max_workers=min(workers or fetch_workers(), len(tasks))) as pool:
        futures = {pool.submit(_run_task, task, retry_delay): i for i, task in enumerate(tasks)}
        for future in as_completed(futures):
            i = futures[future]
            name = tasks[i].source.platform_name
            try:
                results[i] = future.result()
                log.debug("[%s] %r @ %s returned %d jobs", name, tasks[i].query, tasks[i].location, len(results[i]))
            except Exception as exc:
                log.error("[%s] FAILED: %s", name, exc)
                outcome.failed += 1

    for task, batch in zip(tasks, results):
        name = task.source.platform_name
        outcome.counts[name] = outcome.counts.get(name, 0) + len(batch)
        outcome.jobs.extend(batch)
    for name, count in outcome.counts.items():
        log.info("[%s] returned %d jobs", name, count)
    return outcome


def _normalize_all(raw_jobs: Sequence[RawJob], now: datetime) -> list[JobListing]:
    listings: list[JobListing] = []
    for raw in raw_jobs:
        try:
            listings.append(normalize_to_listing(raw, now))
        except (ValueError, TypeError, AttributeError) as exc:
            log.debug("Dropped malformed %s record: %s", getattr(raw, "source_platform", "?"), exc)
    return listings


def aggregate_jobs(
    profile: UserProfile,
    settings: AppSettings | None = None,
    *,
    sources: Sequence[JobSource] | None = None,
    cache: JobCache | None = None,
    now: datetime | None = None,
    retry_delay: float = RETRY_BASE_DELAY,
    max_workers: int | None = None,
) -> AggregationResult:
    now = now or utcnow()
    sources = list(sources) if sources is not None else get_sources(settings)
    cache = cache or JobCache()

    queries = build_search_queries(profile)
    locations = effective_locations(profile)
    home = parse_user_location(profile.location)
    log.info("Search queries: %s", " | ".join(queries))
    log.info("Search locations: %s", ", ".join(l or "anywhere" for l in locations))

    tasks = build_fetch_tasks(sources, queries, locations, home.country if home else None)
    log.info("Fetching %d task(s) across %d source(s) in parallel...", len(tasks), len(sources))
    outcome = run_fetch_tasks(tasks, workers=max_workers, retry_delay=retry_delay)

    listings = _normalize_all(outcome.jobs, now)
    unique = deduplicate_jobs(listings, now)

    keywords = domain_keywords(resolve_user_domains(profile.headline, profile.skills))
    matches = {job.id: calculate_match_score(profile, job, keywords) for job in unique}
    unique.sort(
        key=lambda j: (
            LOCALITY_ORDER.get(matches[j.id].locality, LOCALITY_ORDER["unknown"]),
            -matches[j.id].match_score,
            j.id,
        )
    )
    ordered = [matches[j.id] for j in unique]

    stats = AggregationStats(
        total=len(listings),
        unique=len(unique),
        platforms=[name for name, count in outcome.counts.items() if count > 0],
        failed=outcome.failed,
    )
    cache.save(unique, ordered, refreshed_at=now)
    log.info(
        "Aggregated %d jobs (%d unique) from %d platform(s); %d task(s) failed",
        stats.total, stats.unique, len(stats.platforms), stats.failed,
    )
    return AggregationResult(jobs=unique, matches=ordered, stats=stats)


def get_cached_jobs(cache: JobCache | None = None) -> CachedJobs:
    """Last persisted result, without touching the network."""
    return (cache or JobCache()).load()
