#!/usr/bin/env python3
"""Entry point to aggregate and rank jobs for the configured profile."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobmatch.log import get_logger
from jobmatch.config import PROFILE_PATH

log = get_logger(__name__)


def _check_setup() -> bool:
    """Return True if first-run setup is needed."""
    if not PROFILE_PATH.exists():
        print()
        print("  No profile found. Create one first:")
        print("    cp config/profile.example.yaml config/profile.yaml")
        print()
        return True
    return False


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch, deduplicate and rank jobs from every configured board.")
    parser.add_argument("--force", action="store_true", help="refresh even inside the cooldown window")
    parser.add_argument("--cached", action="store_true", help="report the last cached result without fetching")
    parser.add_argument("--no-report", action="store_true", help="skip writing the markdown report")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if _check_setup():
        return 1

    from jobmatch.aggregator import aggregate_jobs, get_cached_jobs
    from jobmatch.cache import JobCache
    from jobmatch.config import cooldown_remaining, ensure_dirs, load_profile, load_settings
    from jobmatch.report import build_jobs_report, write_jobs_report

    ensure_dirs()
    cache = JobCache()

    if args.cached:
        cached = get_cached_jobs(cache)
        log.info("Cached jobs: %d (last refresh %s)", len(cached.jobs), cached.refreshed_at or "never")
        print(build_jobs_report(cached))
        return 0

    remaining = cooldown_remaining(cache.last_refresh())
    if remaining and not args.force:
        seconds = int(remaining.total_seconds()) + 1
        print(f"Jobs were refreshed recently, please wait {seconds}s (or pass --force).")
        return 2

    result = aggregate_jobs(load_profile(), load_settings(), cache=cache)
    log.info("Run complete.")
    log.info("  Jobs fetched: %d", result.stats.total)
    log.info("  Unique jobs: %d", result.stats.unique)
    log.info("  Platforms: %s", ", ".join(result.stats.platforms) or "none")
    log.info("  Failed fetches: %d", result.stats.failed)
    if not args.no_report:
        path = write_jobs_report(build_jobs_report(result))
        log.info("  Report: %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
