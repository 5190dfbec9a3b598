"""Load profile and env configuration."""
from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import yaml
from dotenv import load_dotenv

from jobmatch.log import get_logger
from jobmatch.models import AppSettings, UserProfile

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
PROFILE_PATH: Path = CONFIG_DIR / "profile.yaml"
REPORTS_DIR: Path = ROOT_DIR / "reports"
DATA_DIR: Path = ROOT_DIR / "data"
CACHE_PATH: Path = DATA_DIR / "jobs_cache.json"

MAX_FETCH_TASKS = 50
MAX_QUERIES = 10
RETRY_ATTEMPTS = 2
RETRY_BASE_DELAY = 1.5
FRESHNESS_DAYS = 60
REFRESH_COOLDOWN = timedelta(minutes=5)

# env var -> AppSettings field
_SETTINGS_ENV: dict[str, str] = {
    "RAPIDAPI_KEY": "rapidapi_key",
    "JOOBLE_API_KEY": "jooble_api_key",
    "SEARCHAPI_KEY": "searchapi_key",
    "ADZUNA_APP_ID": "adzuna_app_id",
    "ADZUNA_APP_KEY": "adzuna_app_key",
    "GEMINI_API_KEY": "gemini_api_key",
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def fetch_workers() -> int:
    try:
        return max(1, int(get_env("FETCH_WORKERS", "16")))
    except ValueError:
        log.warning("Invalid FETCH_WORKERS=%r, using 16", get_env("FETCH_WORKERS"))
        return 16


def load_profile(path: Path | None = None) -> UserProfile:
    with open(path or PROFILE_PATH, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    # Accept the profile nested under a top-level "profile" key as well
    if isinstance(data.get("profile"), dict):
        data = {**data, **data["profile"]}

    return UserProfile.from_dict(data)


def load_settings() -> AppSettings:
    values = {attr: (get_env(env) or None) for env, attr in _SETTINGS_ENV.items()}
    settings = AppSettings(**values)
    configured = [env for env, attr in _SETTINGS_ENV.items() if getattr(settings, attr)]
    log.debug("API keys configured: %s", ", ".join(configured) or "none")
    return settings


def ensure_dirs() -> None:
    for d in (REPORTS_DIR, DATA_DIR):
        d.mkdir(parents=True, exist_ok=True)


def cooldown_remaining(
    last_refresh: datetime | None, now: datetime | None = None
) -> timedelta:
    """Time left before another network refresh is allowed (zero when allowed)."""
    if last_refresh is None:
        return timedelta(0)
    now = now or datetime.now(timezone.utc)
    if last_refresh.tzinfo is None:
        last_refresh = last_refresh.replace(tzinfo=timezone.utc)
    remaining = REFRESH_COOLDOWN - (now - last_refresh)
    return max(remaining, timedelta(0))
