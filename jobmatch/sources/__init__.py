from .base import JobSource, ScrapingSource
from .indeed import IndeedSource
from .linkedin import LinkedInSource
from .careerjet import CareerJetSource
from .remotive import RemotiveSource
from .remoteok import RemoteOKSource
from .arbeitnow import ArbeitnowSource
from .jobicy import JobicySource
from .joinrise import JoinRiseSource
from .himalayas import HimalayasSource
from .themuse import TheMuseSource
from .jsearch import JSearchSource
from .jooble import JoobleSource
from .searchapi import SearchAPISource
from .adzuna import AdzunaSource
from .gemini_search import GeminiSearchSource

from jobmatch.log import get_logger
from jobmatch.models import AppSettings

log = get_logger(__name__)

__all__ = [
    "JobSource", "ScrapingSource", "IndeedSource", "LinkedInSource", "CareerJetSource",
    "RemotiveSource", "RemoteOKSource", "ArbeitnowSource", "JobicySource", "JoinRiseSource",
    "HimalayasSource", "TheMuseSource", "JSearchSource", "JoobleSource", "SearchAPISource",
    "AdzunaSource", "GeminiSearchSource", "get_sources",
]


def get_sources(settings: AppSettings | None = None) -> list[JobSource]:
    """Enabled sources in registry order; keyed sources only when their keys are set."""
    settings = settings or AppSettings()
    sources: list[JobSource] = [
        IndeedSource(),
        LinkedInSource(),
        CareerJetSource(),
        RemotiveSource(),
        RemoteOKSource(),
        ArbeitnowSource(),
        JobicySource(),
        JoinRiseSource(),
        HimalayasSource(),
        TheMuseSource(),
    ]

    if settings.rapidapi_key:
        sources.append(JSearchSource(settings.rapidapi_key))
    if settings.jooble_api_key:
        sources.append(JoobleSource(settings.jooble_api_key))
    if settings.searchapi_key:
        sources.append(SearchAPISource(settings.searchapi_key))
    if settings.adzuna_app_id and settings.adzuna_app_key:
        sources.append(AdzunaSource(settings.adzuna_app_id, settings.adzuna_app_key))
    if settings.gemini_api_key:
        sources.append(GeminiSearchSource(settings.gemini_api_key))

    for source in sources:
        log.info("Registered source: %s", source.platform_name)
    return sources
