"""Image creator attribution: page scraping, reverse-search automation and result reconciliation."""

from .logging import configure_logging, jlog, logging_context, reqlog, set_global_context
from .messages import handle_message
from .models import AnalysisResult, CandidateRecord, PageData, SearchLink, Social
from .normalize import dedupe_key, dedupe_results, dedupe_socials, rank
from .pipeline import RemoteStrategy, analyze, default_strategies
from .runner import SettleMachine, State, run_in_tab
from .saucenao import SauceNaoError
from .scrapers import context_scrape, page_data_from_html, platform_scrape
from .settings import SettingsError, SettingsStore
from .urls import build_search_links, detect_platform, is_embedded_image
from .versioning import get_scraper_version

__all__ = [
    "AnalysisResult",
    "CandidateRecord",
    "PageData",
    "RemoteStrategy",
    "SauceNaoError",
    "SearchLink",
    "SettingsError",
    "SettingsStore",
    "SettleMachine",
    "Social",
    "State",
    "analyze",
    "build_search_links",
    "configure_logging",
    "context_scrape",
    "dedupe_key",
    "dedupe_results",
    "dedupe_socials",
    "default_strategies",
    "detect_platform",
    "get_scraper_version",
    "handle_message",
    "is_embedded_image",
    "jlog",
    "logging_context",
    "page_data_from_html",
    "platform_scrape",
    "rank",
    "reqlog",
    "run_in_tab",
    "set_global_context",
]
