"""Page-snapshot scrapers (platform rules and the generic context fallback)."""

from .context import context_scrape
from .page import page_data_from_html
from .platform import PLATFORM_RULES, platform_scrape

__all__ = ["PLATFORM_RULES", "context_scrape", "page_data_from_html", "platform_scrape"]
