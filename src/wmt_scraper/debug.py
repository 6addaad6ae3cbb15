"""Debug artifact helpers for automated search tabs."""

from __future__ import annotations

import os
from datetime import datetime, timezone

from playwright.async_api import Page

from .logging import jlog

DEBUG_DIR = os.getenv("WMT_DEBUG_DIR", "media/debug")
UTC = getattr(datetime, "UTC", timezone.utc)


def ensure_debug_dir() -> str:
    """Create the debug directory if it does not exist and return the path."""

    try:
        os.makedirs(DEBUG_DIR, exist_ok=True)
    except Exception:
        pass
    return DEBUG_DIR


def debug_html_path(engine: str) -> str:
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%f")
    return os.path.join(DEBUG_DIR, f"{engine}_{stamp}.html")


async def ensure_debug_html(page: Page, engine: str) -> str | None:
    """Persist the rendered HTML of an engine tab for later debugging (best effort)."""

    try:
        ensure_debug_dir()
        html = await page.content()
        path = debug_html_path(engine)
        with open(path, "w", encoding="utf-8") as f:
            f.write(html)
        jlog("info", event="debug_html_saved", engine=engine, path=path)
        return path
    except Exception as exc:  # pragma: no cover - logging only
        jlog("error", event="debug_save_html_error", engine=engine, error=str(exc))
        return None


__all__ = ["DEBUG_DIR", "debug_html_path", "ensure_debug_dir", "ensure_debug_html"]
