"""Attribution pipeline: runs identification strategies in confidence-tiered order.

Strategies run strictly one after another. The cheap local scrapes go first;
each remote strategy only runs while nothing found so far reaches its
threshold. Every strategy failure is logged and contributes zero results, so
:func:`analyze` never raises.
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Awaitable, Callable, Mapping
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Any

import requests

from . import config
from .engines import LensParser, YandexParser
from .logging import jlog, logging_context, reqlog
from .models import METHOD_CONTEXT, METHOD_PLATFORM, AnalysisResult, CandidateRecord, PageData
from .normalize import best_confidence, rank
from .playwright import browser_tab_host
from .runner import TabHost, run_in_tab
from .saucenao import search as saucenao_search
from .scrapers import context_scrape, platform_scrape
from .settings import SettingsStore
from .urls import build_search_links, detect_platform, is_embedded_image, lens_search_url, yandex_search_url

# ============================
# Strategy plumbing
# ============================


@dataclass(frozen=True)
class RemoteStrategy:
    name: str
    threshold: int
    ceiling: float
    run: Callable[[str], Awaitable[list[CandidateRecord]]]


def should_run(results: list[CandidateRecord], threshold: int) -> bool:
    """True when nothing was found yet or the best confidence is below ``threshold``."""

    best = best_confidence(results)
    return best is None or best < threshold


def _lazy_tab_host(stack: AsyncExitStack, *, user_agent: str, debug_html: bool) -> Callable[[], Awaitable[TabHost]]:
    """Launch the browser on first use only; it lives until ``stack`` closes."""

    host: TabHost | None = None

    async def get() -> TabHost:
        nonlocal host
        if host is None:
            host = await stack.enter_async_context(browser_tab_host(user_agent=user_agent, debug_html=debug_html))
        return host

    return get


def default_strategies(
    tab_host: Callable[[], Awaitable[TabHost]],
    settings: SettingsStore,
    *,
    session: requests.Session | None = None,
) -> list[RemoteStrategy]:
    """Lens, then Yandex, then SauceNAO."""

    async def lens(image_url: str) -> list[CandidateRecord]:
        return await run_in_tab(
            await tab_host(),
            lens_search_url(image_url),
            LensParser(),
            settle_seconds=config.LENS_SETTLE_SECONDS,
            total_seconds=config.LENS_TOTAL_SECONDS,
        )

    async def yandex(image_url: str) -> list[CandidateRecord]:
        return await run_in_tab(
            await tab_host(),
            yandex_search_url(image_url),
            YandexParser(),
            settle_seconds=config.YANDEX_SETTLE_SECONDS,
            total_seconds=config.YANDEX_TOTAL_SECONDS,
        )

    async def saucenao(image_url: str) -> list[CandidateRecord]:
        # key is re-read on every call so a freshly saved key applies immediately
        key = settings.sauce_nao_key()
        return await asyncio.to_thread(saucenao_search, image_url, api_key=key or None, session=session)

    return [
        RemoteStrategy("lens", config.LENS_THRESHOLD, config.LENS_TOTAL_SECONDS + config.BROWSER_LAUNCH_SECONDS, lens),
        RemoteStrategy("yandex", config.YANDEX_THRESHOLD, config.YANDEX_TOTAL_SECONDS + config.BROWSER_LAUNCH_SECONDS, yandex),
        RemoteStrategy("saucenao", config.SAUCENAO_THRESHOLD, config.SAUCENAO_TIMEOUT_SECONDS + 5, saucenao),
    ]


# ============================
# Local strategies
# ============================


def scrape_page(page_data: PageData | None, platform: str | None, page_url: str | None) -> list[CandidateRecord]:
    """Platform rule first; the generic context scrape only when that found nothing."""

    if page_data is None:
        return []
    if platform:
        try:
            found = platform_scrape(page_data, platform, page_url)
        except Exception as exc:
            jlog("warning", event="strategy_error", strategy="platform", error=str(exc))
            found = None
        if found is not None:
            return [dataclasses.replace(found, confidence=config.PLATFORM_CONFIDENCE, method=METHOD_PLATFORM)]
    try:
        found = context_scrape(page_data, page_url)
    except Exception as exc:
        jlog("warning", event="strategy_error", strategy="context", error=str(exc))
        found = None
    if found is not None:
        return [dataclasses.replace(found, confidence=config.CONTEXT_CONFIDENCE, method=METHOD_CONTEXT)]
    return []


async def _run_remote(strategy: RemoteStrategy, image_url: str) -> list[CandidateRecord]:
    try:
        found = await asyncio.wait_for(strategy.run(image_url), timeout=strategy.ceiling)
    except asyncio.TimeoutError:
        jlog("warning", event="strategy_timeout", strategy=strategy.name, ceiling=strategy.ceiling)
        return []
    except Exception as exc:
        jlog("warning", event="strategy_error", strategy=strategy.name, error=str(exc))
        return []
    found = [r for r in (found or []) if not r.is_empty()]
    jlog("info", event="strategy_done", strategy=strategy.name, results=len(found))
    return found


# ============================
# Orchestrator
# ============================


def _coerce_page_data(page_data: PageData | Mapping[str, Any] | None) -> PageData | None:
    if page_data is None or isinstance(page_data, PageData):
        return page_data
    return PageData.from_dict(page_data)


async def analyze(
    image_url: str,
    page_url: str | None,
    page_data: PageData | Mapping[str, Any] | None = None,
    *,
    strategies: list[RemoteStrategy] | None = None,
    settings: SettingsStore | None = None,
    user_agent: str = config.DEFAULT_USER_AGENT,
    debug_html: bool = config.DEBUG_HTML,
) -> AnalysisResult:
    """Identify the probable creator of ``image_url``.

    ``strategies`` replaces the default Lens/Yandex/SauceNAO cascade (useful
    for tests); when omitted, a headless browser is launched lazily the first
    time an automated strategy actually runs.
    """

    platform = detect_platform(page_url)
    search_links = build_search_links(image_url)
    results: list[CandidateRecord] = []

    with logging_context(platform=platform):
        reqlog("analyze_start", image_url=image_url, page_url=page_url, has_page_data=page_data is not None)
        try:
            results.extend(scrape_page(_coerce_page_data(page_data), platform, page_url))

            if is_embedded_image(image_url):
                # remote engines cannot fetch an image that is not hosted anywhere
                reqlog("remote_skipped", image_url=image_url, page_url=page_url, reason="embedded_image")
            else:
                async with AsyncExitStack() as stack:
                    cascade = strategies
                    if cascade is None:
                        host = _lazy_tab_host(stack, user_agent=user_agent, debug_html=debug_html)
                        cascade = default_strategies(host, settings or SettingsStore())
                    for strategy in cascade:
                        if not should_run(results, strategy.threshold):
                            jlog("info", event="strategy_skipped", strategy=strategy.name, best=best_confidence(results))
                            continue
                        results.extend(await _run_remote(strategy, image_url))
        except Exception as exc:
            jlog("error", event="analyze_error", error=str(exc))

        ranked = rank(results)
        reqlog("analyze_done", image_url=image_url, page_url=page_url, results=len(ranked), candidates=len(results))
        return AnalysisResult(platform=platform, results=ranked, search_links=search_links)


__all__ = ["RemoteStrategy", "analyze", "default_strategies", "scrape_page", "should_run"]
