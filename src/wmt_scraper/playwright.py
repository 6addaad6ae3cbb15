"""Playwright tab host used by the automation runner."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from playwright.async_api import BrowserContext, Page, Request, async_playwright
from playwright.async_api import Error as PlaywrightError

from .config import DEFAULT_USER_AGENT
from .debug import ensure_debug_html
from .engines.base import EngineParser
from .logging import jlog
from .models import CandidateRecord
from .runner import STATUS_COMPLETE, STATUS_LOADING, poll_until_ready

CHROMIUM_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-setuid-sandbox",
    "--disable-gpu",
    "--single-process",
    "--no-zygote",
]


class PlaywrightTabHost:
    """Maps Playwright page events onto the runner's ``loading``/``complete`` statuses.

    A main-frame document request is reported as ``loading`` and the page
    ``load`` event as ``complete``, so a client-side redirect after the first
    load shows up as ``complete -> loading -> complete``. Same-document
    navigations (``history.pushState``) issue no request and fire no ``load``,
    so they are not reported at all.
    """

    def __init__(self, context: BrowserContext, *, navigation_timeout_ms: int = 30000, debug_html: bool = False) -> None:
        self.context = context
        self.navigation_timeout_ms = navigation_timeout_ms
        self.debug_html = debug_html
        self._listeners: dict[Page, tuple[Callable, Callable]] = {}
        self._navigations: dict[Page, asyncio.Task] = {}

    async def open_tab(self, url: str, on_status: Callable[[str], None]) -> Page:
        page = await self.context.new_page()

        def on_request(request: Request) -> None:
            if not request.is_navigation_request():
                return
            try:
                frame = request.frame
            except PlaywrightError:
                return
            if frame == page.main_frame:
                on_status(STATUS_LOADING)

        def on_load(_page: Page) -> None:
            on_status(STATUS_COMPLETE)

        page.on("request", on_request)
        page.on("load", on_load)
        self._listeners[page] = (on_request, on_load)
        on_status(STATUS_LOADING)
        self._navigations[page] = asyncio.create_task(self._navigate(page, url))
        return page

    async def _navigate(self, page: Page, url: str) -> None:
        try:
            await page.goto(url, wait_until="commit", timeout=self.navigation_timeout_ms)
        except PlaywrightError as exc:
            # interrupted by the engine's own redirect, or the tab was closed
            jlog("debug", event="tab_navigation_error", url=url, error=str(exc))

    async def inject(self, tab: Page, parser: EngineParser, poll_seconds: float) -> list[CandidateRecord]:
        async def snapshot() -> tuple[str, str]:
            return await tab.content(), tab.url

        records = await poll_until_ready(snapshot, parser, poll_seconds)
        if self.debug_html:
            await ensure_debug_html(tab, parser.name)
        jlog("info", event="parser_done", parser=parser.name, url=tab.url, results=len(records))
        return records

    async def close_tab(self, tab: Page) -> None:
        listeners = self._listeners.pop(tab, None)
        if listeners:
            tab.remove_listener("request", listeners[0])
            tab.remove_listener("load", listeners[1])
        nav = self._navigations.pop(tab, None)
        if nav is not None and not nav.done():
            nav.cancel()
        await tab.close()


async def cleanup_playwright(context, browser) -> None:
    """Close the browser resources, ignoring errors."""

    try:
        if context:
            await context.close()
    except Exception:
        pass
    try:
        if browser:
            await browser.close()
    except Exception:
        pass


@asynccontextmanager
async def browser_tab_host(*, user_agent: str = DEFAULT_USER_AGENT, debug_html: bool = False) -> AsyncIterator[PlaywrightTabHost]:
    """Launch headless Chromium for the duration of the ``async with`` block."""

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=True, args=CHROMIUM_LAUNCH_ARGS)
        context = None
        try:
            context = await browser.new_context(user_agent=user_agent)
            yield PlaywrightTabHost(context, debug_html=debug_html)
        finally:
            await cleanup_playwright(context, browser)


__all__ = ["CHROMIUM_LAUNCH_ARGS", "PlaywrightTabHost", "browser_tab_host", "cleanup_playwright"]
