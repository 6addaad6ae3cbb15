"""Headless automation runner with redirect-aware settle detection.

A single "load complete" is not a reliable signal on reverse-search engines:
the upload-by-URL redirect stub also completes. The runner therefore injects
only after the tab has been complete for ``settle_seconds`` with no new
navigation, and a hard ceiling of ``total_seconds`` bounds every invocation.

State machine per invocation::

    CREATED -> LOADING <-> SETTLE_PENDING -> INJECTING -> DONE
    (any state) --hard timeout--> DONE
"""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from .config import PARSER_POLL_INTERVAL_SECONDS
from .engines.base import EngineParser
from .logging import jlog
from .models import CandidateRecord

STATUS_LOADING = "loading"
STATUS_COMPLETE = "complete"


class State(str, enum.Enum):
    CREATED = "created"
    LOADING = "loading"
    SETTLE_PENDING = "settle_pending"
    INJECTING = "injecting"
    DONE = "done"


class TabHost(Protocol):
    """Browser primitives the runner needs; one tab per invocation."""

    async def open_tab(self, url: str, on_status: Callable[[str], None]) -> Any: ...

    async def inject(self, tab: Any, parser: EngineParser, poll_seconds: float) -> list[CandidateRecord]: ...

    async def close_tab(self, tab: Any) -> None: ...


class SettleMachine:
    """Navigation-event driven debounce with a settle timer and a hard ceiling timer."""

    def __init__(
        self,
        *,
        settle_seconds: float,
        total_seconds: float,
        on_settled: Callable[[], None],
        on_timeout: Callable[[], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.settle_seconds = settle_seconds
        self.total_seconds = total_seconds
        self._on_settled = on_settled
        self._on_timeout = on_timeout
        self._loop = loop or asyncio.get_running_loop()
        self._settle_timer: asyncio.TimerHandle | None = None
        self._hard_timer: asyncio.TimerHandle | None = None
        self.state = State.CREATED
        self.timed_out = False
        self.history: list[tuple[str, State]] = [("init", State.CREATED)]

    @property
    def done(self) -> bool:
        return self.state is State.DONE

    def _move(self, event: str, state: State) -> None:
        self.state = state
        self.history.append((event, state))

    def start(self) -> None:
        self._hard_timer = self._loop.call_later(self.total_seconds, self._hard_fired)

    def on_status(self, status: str) -> None:
        if self.state in (State.INJECTING, State.DONE):
            return
        if status == STATUS_LOADING:
            # a redirect is in flight; the page is not final yet
            self._cancel_settle()
            self._move(status, State.LOADING)
        elif status == STATUS_COMPLETE:
            self._cancel_settle()
            self._settle_timer = self._loop.call_later(self.settle_seconds, self._settle_fired)
            self._move(status, State.SETTLE_PENDING)

    def _settle_fired(self) -> None:
        self._settle_timer = None
        if self.state is not State.SETTLE_PENDING:
            return
        self._move("settled", State.INJECTING)
        self._on_settled()

    def _hard_fired(self) -> None:
        self._hard_timer = None
        if self.done:
            return
        self.timed_out = True
        self._on_timeout()

    def _cancel_settle(self) -> None:
        if self._settle_timer is not None:
            self._settle_timer.cancel()
            self._settle_timer = None

    def finish(self, event: str = "finish") -> bool:
        """Move to DONE and cancel timers; ``False`` when already done."""

        if self.done:
            return False
        self._cancel_settle()
        if self._hard_timer is not None:
            self._hard_timer.cancel()
            self._hard_timer = None
        self._move(event, State.DONE)
        return True


async def poll_until_ready(
    fetch_html: Callable[[], Awaitable[tuple[str, str]]],
    parser: EngineParser,
    poll_seconds: float,
    *,
    interval: float = PARSER_POLL_INTERVAL_SECONDS,
) -> list[CandidateRecord]:
    """Poll the rendered document until the parser's readiness signal or the poll budget, then parse.

    ``fetch_html`` returns ``(html, url)`` of the current document and may raise
    while the page is mid-navigation; such snapshots are skipped.
    """

    loop = asyncio.get_running_loop()
    deadline = loop.time() + poll_seconds
    while True:
        try:
            html, url = await fetch_html()
            if parser.is_ready(html, url):
                break
        except Exception as exc:
            jlog("debug", event="parser_poll_snapshot_error", parser=parser.name, error=str(exc))
        if loop.time() >= deadline:
            break
        await asyncio.sleep(interval)
    # lazy-loaded tiles keep arriving after the first signal
    await asyncio.sleep(parser.settle_buffer)
    html, url = await fetch_html()
    return parser.parse(html, url)


async def run_in_tab(
    host: TabHost,
    target_url: str,
    parser: EngineParser,
    *,
    settle_seconds: float,
    total_seconds: float,
    poll_seconds: float | None = None,
) -> list[CandidateRecord]:
    """Open ``target_url`` in a fresh tab, wait for it to settle, run ``parser`` in it.

    Always returns within ``total_seconds`` and never raises; every failure
    yields an empty list. The tab is closed on every exit path.
    """

    loop = asyncio.get_running_loop()
    outcome: asyncio.Future[list[CandidateRecord]] = loop.create_future()
    poll = parser.poll_seconds if poll_seconds is None else poll_seconds
    tab: Any = None
    inject_task: asyncio.Task | None = None

    def finish(records: list[CandidateRecord], event: str) -> None:
        if machine.finish(event) and not outcome.done():
            outcome.set_result(records)

    async def inject() -> None:
        try:
            if tab is None:
                raise RuntimeError("tab not open")
            records = await host.inject(tab, parser, poll)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            jlog("warning", event="runner_inject_error", parser=parser.name, url=target_url, error=str(exc))
            records = []
        finish(list(records or []), "injected")

    def on_settled() -> None:
        nonlocal inject_task
        inject_task = loop.create_task(inject())

    def on_timeout() -> None:
        jlog("warning", event="runner_hard_timeout", parser=parser.name, url=target_url, state=machine.state.value)
        finish([], "hard_timeout")

    machine = SettleMachine(
        settle_seconds=settle_seconds,
        total_seconds=total_seconds,
        on_settled=on_settled,
        on_timeout=on_timeout,
        loop=loop,
    )

    async def close(opened: Any) -> None:
        try:
            await host.close_tab(opened)
        except Exception as exc:
            jlog("debug", event="runner_close_tab_error", parser=parser.name, error=str(exc))

    def close_late(opening: asyncio.Future) -> None:
        # the tab finished opening after this invocation gave up on it
        if opening.cancelled() or opening.exception() is not None:
            return
        loop.create_task(close(opening.result()))

    async def open_tab() -> None:
        nonlocal tab
        opening = asyncio.ensure_future(host.open_tab(target_url, machine.on_status))
        try:
            opened = await asyncio.shield(opening)
        except asyncio.CancelledError:
            opening.add_done_callback(close_late)
            raise
        except Exception as exc:
            jlog("warning", event="runner_open_tab_error", parser=parser.name, url=target_url, error=str(exc))
            finish([], "open_failed")
            return
        tab = opened

    machine.start()
    open_task = loop.create_task(open_tab())
    try:
        return await outcome
    finally:
        machine.finish("cleanup")
        for task in (open_task, inject_task):
            if task is not None and not task.done():
                task.cancel()
        if tab is not None:
            await close(tab)


__all__ = [
    "STATUS_COMPLETE",
    "STATUS_LOADING",
    "SettleMachine",
    "State",
    "TabHost",
    "poll_until_ready",
    "run_in_tab",
]
