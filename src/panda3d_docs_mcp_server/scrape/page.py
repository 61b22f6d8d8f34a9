from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Any, AsyncContextManager, Callable, Protocol

from ..errors import NavigationTimeoutError
from ..models import PageSnapshot
from ..settings import Settings

LOGGER = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.1


class DocsPage(Protocol):
    """What the search/extract pipeline needs from a browser tab."""

    async def goto(self, url: str) -> None: ...

    async def snapshot(self) -> PageSnapshot: ...

    async def close(self) -> None: ...


class PageProvider(Protocol):
    def open_page(self) -> AsyncContextManager[DocsPage]: ...


class NetworkIdleWatcher:
    """
    Track in-flight requests of one tab from CDP `Network.*` events.

    The tab counts as idle once no request has been in flight for the idle
    window (the same contract as Puppeteer's `networkidle0`).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._inflight: set[str] = set()
        self._last_activity = clock()

    def reset(self) -> None:
        self._inflight.clear()
        self._last_activity = self._clock()

    @property
    def inflight(self) -> int:
        return len(self._inflight)

    def request_started(self, request_id: str) -> None:
        self._inflight.add(request_id)
        self._last_activity = self._clock()

    def request_done(self, request_id: str) -> None:
        self._inflight.discard(request_id)
        self._last_activity = self._clock()

    def idle_for(self) -> float:
        if self._inflight:
            return 0.0
        return self._clock() - self._last_activity

    # CDP event handlers (nodriver passes the event object).
    def on_request_will_be_sent(self, event: Any) -> None:
        self.request_started(str(event.request_id))

    def on_loading_finished(self, event: Any) -> None:
        self.request_done(str(event.request_id))

    def on_loading_failed(self, event: Any) -> None:
        self.request_done(str(event.request_id))


async def _maybe_await(value: Any) -> Any:
    if asyncio.iscoroutine(value):
        return await value
    return value


class NodriverPage:
    """A single nodriver tab owned by one request."""

    def __init__(self, tab: Any, *, settings: Settings) -> None:
        self._tab = tab
        self._settings = settings
        self._watcher = NetworkIdleWatcher()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def attach(self, cdp: Any) -> None:
        """Subscribe to network events so `goto()` can wait for idle."""
        self._tab.add_handler(cdp.network.RequestWillBeSent, self._watcher.on_request_will_be_sent)
        self._tab.add_handler(cdp.network.LoadingFinished, self._watcher.on_loading_finished)
        self._tab.add_handler(cdp.network.LoadingFailed, self._watcher.on_loading_failed)
        await self._tab.send(cdp.network.enable())

    async def goto(self, url: str) -> None:
        timeout = self._settings.navigation_timeout_seconds
        self._watcher.reset()
        try:
            await asyncio.wait_for(self._navigate_until_idle(url), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise NavigationTimeoutError(url, timeout) from exc

    async def _navigate_until_idle(self, url: str) -> None:
        await self._tab.get(url)
        idle_window = self._settings.network_idle_seconds
        while True:
            ready_state = await self._tab.evaluate("document.readyState")
            if ready_state == "complete" and self._watcher.idle_for() >= idle_window:
                return
            await asyncio.sleep(POLL_INTERVAL_SECONDS)

    async def snapshot(self) -> PageSnapshot:
        url = await self._tab.evaluate("window.location.href")
        title = await self._tab.evaluate("document.title")
        html = await _maybe_await(self._tab.get_content())
        if isinstance(html, (bytes, bytearray)):
            html = bytes(html).decode("utf-8", errors="ignore")
        return PageSnapshot(
            url=url if isinstance(url, str) else "",
            title=title if isinstance(title, str) else "",
            html=str(html or ""),
        )

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await _maybe_await(self._tab.close())


@contextlib.asynccontextmanager
async def closing_page(page: NodriverPage):
    """Yield `page` and close it on every exit path."""
    try:
        yield page
    finally:
        try:
            await page.close()
        except Exception:
            LOGGER.warning("Failed to close browser tab", exc_info=True)
