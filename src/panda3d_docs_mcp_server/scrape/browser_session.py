from __future__ import annotations

import asyncio
import atexit
import contextlib
import logging
import os
import shutil
from typing import Any, AsyncIterator, Awaitable, Callable

from ..errors import BrowserUnavailableError
from ..settings import Settings, get_settings
from .page import NodriverPage, closing_page

LOGGER = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


def _import_nodriver() -> Any:
    try:
        import nodriver as uc  # type: ignore
    except Exception as exc:  # pragma: no cover
        raise BrowserUnavailableError(
            "nodriver is required for documentation lookups. Install with: pip install nodriver"
        ) from exc
    return uc


def _resolve_browser_executable_path() -> str | None:
    for key in (
        "PANDA3D_DOCS_BROWSER_EXECUTABLE_PATH",
        "BROWSER_EXECUTABLE_PATH",
        "CHROME_BIN",
        "CHROME_PATH",
    ):
        value = (os.environ.get(key) or "").strip()
        if value:
            return value

    for name in ("chromium", "google-chrome", "google-chrome-stable", "chrome", "chromium-browser"):
        resolved = shutil.which(name)
        if resolved:
            return resolved

    return None


def _resolve_sandbox_enabled() -> bool:
    """
    Determine whether Chromium sandbox should be enabled.

    Chromium cannot start sandboxed as root (typical in containers), so the
    sandbox is only enabled when explicitly requested by a non-root user.
    """
    if hasattr(os, "geteuid") and os.geteuid() == 0:
        return False

    raw_sandbox = (os.environ.get("PANDA3D_DOCS_SANDBOX") or "").strip().lower()
    return raw_sandbox in ("1", "true", "yes", "on")


def _browser_args() -> list[str]:
    return [
        "--window-size=1920,1080",
        "--disable-dev-shm-usage",
        "--disable-blink-features=AutomationControlled",
        "--disable-logging",
        "--log-level=3",
        f"--user-agent={DEFAULT_USER_AGENT}",
    ]


async def launch_browser(settings: Settings) -> Any:
    uc = _import_nodriver()
    executable = _resolve_browser_executable_path()
    if executable is None:
        raise BrowserUnavailableError(
            "No Chromium-based browser executable found. "
            "Install Chromium/Chrome or set PANDA3D_DOCS_BROWSER_EXECUTABLE_PATH."
        )
    return await uc.start(
        headless=True,
        browser_executable_path=executable,
        browser_args=_browser_args(),
        sandbox=_resolve_sandbox_enabled(),
    )


class BrowserSession:
    """
    One long-lived headless browser shared by all requests.

    The browser is started lazily on the first `open_page()` and reused until
    `close()`. Every request gets its own tab, closed when the request ends.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        launcher: Callable[[Settings], Awaitable[Any]] = launch_browser,
        cdp: Any = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._launcher = launcher
        self._cdp = cdp
        self._browser: Any = None
        self._lock = asyncio.Lock()

    @property
    def started(self) -> bool:
        return self._browser is not None

    async def ensure_browser(self) -> Any:
        async with self._lock:
            if self._browser is not None and getattr(self._browser, "stopped", False):
                LOGGER.warning("Browser process exited; starting a new one.")
                self._browser = None
            if self._browser is None:
                LOGGER.info("Initializing headless browser...")
                self._browser = await self._launcher(self._settings)
                LOGGER.info("Browser initialized successfully.")
            return self._browser

    def _resolve_cdp(self) -> Any:
        if self._cdp is None:
            self._cdp = _import_nodriver().cdp
        return self._cdp

    @contextlib.asynccontextmanager
    async def open_page(self) -> AsyncIterator[NodriverPage]:
        browser = await self.ensure_browser()
        tab = await browser.get("about:blank", new_tab=True)
        page = NodriverPage(tab, settings=self._settings)
        async with closing_page(page):
            await page.attach(self._resolve_cdp())
            yield page

    async def close(self) -> None:
        async with self._lock:
            browser, self._browser = self._browser, None
        if browser is None:
            return
        LOGGER.info("Closing browser...")
        stopped = browser.stop()
        if asyncio.iscoroutine(stopped):
            await stopped
        LOGGER.info("Browser closed successfully.")

    def close_sync(self) -> None:
        browser, self._browser = self._browser, None
        if browser is None:
            return
        stopped = browser.stop()
        if asyncio.iscoroutine(stopped):
            # No loop is running at interpreter exit; drop the coroutine.
            stopped.close()


_SESSION: BrowserSession | None = None
_SESSION_LOCK = asyncio.Lock()
_SHUTDOWN_REGISTERED = False


async def get_browser_session() -> BrowserSession:
    global _SESSION
    if _SESSION is not None:
        return _SESSION
    async with _SESSION_LOCK:
        if _SESSION is None:
            _SESSION = BrowserSession()
            _register_shutdown()
    return _SESSION


async def shutdown_browser_session() -> None:
    global _SESSION
    session, _SESSION = _SESSION, None
    if session is not None:
        await session.close()


def shutdown_browser_session_sync() -> None:
    global _SESSION
    session, _SESSION = _SESSION, None
    if session is not None:
        session.close_sync()


def _register_shutdown() -> None:
    global _SHUTDOWN_REGISTERED
    if _SHUTDOWN_REGISTERED:
        return
    _SHUTDOWN_REGISTERED = True
    atexit.register(shutdown_browser_session_sync)
