from .browser_session import (
    BrowserSession,
    get_browser_session,
    shutdown_browser_session,
    shutdown_browser_session_sync,
)
from .page import DocsPage, NetworkIdleWatcher, NodriverPage, PageProvider

__all__ = [
    "BrowserSession",
    "DocsPage",
    "NetworkIdleWatcher",
    "NodriverPage",
    "PageProvider",
    "get_browser_session",
    "shutdown_browser_session",
    "shutdown_browser_session_sync",
]
