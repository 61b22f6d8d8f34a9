from __future__ import annotations

import logging
import os


def configure_logging() -> None:
    """
    Configure logging defaults for both local runs and MCP stdio hosts.

    Goals:
    - Keep stdout free for the JSON-RPC stream (logging writes to stderr).
    - Avoid noisy third-party logs from the browser automation stack.
    - Keep configuration idempotent so hosts can override it safely.
    """
    root = logging.getLogger()

    if not root.handlers:
        level = os.environ.get("LOG_LEVEL", "WARNING").upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.WARNING),
            format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        )

    noisy_loggers = (
        "nodriver",
        "uc",
        "websockets",
        "asyncio",
        "httpx",
        "httpcore",
    )
    for name in noisy_loggers:
        # `asyncio` can emit noisy warnings about slow callbacks while Chromium starts.
        level = logging.ERROR if name == "asyncio" else logging.WARNING
        logging.getLogger(name).setLevel(level)
