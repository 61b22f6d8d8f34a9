from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable


def _timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class TraceLog:
    """
    Request-scoped diagnostic log returned to the MCP client.

    Each `get_docs` call builds its own instance, so entries never leak between
    requests. Entries are also mirrored to `logger` at DEBUG level.
    """

    logger: logging.Logger | None = None
    entries: list[str] = field(default_factory=list)

    def emit(self, message: str) -> None:
        if self.logger is not None:
            self.logger.debug(message)
        self.entries.append(f"[{_timestamp()}] {message}")

    def extend(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.emit(message)

    def snapshot(self) -> tuple[str, ...]:
        return tuple(self.entries)

    def render(self) -> str:
        return "\n".join(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
