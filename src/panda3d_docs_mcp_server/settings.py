from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_BASE_URL = "https://docs.panda3d.org"
DEFAULT_DOCS_VERSION = "1.10"
DEFAULT_DOCS_LANGUAGE = "python"
DEFAULT_NAVIGATION_TIMEOUT_SECONDS = 30.0
DEFAULT_NETWORK_IDLE_SECONDS = 0.5


def _get_str_env(key: str, default: str) -> str:
    raw = (os.environ.get(key) or "").strip()
    return raw or default


def _get_float_env(key: str, default: float, *, minimum: float, maximum: float) -> float:
    raw = (os.environ.get(key) or "").strip()
    try:
        value = float(raw) if raw else default
    except ValueError:
        value = default
    if value <= 0:
        value = default
    return max(minimum, min(value, maximum))


@dataclass(frozen=True)
class Settings:
    """Runtime configuration (env-first).

    Note: keep this module lightweight; it is imported by tests.
    """

    base_url: str = field(
        default_factory=lambda: _get_str_env("PANDA3D_DOCS_BASE_URL", DEFAULT_BASE_URL).rstrip("/")
    )
    docs_version: str = field(
        default_factory=lambda: _get_str_env("PANDA3D_DOCS_VERSION", DEFAULT_DOCS_VERSION).strip("/")
    )
    docs_language: str = field(
        default_factory=lambda: _get_str_env("PANDA3D_DOCS_LANGUAGE", DEFAULT_DOCS_LANGUAGE).strip("/")
    )
    navigation_timeout_seconds: float = field(
        default_factory=lambda: _get_float_env(
            "PANDA3D_DOCS_NAVIGATION_TIMEOUT_SECONDS",
            DEFAULT_NAVIGATION_TIMEOUT_SECONDS,
            minimum=1.0,
            maximum=300.0,
        )
    )
    network_idle_seconds: float = field(
        default_factory=lambda: _get_float_env(
            "PANDA3D_DOCS_NETWORK_IDLE_SECONDS",
            DEFAULT_NETWORK_IDLE_SECONDS,
            minimum=0.1,
            maximum=10.0,
        )
    )

    @property
    def section_url(self) -> str:
        """Default section that relative result links are resolved against."""
        return f"{self.base_url}/{self.docs_version}/{self.docs_language}"

    @property
    def search_url(self) -> str:
        return f"{self.section_url}/search"


def get_settings() -> Settings:
    return Settings()
