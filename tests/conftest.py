from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))


@pytest.fixture(autouse=True)
def clear_docs_env(monkeypatch):
    """
    Keep `Settings()` deterministic: tests build URLs against the public defaults
    regardless of the developer's environment.
    """
    for key in list(os.environ):
        if key.startswith("PANDA3D_DOCS_"):
            monkeypatch.delenv(key, raising=False)
