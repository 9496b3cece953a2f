"""Pytest configuration for test isolation.

The engine reads a few settings from the environment (``WAKARU_CHUNK_SIZE``,
``WAKARU_LOG_LEVEL``, ``DATABASE_URL``), and ``wakaru_db.client`` keeps one
process-wide engine bound to the first URL it sees. A developer shell or a
local ``.env`` could leak into tests through either, so every test starts
with those variables cleared and ends with the shared engine disposed.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from wakaru_db.client import dispose_engine


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("WAKARU_CHUNK_SIZE", "WAKARU_LOG_LEVEL", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    yield
    dispose_engine()
