"""Environment-backed settings for the parsing engine.

Values are resolved lazily by small helpers so that tests can monkeypatch the
environment and so that importing the package never reads ``.env`` (only the
CLI does that, via ``python-dotenv``).

Environment variables
---------------------
- ``WAKARU_CHUNK_SIZE``: rows processed between progress callbacks
  (default 1000).
- ``WAKARU_LOG_LEVEL``: consumed by :mod:`wakaru.logging_setup`.
- ``DATABASE_URL``: consumed by :mod:`wakaru_db.client`.
"""

from __future__ import annotations

import os
from datetime import timedelta, timezone

# Nigerian statements print wall-clock times in West Africa Time (no DST).
STATEMENT_TZ = timezone(timedelta(hours=1), "WAT")

DEFAULT_CHUNK_SIZE = 1000
MAX_ERRORS_STORED = 500

# Literal used when a bank row carries no narration at all.
DESCRIPTION_PLACEHOLDER = "Transaction"


def resolve_chunk_size(override: int | None = None) -> int:
    """Return the progress chunk size, honouring ``WAKARU_CHUNK_SIZE``.

    Invalid or non-positive values fall back to :data:`DEFAULT_CHUNK_SIZE`.
    """

    if override is not None and override > 0:
        return override
    raw = os.getenv("WAKARU_CHUNK_SIZE")
    try:
        size = int(raw) if raw else DEFAULT_CHUNK_SIZE
    except ValueError:
        size = DEFAULT_CHUNK_SIZE
    return size if size > 0 else DEFAULT_CHUNK_SIZE


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DESCRIPTION_PLACEHOLDER",
    "MAX_ERRORS_STORED",
    "STATEMENT_TZ",
    "resolve_chunk_size",
]
