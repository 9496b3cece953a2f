"""Logging for the ``wakaru`` package.

Messages follow one shape, ``component:event key=value ...``, for example
``parse_row:skipped bank=GTB row_index=12 reason=no_date``. The component
names the function or stage that logged, the event says what happened, and
the fields are the values a reader greps for. :func:`log_event` builds that
shape so call sites only name the event and its fields.

Levels are fixed by what happened, not by who logs it:

- ``DEBUG``: per-row and per-page diagnostics (a row skipped because it holds
  no date or amount, a decoding fallback). A statement can produce hundreds.
- ``INFO``: one summary line per parsed file or per persistence batch.
- ``WARNING``: a whole file could not be parsed.
- ``ERROR``: a row raised while parsing. The row is reported in the result
  and the rest of the statement still parses.

Only entrypoints (the CLI) call :func:`configure_logging`. Library modules
call ``get_logger("wakaru.<module>")`` and never attach handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "wakaru"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_CONFIGURED = False


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``WAKARU_LOG_LEVEL`` when ``None``) into a level number.

    Unknown names fall back to ``WARNING``, so library use stays quiet.
    """

    if level is None:
        level = os.getenv("WAKARU_LOG_LEVEL")
    if isinstance(level, int):
        return level
    if level:
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        mapped = logging.getLevelNamesMapping().get(name)
        if mapped is not None:
            return mapped
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach one ``StreamHandler`` to the ``wakaru`` logger. Later calls are no-ops."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


def log_event(logger: logging.Logger, level: int, event: str, /, **fields: object) -> None:
    """Log ``event`` (``"component:event"``) followed by ``key=value`` fields.

    Field values stay lazy ``%s`` arguments, in keyword order.
    """

    if not logger.isEnabledFor(level):
        return
    template = " ".join([event, *(f"{key}=%s" for key in fields)])
    logger.log(level, template, *fields.values())


def log_row_skipped(logger: logging.Logger, bank: str, row_index: int, reason: str) -> None:
    log_event(
        logger, logging.DEBUG, "parse_row:skipped", bank=bank, row_index=row_index, reason=reason
    )


def log_row_failed(logger: logging.Logger, bank: str, row_index: int, error: str) -> None:
    log_event(
        logger, logging.ERROR, "parse_row:failed", bank=bank, row_index=row_index, error=error
    )


__all__ = [
    "configure_logging",
    "get_logger",
    "log_event",
    "log_row_failed",
    "log_row_skipped",
    "resolve_level",
]
