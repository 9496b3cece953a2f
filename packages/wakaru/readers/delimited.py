"""Delimited-text (CSV) statement exports to raw rows."""

from __future__ import annotations

import csv
import io

from ..logging_setup import get_logger
from ..models import RawRow

_logger = get_logger("wakaru.readers.delimited")


def _decode(buffer: bytes) -> str:
    try:
        return buffer.decode("utf-8-sig")
    except UnicodeDecodeError:
        _logger.debug("read_delimited:latin1_fallback bytes=%d", len(buffer))
        return buffer.decode("latin-1")


def read_delimited_rows(buffer: bytes) -> list[RawRow]:
    """Parse comma-separated text into rows.

    Quoted fields may contain commas and doubled quotes. Blank lines are
    dropped; cells are stripped and blank cells become ``None``.
    """

    reader = csv.reader(io.StringIO(_decode(buffer), newline=""))
    rows: list[RawRow] = []
    for record in reader:
        cells: RawRow = [value.strip() or None for value in record]
        if any(c is not None for c in cells):
            rows.append(cells)
    return rows


__all__ = ["read_delimited_rows"]
