"""File readers: statement bytes to raw rows or PDF text.

Readers do all the I/O-shaped work up front so that the row parsers only ever
see in-memory rows or text. They raise :mod:`wakaru.errors` exceptions for
files that cannot be read at all.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import StrEnum
from pathlib import PurePath

from ..errors import UnsupportedFormatError
from .delimited import read_delimited_rows
from .pdf import extract_pdf_text
from .spreadsheet import read_spreadsheet_rows


class SourceFormat(StrEnum):
    SPREADSHEET = "spreadsheet"
    DELIMITED_TEXT = "delimited_text"
    PDF = "pdf"
    # text already extracted from a PDF (e.g. by another tool)
    PDF_TEXT = "pdf_text"

    @property
    def is_text(self) -> bool:
        return self in (SourceFormat.PDF, SourceFormat.PDF_TEXT)


_EXTENSIONS: dict[str, SourceFormat] = {
    ".xlsx": SourceFormat.SPREADSHEET,
    ".xlsm": SourceFormat.SPREADSHEET,
    ".csv": SourceFormat.DELIMITED_TEXT,
    ".pdf": SourceFormat.PDF,
    ".txt": SourceFormat.PDF_TEXT,
}

_PDF_MAGIC = b"%PDF"
_ZIP_MAGIC = b"PK\x03\x04"


def detect_format(file_name: str, buffer: bytes) -> SourceFormat:
    """Pick the reader for a file from its extension, else its leading bytes.

    Legacy ``.xls`` workbooks are rejected with
    :class:`UnsupportedFormatError`; so is anything unrecognised.
    """

    suffix = PurePath(file_name).suffix.lower()
    if suffix == ".xls":
        raise UnsupportedFormatError("Legacy .xls workbooks are not supported; save as .xlsx")
    fmt = _EXTENSIONS.get(suffix)
    if fmt is not None:
        return fmt
    if buffer.startswith(_PDF_MAGIC):
        return SourceFormat.PDF
    if buffer.startswith(_ZIP_MAGIC):
        return SourceFormat.SPREADSHEET
    raise UnsupportedFormatError(f"Unsupported file type: {file_name}")


def iter_chunks[T](rows: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of ``rows`` of at most ``size`` items."""

    if size <= 0:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(rows), size):
        yield rows[start : start + size]


__all__ = [
    "SourceFormat",
    "detect_format",
    "extract_pdf_text",
    "iter_chunks",
    "read_delimited_rows",
    "read_spreadsheet_rows",
]
