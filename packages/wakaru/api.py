"""Public API and orchestration for the ``wakaru`` package.

:func:`parse_file` is the single entry point hosts call with the bytes of an
uploaded statement. It routes the file to the right reader for the bank,
parses the rows in chunks (reporting progress between chunks), and always
returns a :class:`~wakaru.models.StatementParseResult`: file-level failures
come back as its ``error`` string, never as exceptions.

Routing
-------
- PDF files, and text already extracted from a PDF, go through the bank's
  reconstructor. Banks that only publish spreadsheet exports reject them.
- Spreadsheets and delimited text are read as rows; the bank's preprocessor
  (PalmPay continuation lines) runs over those rows before parsing.

Progress
--------
``on_progress(percent, message)`` receives 5 ("Reading file..."), 20 ("Found N
rows..."), one update per chunk capped at 90, then 95 ("Finalizing...") and
100 ("Done").
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace

from .config import MAX_ERRORS_STORED, resolve_chunk_size
from .errors import EmptyFileError, StatementError, UnsupportedFormatError
from .logging_setup import get_logger, log_event
from .models import (
    BankType,
    ParseError,
    ParseStats,
    ProgressCallback,
    RawRow,
    StatementParseResult,
    Transaction,
)
from .parsers import BankParser, get_parser, supported_banks
from .readers import (
    SourceFormat,
    detect_format,
    extract_pdf_text,
    iter_chunks,
    read_delimited_rows,
    read_spreadsheet_rows,
)

_logger = get_logger("wakaru.api")


def _no_progress(_percent: int, _message: str) -> None:
    return None


def _decode_text(buffer: bytes) -> str:
    try:
        return buffer.decode("utf-8-sig")
    except UnicodeDecodeError:
        return buffer.decode("latin-1")


def load_rows(
    parser: BankParser,
    buffer: bytes,
    file_name: str,
    password: str | None = None,
) -> list[RawRow]:
    """Read ``buffer`` into rows the bank's parser understands.

    Raises :class:`~wakaru.errors.StatementError` subclasses for files that
    cannot be read.
    """

    if not buffer:
        raise EmptyFileError(file_name)

    fmt = detect_format(file_name, buffer)
    if fmt.is_text:
        if not parser.spec.accepts_pdf:
            raise UnsupportedFormatError(
                f"{parser.display_name} statements are read from spreadsheet or CSV "
                "exports, not PDF"
            )
        if fmt is SourceFormat.PDF:
            text = extract_pdf_text(buffer, password)
        else:
            text = _decode_text(buffer)
        return parser.reconstruct_rows(text)

    if fmt is SourceFormat.SPREADSHEET:
        rows = read_spreadsheet_rows(buffer, parser.spec.sheet_name)
    else:
        rows = read_delimited_rows(buffer)
    return parser.preprocess_rows(rows)


def parse_rows(
    parser: BankParser,
    rows: list[RawRow],
    on_progress: ProgressCallback | None = None,
    *,
    chunk_size: int | None = None,
) -> tuple[list[Transaction], list[ParseError], ParseStats]:
    """Parse ``rows`` in chunks; return transactions in row order."""

    progress = on_progress or _no_progress
    size = resolve_chunk_size(chunk_size)
    total = len(rows)

    transactions: list[Transaction] = []
    errors: list[ParseError] = []
    failed = 0
    done = 0
    for chunk in iter_chunks(rows, size):
        for offset, row in enumerate(chunk):
            result = parser.parse_transaction_safe(row, done + offset)
            if result.transaction is not None:
                transactions.append(result.transaction)
            elif result.error is not None:
                failed += 1
                if len(errors) < MAX_ERRORS_STORED:
                    errors.append(result.error)
        done += len(chunk)
        progress(min(90, 20 + round(done / total * 70)), f"Processing {done} of {total} rows...")

    stats = ParseStats(
        total_rows=total,
        successful=len(transactions),
        failed=failed,
        skipped=total - len(transactions) - failed,
    )
    return transactions, errors, stats


def parse_file(
    buffer: bytes,
    file_name: str,
    bank: str | BankType,
    password: str | None = None,
    on_progress: ProgressCallback | None = None,
    *,
    chunk_size: int | None = None,
) -> StatementParseResult:
    """Parse one statement file into normalized transactions (newest first).

    Parameters
    ----------
    buffer:
        Raw file bytes (PDF, ``.xlsx``, CSV, or pre-extracted PDF text).
    file_name:
        Original file name; its extension selects the reader.
    bank:
        Bank short code, e.g. ``"gtb"`` (see :func:`supported_banks`).
    password:
        Password for encrypted PDFs.
    on_progress:
        Optional ``(percent, message)`` callback.
    chunk_size:
        Rows parsed between progress updates; defaults to ``WAKARU_CHUNK_SIZE``
        or 1000.
    """

    started = time.perf_counter()
    progress = on_progress or _no_progress

    def _elapsed_ms() -> float:
        return (time.perf_counter() - started) * 1000.0

    try:
        progress(5, "Reading file...")
        parser = get_parser(bank)
        rows = load_rows(parser, buffer, file_name, password)
    except StatementError as e:
        log_event(
            _logger, logging.WARNING, "parse_file:failed", file=file_name, bank=bank, error=e
        )
        return StatementParseResult(error=str(e), stats=ParseStats(elapsed_ms=_elapsed_ms()))

    progress(20, f"Found {len(rows)} rows...")
    transactions, errors, stats = parse_rows(parser, rows, progress, chunk_size=chunk_size)

    progress(95, "Finalizing...")
    transactions.sort(key=lambda t: t.date, reverse=True)
    stats = replace(stats, elapsed_ms=_elapsed_ms())
    log_event(
        _logger,
        logging.INFO,
        "parse_file:done",
        file=file_name,
        bank=parser.bank.value,
        rows=stats.total_rows,
        transactions=stats.successful,
        failed=stats.failed,
        skipped=stats.skipped,
        elapsed_ms=round(stats.elapsed_ms, 1),
    )
    progress(100, "Done")
    return StatementParseResult(transactions=transactions, errors=errors, stats=stats)


__all__ = [
    "get_parser",
    "load_rows",
    "parse_file",
    "parse_rows",
    "supported_banks",
]
