"""PDF statements to plain text via ``pdfplumber``.

The bank reconstructors in :mod:`wakaru.parsers` work on the text of all pages
joined with newlines; no layout analysis beyond ``extract_text`` is needed.
"""

from __future__ import annotations

import io

import pdfplumber
from pdfminer.pdfdocument import PDFPasswordIncorrect

from ..errors import CorruptFileError, PasswordError
from ..logging_setup import get_logger

_logger = get_logger("wakaru.readers.pdf")


def _password_failure(exc: BaseException) -> bool:
    # pdfplumber may wrap pdfminer errors; look through the chain and args.
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, PDFPasswordIncorrect):
            return True
        stack.extend(a for a in current.args if isinstance(a, BaseException))
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                stack.append(linked)
    return False


def extract_pdf_text(buffer: bytes, password: str | None = None) -> str:
    """Return the text of every page, joined with ``"\\n"``.

    Raises :class:`PasswordError` for an encrypted PDF opened without the
    right password and :class:`CorruptFileError` for bytes that are not a
    readable PDF.
    """

    try:
        with pdfplumber.open(io.BytesIO(buffer), password=password or "") as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:  # noqa: BLE001
        if _password_failure(e):
            raise PasswordError(supplied=bool(password)) from e
        raise CorruptFileError(f"Could not read PDF: {e}") from e

    _logger.debug("extract_pdf_text:done pages=%d", len(pages))
    return "\n".join(pages)


__all__ = ["extract_pdf_text"]
