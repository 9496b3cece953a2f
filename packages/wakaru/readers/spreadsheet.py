"""Spreadsheet (``.xlsx``) statement exports to raw rows via ``openpyxl``."""

from __future__ import annotations

import io
import zipfile
from datetime import date, datetime

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import CorruptFileError, MissingSheetError
from ..models import Cell, RawRow


def _to_cell(value: object) -> Cell:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float, datetime, date)):
        return value
    # time / timedelta and other exotic cell types
    return str(value)


def read_spreadsheet_rows(buffer: bytes, sheet_name: str | None = None) -> list[RawRow]:
    """Return every non-blank row of the first (or named) worksheet.

    Raises :class:`CorruptFileError` when the bytes are not a workbook and
    :class:`MissingSheetError` when the requested sheet does not exist or the
    workbook has no sheets.
    """

    try:
        workbook = load_workbook(io.BytesIO(buffer), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise CorruptFileError(f"Could not read spreadsheet: {e}") from e

    try:
        if sheet_name is not None:
            if sheet_name not in workbook.sheetnames:
                raise MissingSheetError(f'Sheet "{sheet_name}" not found')
            worksheet = workbook[sheet_name]
        else:
            if not workbook.sheetnames:
                raise MissingSheetError("No sheets found in spreadsheet")
            worksheet = workbook[workbook.sheetnames[0]]

        rows: list[RawRow] = []
        for values in worksheet.iter_rows(values_only=True):
            cells: RawRow = [_to_cell(v) for v in values]
            if any(c is not None for c in cells):
                rows.append(cells)
        return rows
    finally:
        workbook.close()


__all__ = ["read_spreadsheet_rows"]
