"""Amount and date normalization shared by every bank parser.

Amounts
-------
Statement amounts arrive as locale-formatted strings (``"₦1,234.56"``,
``"50,000.00"``), as sentinels meaning "no value" (``""``, ``"-"``, ``"--"``),
or as numeric spreadsheet cells. They are converted to integer kobo with
:class:`decimal.Decimal` and ``ROUND_HALF_UP`` so that no binary floating
point ever reaches a :class:`~wakaru.models.Transaction`. A zero amount is
never a real transaction in this domain and is reported as ``None``.

Dates
-----
Each bank prints dates in one fixed convention, selected with
:class:`DateFormat`. Parsing searches the cell text for the pattern (cells
often carry trailing noise), assumes two-digit years are in the 2000s, applies
the 12-hour clock rules (12 AM -> 00, 12 PM -> 12) and attaches the statement
time zone. Nothing in this module raises on malformed input; every helper
returns ``None`` instead.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum

from .config import STATEMENT_TZ
from .models import Cell

# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------


def cell_text(cell: Cell) -> str:
    """Return a stripped string for ``cell`` (``""`` when not provided).

    Integral floats lose their ``.0`` so that numeric references and account
    numbers read back as typed by the bank.
    """

    if cell is None:
        return ""
    if isinstance(cell, float):
        if math.isfinite(cell) and cell.is_integer():
            return str(int(cell))
        return str(cell)
    if isinstance(cell, datetime | date):
        return cell.isoformat()
    return str(cell).strip()


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

# "â‚¦" is the naira sign after a UTF-8 -> cp1252 round trip, common in exports.
_CURRENCY_NOISE_RE = re.compile(r"â‚¦|[₦$,\s]")
_SIGN_RE = re.compile(r"[+\-]")
_NO_VALUE = frozenset({"", "-", "--"})
_KOBO = Decimal(100)
_WHOLE = Decimal(1)


def _to_decimal(value: Cell) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        return None
    if text in _NO_VALUE:
        return None
    cleaned = _CURRENCY_NOISE_RE.sub("", text)
    if cleaned in _NO_VALUE:
        return None
    try:
        d = Decimal(cleaned)
    except InvalidOperation:
        return None
    return d if d.is_finite() else None


def _to_kobo(d: Decimal) -> int:
    return int((d * _KOBO).quantize(_WHOLE, rounding=ROUND_HALF_UP))


def parse_amount(value: Cell) -> int | None:
    """Convert a monetary cell to kobo.

    ``"50,000.00"`` -> ``5_000_000``. Sentinels, unparseable text and values
    that round to zero kobo return ``None``. A leading minus sign is kept.
    """

    d = _to_decimal(value)
    if d is None:
        return None
    kobo = _to_kobo(d)
    return kobo if kobo != 0 else None


def parse_debit_credit(debit: Cell, credit: Cell) -> int | None:
    """Combine separate debit/credit columns into one signed kobo amount.

    Credit wins when both columns (erroneously) hold a positive value.
    """

    credit_kobo = parse_amount(credit)
    if credit_kobo is not None and credit_kobo > 0:
        return credit_kobo
    debit_kobo = parse_amount(debit)
    if debit_kobo is not None and debit_kobo > 0:
        return -debit_kobo
    return None


def parse_signed_amount(value: Cell) -> int | None:
    """Parse an amount whose direction is an explicit ``+``/``-`` prefix."""

    if not isinstance(value, str):
        return parse_amount(value)
    text = value.strip()
    negative = text.startswith("-")
    d = _to_decimal(_SIGN_RE.sub("", text))
    if d is None:
        return None
    kobo = _to_kobo(abs(d))
    if kobo == 0:
        return None
    return -kobo if negative else kobo


def parse_money(text: str) -> Decimal | None:
    """Parse a money token from PDF text into a :class:`Decimal` (major units)."""

    return _to_decimal(text)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

MONTHS: dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}


def parse_month_name(name: str) -> int | None:
    """Return the 1-based month for an abbreviated name (case-insensitive)."""

    return MONTHS.get(name.strip().lower()[:3]) if name else None


_TIME = r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"


class DateFormat(Enum):
    """Per-bank date conventions.

    Each value is the regex searched for in the cell text. Named groups:
    ``day``, ``month`` (numeric) or ``mon`` (name), ``year`` (2 or 4 digits),
    and optionally ``hour``/``minute``/``second``/``meridiem``.
    """

    #: ``01-JAN-25`` (Access)
    DD_MMM_YY = r"(?P<day>\d{2})-(?P<mon>[A-Za-z]{3})-(?P<year>\d{2})(?!\d)"
    #: ``15-Nov-2025`` (FCMB, GTB, UBA)
    DD_MMM_YYYY = r"(?P<day>\d{2})-(?P<mon>[A-Za-z]{3})-(?P<year>\d{4})"
    #: ``15-Nov-2025`` or ``15-Nov- 2025`` when a PDF line break split it (Wema)
    DD_MMM_YYYY_LOOSE = r"(?P<day>\d{2})-(?P<mon>[A-Za-z]{3})-?\s*(?P<year>\d{4})"
    #: ``15-11-2025`` (Sterling)
    DD_MM_YYYY_DASH = r"(?P<day>\d{2})-(?P<month>\d{2})-(?P<year>\d{4})"
    #: ``15/11/2025`` (Zenith)
    DD_MM_YYYY_SLASH = r"(?P<day>\d{2})/(?P<month>\d{2})/(?P<year>\d{4})"
    #: ``22/01/23 12:46:35`` (Kuda)
    DD_MM_YY_TIME = r"(?P<day>\d{2})/(?P<month>\d{2})/(?P<year>\d{2})\s+" + _TIME
    #: ``29 Nov 2025 08:12:51`` (OPay)
    D_MON_YYYY_TIME = r"(?P<day>\d{1,2})\s+(?P<mon>[A-Za-z]{3})\s+(?P<year>\d{4})\s+" + _TIME
    #: ``12/29/2025 06:19:00 AM`` (PalmPay)
    MM_DD_YYYY_TIME_AMPM = (
        r"(?P<month>\d{2})/(?P<day>\d{2})/(?P<year>\d{4})\s+"
        + _TIME
        + r"\s+(?P<meridiem>[AaPp][Mm])"
    )
    #: ``01 Jan 2025`` (Standard Chartered)
    DD_MON_YYYY = r"(?P<day>\d{2}) (?P<mon>[A-Za-z]{3}) (?P<year>\d{4})"


_COMPILED: dict[DateFormat, re.Pattern[str]] = {f: re.compile(f.value) for f in DateFormat}

# How each convention is printed, for date cells a spreadsheet stores natively.
_PRINTED: dict[DateFormat, str] = {
    DateFormat.DD_MMM_YY: "%d-%b-%y",
    DateFormat.DD_MMM_YYYY: "%d-%b-%Y",
    DateFormat.DD_MMM_YYYY_LOOSE: "%d-%b-%Y",
    DateFormat.DD_MM_YYYY_DASH: "%d-%m-%Y",
    DateFormat.DD_MM_YYYY_SLASH: "%d/%m/%Y",
    DateFormat.DD_MM_YY_TIME: "%d/%m/%y %H:%M:%S",
    DateFormat.D_MON_YYYY_TIME: "%d %b %Y %H:%M:%S",
    DateFormat.MM_DD_YYYY_TIME_AMPM: "%m/%d/%Y %I:%M:%S %p",
    DateFormat.DD_MON_YYYY: "%d %b %Y",
}


def to_24_hour(hour: int, meridiem: str) -> int:
    """Convert a 12-hour clock reading: 12 AM -> 0, 12 PM -> 12, 1 PM -> 13."""

    m = meridiem.upper()
    if m == "PM" and hour != 12:
        return hour + 12
    if m == "AM" and hour == 12:
        return 0
    return hour


def _build(match: re.Match[str]) -> datetime | None:
    groups = match.groupdict()
    if groups.get("mon") is not None:
        month = parse_month_name(groups["mon"])
        if month is None:
            return None
    else:
        month = int(groups["month"])

    year = int(groups["year"])
    if len(groups["year"]) == 2:
        year += 2000

    hour = int(groups.get("hour") or 0)
    if groups.get("meridiem"):
        hour = to_24_hour(hour, groups["meridiem"])

    try:
        return datetime(
            year,
            month,
            int(groups["day"]),
            hour,
            int(groups.get("minute") or 0),
            int(groups.get("second") or 0),
            tzinfo=STATEMENT_TZ,
        )
    except ValueError:
        return None


def parse_date(value: Cell, fmt: DateFormat) -> datetime | None:
    """Parse a statement date cell in the bank's convention.

    Spreadsheet cells that already hold ``datetime``/``date`` objects are
    accepted as-is (naive values are placed in the statement time zone).
    """

    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=STATEMENT_TZ)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=STATEMENT_TZ)
    if not isinstance(value, str) or not value.strip():
        return None
    match = _COMPILED[fmt].search(value)
    if match is None:
        return None
    return _build(match)


def date_cell_text(value: Cell, fmt: DateFormat) -> str:
    """Return the text of a date cell as the bank prints it.

    Native ``datetime``/``date`` cells from a workbook are rendered in the
    ``fmt`` layout, so text-level matching and derived references see the same
    string a CSV export of the statement would carry. Other cells go through
    :func:`cell_text`.
    """

    if isinstance(value, datetime | date):
        return value.strftime(_PRINTED[fmt])
    return cell_text(value)


__all__ = [
    "DateFormat",
    "MONTHS",
    "cell_text",
    "date_cell_text",
    "parse_amount",
    "parse_date",
    "parse_debit_credit",
    "parse_money",
    "parse_month_name",
    "parse_signed_amount",
    "to_24_hour",
]
