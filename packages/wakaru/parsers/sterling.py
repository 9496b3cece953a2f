"""Sterling Bank statements (PDF text, two layouts).

Layout A prints numeric ``dd-mm-yyyy`` dates and ``Money In / Money Out /
Balance`` columns where an empty side is a ``-``. Layout B prints
``dd-Mmm-yyyy`` dates with ``Debit / Credit / Balance`` and a value date,
and tucks the reference into the narration (``Ref: 0123456789``). Both are
rebuilt into the same row shape::

    [date dd-mm-yyyy, reference, narration, money in, money out, balance]
"""

from __future__ import annotations

import re

from ..models import BankType, RawRow, TransactionType
from ..normalize import MONTHS, DateFormat, parse_money
from ..reconstruct import collapse_whitespace, iter_entries, strip_boilerplate
from ..rules import CounterpartyRule, group_rule, narration_rule, type_rule
from .base import AmountMode, BankSpec, ColumnMap

_LAYOUT_B_MARKER_RE = re.compile(r"\d{2}-[A-Za-z]{3}-\d{4}")

# ---- layout A ---------------------------------------------------------------

_A_BOILERPLATE = (
    re.compile(r"Page \d+ of \d+", re.IGNORECASE),
    re.compile(
        r"Date\s+Reference\s+Narration\s+Money\s*In\s+Money\s*Out\s+Balance", re.IGNORECASE
    ),
)
_A_ANCHOR_RE = re.compile(r"(\d{2}-\d{2}-\d{4})")
_A_DATE_RANGE_RE = re.compile(r"^\d{2}-\d{2}-\d{4}\s+to\s+\d{2}-\d{2}-\d{4}", re.IGNORECASE)
_A_DATE_RANGE_LABEL_RE = re.compile(r"date\s*range", re.IGNORECASE)
_A_TOKEN_RE = re.compile(r"([\d,]+\.\d{2}|-)")
_A_HEAD_RE = re.compile(r"^(\d{2}-\d{2}-\d{4})\s+(\d{10})?")


def _extract_layout_a(text: str) -> list[RawRow]:
    cleaned = collapse_whitespace(strip_boilerplate(text, _A_BOILERPLATE))
    rows: list[RawRow] = []
    for entry in iter_entries(cleaned, _A_ANCHOR_RE):
        body = entry.text
        if _A_DATE_RANGE_RE.match(body) or _A_DATE_RANGE_LABEL_RE.search(body):
            continue
        tokens = list(_A_TOKEN_RE.finditer(body))
        if len(tokens) < 3:
            continue
        money_in, money_out, balance = tokens[-3], tokens[-2], tokens[-1]
        if balance.group(0) == "-":
            continue
        head = _A_HEAD_RE.match(body)
        if head is None:
            continue
        narration = body[head.end() : money_in.start()].strip()
        rows.append(
            [
                head.group(1),
                head.group(2) or "",
                narration,
                money_in.group(0),
                money_out.group(0),
                balance.group(0),
            ]
        )
    return rows


# ---- layout B ---------------------------------------------------------------

_B_HEADER_RE = re.compile(
    r"Trans\s*Date\s+Narration\s+Value\s*Date\s+Debit\s+Credit\s+Balance", re.IGNORECASE
)
_B_ROW_RE = re.compile(
    r"(\d{2}-[A-Za-z]{3}-\d{4})\s+(.+?)\s+(\d{2}-[A-Za-z]{3}-\d{4})"
    r"\s+(\d+\.\d{2})\s+(\d+\.\d{2})\s+(\d+\.\d{2})"
)
_B_NAMED_REF_RE = re.compile(r"\s+[A-Z][A-Z\s]+[A-Z]\s+Ref:\s*\S+\s*$")
_B_REF_TAIL_RE = re.compile(r"\s+Ref:\s*\S+\s*$")
_B_REF_RE = re.compile(r"Ref:\s*(\d{10})")
_MONTH_NAME_DATE_RE = re.compile(r"(\d{2})-([A-Za-z]{3})-(\d{4})")


def to_numeric_date(text: str) -> str:
    """``15-Nov-2025`` -> ``15-11-2025``; anything else is returned unchanged."""

    m = _MONTH_NAME_DATE_RE.match(text)
    if m is None:
        return text
    month = MONTHS.get(m.group(2).lower())
    if month is None:
        return text
    return f"{m.group(1)}-{month:02d}-{m.group(3)}"


def _side(text: str) -> str:
    value = parse_money(text)
    return text if value is not None and value > 0 else "-"


def _extract_layout_b(text: str) -> list[RawRow]:
    header = _B_HEADER_RE.search(text)
    if header is None:
        return []
    section = collapse_whitespace(text[header.end() :])
    rows: list[RawRow] = []
    for m in _B_ROW_RE.finditer(section):
        trans_date, narration_raw, _value_date, debit, credit, balance = m.groups()
        narration = _B_REF_TAIL_RE.sub("", _B_NAMED_REF_RE.sub("", narration_raw)).strip()
        ref = _B_REF_RE.search(narration_raw)
        rows.append(
            [
                to_numeric_date(trans_date),
                ref.group(1) if ref else "",
                narration,
                _side(credit),
                _side(debit),
                balance,
            ]
        )
    return rows


def extract_rows(text: str) -> list[RawRow]:
    if _LAYOUT_B_MARKER_RE.search(text):
        return _extract_layout_b(text)
    return _extract_layout_a(text)


# ---- rules ------------------------------------------------------------------


COUNTERPARTY_RULES: tuple[CounterpartyRule, ...] = (
    group_rule(
        "onebank",
        r"OneBank Transfer from ([A-Z\s]+) to ([A-Z\s]+)",
        counterparty=2,
        bank_name="Sterling Bank",
    ),
    group_rule(
        "banknip_sender",
        r"BANKNIP From .+? SENDER:\s*([A-Z\s]+?)(?:\s+REMARK:|$)",
        counterparty=1,
    ),
    group_rule(
        "pos_or_bill",
        r"(?:POS Purchase|Bill Payment).+?(?:from|to)\s+([A-Z0-9\s]+)",
        counterparty=1,
    ),
    narration_rule("data_purchase", r"Data purchase for (\d{11})", "Data purchase for {}"),
    narration_rule("ussd_airtime", r"USSDAirtime .+? to Mobile (\d{11})", "Airtime for {}"),
)

_T = TransactionType
TYPE_RULES = (
    type_rule(_T.REVERSAL, "reversal", "refund"),
    type_rule(_T.INTEREST, "interest"),
    type_rule(_T.TRANSFER, "onebank transfer", "banknip", "nip ", "remitastp", "remita"),
    type_rule(_T.AIRTIME, "airtime", "data purchase", "ussdairtime"),
    type_rule(_T.CARD_PAYMENT, "pos purchase", "pos ", "web purchase"),
    type_rule(_T.BILL_PAYMENT, "bill payment"),
    type_rule(_T.BANK_CHARGE, "sms notification charge", "govt levy", "emt ", "charge"),
    type_rule(_T.TRANSFER, "transfer"),
)

SPEC = BankSpec(
    bank=BankType.STERLING,
    display_name="Sterling",
    id_prefix="sterling",
    min_columns=6,
    # money in is the credit side, money out the debit side
    columns=ColumnMap(date=0, session=1, description=2, credit=3, debit=4, balance=5),
    date_format=DateFormat.DD_MM_YYYY_DASH,
    amount_mode=AmountMode.DEBIT_CREDIT,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    reference_length=15,
    reconstruct=extract_rows,
)
