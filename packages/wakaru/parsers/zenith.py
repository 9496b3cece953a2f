"""Zenith Bank statements (PDF text).

Each entry is one line: ``date, description, debit, credit, value date,
balance``. Debit and credit are both printed (one of them ``0.00``), so the
direction is explicit.
"""

from __future__ import annotations

import re

from ..models import BankType, RawRow, TransactionType
from ..normalize import DateFormat
from ..reconstruct import STRICT_MONEY, strip_boilerplate
from ..rules import KeywordMatch, group_rule, narration_rule, type_rule
from .base import AmountMode, BankSpec, ColumnMap

_PERIOD_RE = re.compile(
    r"Period:\s*\d{2}\/\d{2}\/\d{4}\s+TO\s+\d{2}\/\d{2}\/\d{4}", re.IGNORECASE
)
_DATE = r"\d{2}\/\d{2}\/\d{4}"
_ROW_RE = re.compile(
    rf"({_DATE})\s+(.+?)\s+({STRICT_MONEY})\s+({STRICT_MONEY})\s+({_DATE})\s+({STRICT_MONEY})"
)
_HEADER_TOKENS = ("CURRENCY", "ACCOUNT No", "VALUE DATE")


def extract_rows(text: str) -> list[RawRow]:
    cleaned = strip_boilerplate(text, (_PERIOD_RE,), replacement="")
    rows: list[RawRow] = []
    for m in _ROW_RE.finditer(cleaned):
        date, description, debit, credit, value_date, balance = m.groups()
        if any(token in description for token in _HEADER_TOKENS):
            continue
        rows.append([date, description.strip(), debit, credit, value_date, balance])
    return rows


COUNTERPARTY_RULES = (
    group_rule(
        "nip_mobile_credit",
        r"NIP\s+CR\/MOB\/([^/]+)\/([^/]+)\s*\/?\s*(.*)",
        counterparty=1,
        bank=2,
        narration=3,
    ),
    group_rule("nip", r"NIP\/([^/]+)\/([^/]+)\/?(.*)$", bank=1, counterparty=2, narration=3),
    group_rule("paystack", r"NIP\/\/Paystack\/([^/]+)\/(.*)$", counterparty=1, narration=2),
    group_rule("etz_inflow", r":ETZ INFLOW\s+([^:]+):(.+)", narration=2),
    group_rule("cip_transfer", r"CIP\/CR\/\/Transfer from\s+(.+)", counterparty=1),
    narration_rule("airtime", r"Airtime\/\/(\d+)\/\/(.+)", "Airtime for {}", counterparty=2),
)

_T = TransactionType
_PREFIX = KeywordMatch.STARTSWITH
TYPE_RULES = (
    type_rule(_T.TRANSFER, "nip cr/mob", "nip/", match=_PREFIX),
    type_rule(_T.TRANSFER, "etz inflow"),
    type_rule(_T.TRANSFER, "cip/", match=_PREFIX),
    type_rule(_T.TRANSFER, "trf to", "trf from", match=_PREFIX),
    type_rule(_T.CARD_PAYMENT, "pos prch", "pos pyt"),
    type_rule(_T.ATM_WITHDRAWAL, "atm wdl", "agency cashout"),
    type_rule(_T.AIRTIME, "airtime", match=_PREFIX),
    type_rule(
        _T.BANK_CHARGE,
        "nip charge",
        "+ vat",
        "sms charge",
        "maintenance fee",
        "fgn electronic money transfer levy",
    ),
    type_rule(_T.REVERSAL, "rvsl", match=_PREFIX),
)

SPEC = BankSpec(
    bank=BankType.ZENITH,
    display_name="Zenith",
    id_prefix="zenith",
    min_columns=4,
    columns=ColumnMap(date=0, description=1, debit=2, credit=3, balance=5),
    date_format=DateFormat.DD_MM_YYYY_SLASH,
    amount_mode=AmountMode.DEBIT_CREDIT,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    reference_length=15,
    reconstruct=extract_rows,
)
