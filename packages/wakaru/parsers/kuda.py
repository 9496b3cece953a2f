"""Kuda statements (spreadsheet export).

The export interleaves spacer columns::

    0 date/time | 2 money in | 4 money out | 6 category | 8 to/from
    | 10 description | 12 balance

``to/from`` reads ``Name/AccountNumber/BankName`` and is the counterparty
source; Kuda prints no narration codes worth pattern-matching.
"""

from __future__ import annotations

import re

from ..models import BankType, RawRow, TransactionType
from ..normalize import DateFormat, cell_text, date_cell_text, parse_amount, parse_date
from ..rules import CounterpartyInfo, type_rule
from .base import AmountMode, BankParser, BankSpec, ColumnMap, RowFields, cell

_REFERENCE_JUNK_RE = re.compile(r"[^A-Za-z0-9-]")

_T = TransactionType
# Evaluated against "<category> <description>".
TYPE_RULES = (
    type_rule(_T.AIRTIME, "airtime", "recharge"),
    type_rule(_T.BILL_PAYMENT, "bill", "electricity", "dstv", "gotv"),
    type_rule(_T.CARD_PAYMENT, "card", "pos"),
    type_rule(_T.ATM_WITHDRAWAL, "atm", "withdrawal"),
    type_rule(_T.BANK_CHARGE, "charge", "fee", "vat"),
    type_rule(_T.INTEREST, "interest"),
    type_rule(_T.REVERSAL, "reversal", "refund"),
    type_rule(_T.TRANSFER, "transfer", "sent", "received"),
)

CATEGORY_COLUMN = 6
TO_FROM_COLUMN = 8

SPEC = BankSpec(
    bank=BankType.KUDA,
    display_name="Kuda",
    id_prefix="kuda",
    min_columns=6,
    columns=ColumnMap(date=0, credit=2, debit=4, description=10, balance=12),
    date_format=DateFormat.DD_MM_YY_TIME,
    amount_mode=AmountMode.EXCLUSIVE_IN_OUT,
    type_rules=TYPE_RULES,
)


def kuda_reference(date_text: str, to_from: str, description: str) -> str:
    parts = [date_text[:8], to_from[:10], description[:10]]
    return _REFERENCE_JUNK_RE.sub("", "-".join(p for p in parts if p)).upper()


def split_to_from(to_from: str) -> CounterpartyInfo:
    """``"Name/Account/Bank"`` -> counterparty fields (any part may be missing)."""

    if not to_from:
        return CounterpartyInfo()
    parts = [p.strip() for p in to_from.split("/")]
    parts += [""] * (3 - len(parts))
    return CounterpartyInfo(name=parts[0] or None, account=parts[1] or None, bank=parts[2] or None)


class KudaParser(BankParser):
    def __init__(self, spec: BankSpec = SPEC) -> None:
        super().__init__(spec)

    def _extract_fields(self, row: RawRow, row_index: int) -> RowFields | None:
        date_cell = cell(row, self.spec.columns.date)
        date_text = date_cell_text(date_cell, self.spec.date_format)
        if not date_text:
            return None
        date = parse_date(date_cell, self.spec.date_format)
        if date is None:
            self._skip(row_index, "no_date", date_cell)
            return None

        amount = self._read_amount(row)
        if amount is None:
            self._skip(row_index, "no_amount", date_cell)
            return None

        category = cell_text(cell(row, CATEGORY_COLUMN))
        to_from = cell_text(cell(row, TO_FROM_COLUMN))
        description = cell_text(cell(row, self.spec.columns.description))

        return RowFields(
            date=date,
            amount=amount,
            description=description or category,
            reference=kuda_reference(date_text, to_from, description),
            balance=parse_amount(cell(row, self.spec.columns.balance)),
            raw_category=category or None,
            narration=" - ".join(p for p in (description, to_from, category) if p),
            type_text=f"{category} {description}",
            counterparty=split_to_from(to_from),
        )
