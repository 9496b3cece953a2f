"""PalmPay statements (PDF text or spreadsheet export).

Amounts carry an explicit ``+``/``-`` sign, so no balance tracking is needed.
Two row layouts reach the parser:

- reconstructed from PDF text: ``["<date time> <description>", amount, txid]``;
- spreadsheet export: ``[date time, description, money in, money out, txid]``.

The spreadsheet export wraps long descriptions onto extra physical rows that
hold a single text cell. :func:`merge_continuations` folds them back. "Send
to ..." and "Received from ..." lines are printed *above* the entry they
belong to, so they attach forward to the next dated row; any other
continuation completes the previous row.
"""

from __future__ import annotations

import re

from ..models import BankType, Cell, RawRow, TransactionType
from ..normalize import DateFormat, cell_text, date_cell_text, parse_date, parse_signed_amount
from ..reconstruct import iter_entries
from ..rules import group_rule, type_rule
from .base import AmountMode, BankParser, BankSpec, ColumnMap, RowFields, cell

_DATETIME = r"\d{2}\/\d{2}\/\d{4}\s+\d{2}:\d{2}:\d{2}\s+(?:AM|PM)"
_ANCHOR_RE = re.compile(rf"({_DATETIME})", re.IGNORECASE)
_SIGNED_AMOUNT_RE = re.compile(r"([+-]\d+(?:,\d{3})*\.\d{2})")
_DATETIME_PREFIX_RE = re.compile(rf"^({_DATETIME})\s*(.*)", re.IGNORECASE | re.DOTALL)
_SKIP_MARKERS = ("Transaction Date", "Transaction Detail")

_DATE_ROW_RE = re.compile(r"^\d{2}\/\d{2}\/\d{4}")
_AMOUNT_ONLY_RE = re.compile(r"^[+-]?[\d,.]+$")
_TXID_RE = re.compile(r"^[a-z0-9_]+$", re.IGNORECASE)
_FORWARD_PREFIXES = ("send to ", "received from ")


def extract_rows(text: str) -> list[RawRow]:
    rows: list[RawRow] = []
    for entry in iter_entries(text, _ANCHOR_RE):
        rest = entry.content
        if not rest or any(marker in rest for marker in _SKIP_MARKERS):
            continue
        m = _SIGNED_AMOUNT_RE.search(rest)
        if m is None:
            continue
        description = rest[: m.start()].strip()
        tail = rest[m.end() :].split()
        txid = tail[0] if tail else ""
        rows.append([f"{entry.anchor.group(1).strip()} {description}", m.group(1), txid])
    return rows


# ---- spreadsheet continuation lines ----------------------------------------


def _is_continuation_text(text: str) -> bool:
    trimmed = text.strip()
    if not trimmed:
        return False
    if _AMOUNT_ONLY_RE.match(trimmed) or _TXID_RE.match(trimmed):
        return False
    return not trimmed.isdigit()


def _is_forward(text: str) -> bool:
    return text.strip().lower().startswith(_FORWARD_PREFIXES)


def _description_index(row: RawRow) -> int:
    return 1 if len(row) > 1 else 0


def merge_continuations(rows: list[RawRow]) -> list[RawRow]:
    """Fold wrapped description lines into their logical rows.

    The input rows are left untouched; modified rows are copies.
    """

    result: list[RawRow] = []
    pending: list[str] = []

    for row in rows:
        first = date_cell_text(row[0], DateFormat.MM_DD_YYYY_TIME_AMPM) if row else ""
        starts_with_date = bool(_DATE_ROW_RE.match(first))
        filled: list[Cell] = [c for c in row if c is not None and c != ""]
        single = cell_text(filled[0]) if len(filled) == 1 else ""

        if starts_with_date:
            if pending:
                row = list(row)
                idx = _description_index(row)
                row[idx] = " ".join(p for p in [*pending, cell_text(row[idx])] if p)
                pending = []
            result.append(row)
        elif single and _is_continuation_text(single):
            if _is_forward(single):
                pending.append(single)
            elif result:
                prev = list(result[-1])
                idx = _description_index(prev)
                prev[idx] = f"{cell_text(prev[idx])} {single}".strip()
                result[-1] = prev
        else:
            result.append(row)

    return result


# ---- row parsing ------------------------------------------------------------

COUNTERPARTY_RULES = (
    group_rule("received_from", r"Received from\s+(.+)", counterparty=1),
    group_rule("send_to", r"Send to\s+(.+)", counterparty=1),
)

_T = TransactionType
TYPE_RULES = (
    type_rule(_T.AIRTIME, "airtime", "recharge"),
    type_rule(_T.BILL_PAYMENT, "bill", "electricity", "dstv", "gotv"),
    type_rule(_T.CARD_PAYMENT, "card", "pos"),
    type_rule(_T.ATM_WITHDRAWAL, "atm", "withdrawal"),
    type_rule(_T.BANK_CHARGE, "levy", "charge", "fee", "vat"),
    type_rule(_T.INTEREST, "interest", "cashbox"),
    type_rule(_T.REVERSAL, "reversal", "refund"),
    type_rule(_T.TRANSFER, "send to", "received from", "transfer"),
)

SPEC = BankSpec(
    bank=BankType.PALMPAY,
    display_name="PalmPay",
    id_prefix="palmpay",
    min_columns=3,
    # Reconstructed layout; the spreadsheet layout is handled in PalmPayParser.
    columns=ColumnMap(date=0, description=0, amount=1, reference=2),
    date_format=DateFormat.MM_DD_YYYY_TIME_AMPM,
    amount_mode=AmountMode.SIGNED,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    reconstruct=extract_rows,
    preprocess=merge_continuations,
)


class PalmPayParser(BankParser):
    def __init__(self, spec: BankSpec = SPEC) -> None:
        super().__init__(spec)

    def _extract_fields(self, row: RawRow, row_index: int) -> RowFields | None:
        first = date_cell_text(row[0], self.spec.date_format)
        if len(row) >= 4:
            date = parse_date(first, self.spec.date_format)
            description = cell_text(cell(row, 1))
            money_in = cell_text(cell(row, 2))
            amount_text = money_in or cell_text(cell(row, 3))
            reference = cell_text(cell(row, 4))
        else:
            m = _DATETIME_PREFIX_RE.match(first)
            if m is None:
                return None
            date = parse_date(m.group(1), self.spec.date_format)
            description = m.group(2).strip()
            amount_text = cell_text(cell(row, 1))
            reference = cell_text(cell(row, 2))

        if date is None:
            self._skip(row_index, "no_date", first)
            return None
        amount = parse_signed_amount(amount_text)
        if amount is None:
            self._skip(row_index, "no_amount", first)
            return None

        return RowFields(
            date=date,
            amount=amount,
            description=description,
            reference=reference or None,
        )
