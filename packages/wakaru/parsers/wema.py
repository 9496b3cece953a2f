"""Wema Bank / ALAT statements (PDF text).

Entries start at a ``dd-Mmm-yyyy`` date (the year sometimes wraps onto the
next line, hence the loose pattern), followed by a reference token such as
``M1234567`` or ``S89012``. The entry ends with ``amount balance``; direction
comes from the running balance. Rows are
``[date, reference, description, amount, "credit" | "debit"]``.
"""

from __future__ import annotations

import re

from ..models import BankType, RawRow, TransactionType
from ..normalize import DateFormat, parse_money
from ..reconstruct import STRICT_MONEY, BalanceTracker, find_opening_balance, iter_entries
from ..rules import group_rule, type_rule
from .base import AmountMode, BankSpec, ColumnMap

_OPENING_RE = re.compile(r"Opening Balance\s*₦?([\d,]+\.?\d*)", re.IGNORECASE)
_ANCHOR_RE = re.compile(r"(\d{2}-[A-Za-z]{3}-?\s*\d{4})")
_REFERENCE_RE = re.compile(r"^([A-Z]\d+|M\d+)\s+", re.IGNORECASE)
_TAIL_RE = re.compile(rf"({STRICT_MONEY})\s+({STRICT_MONEY})\s*$")
_SKIP_MARKERS = ("R e f e r e n c e", "Transaction Details")


def extract_rows(text: str) -> list[RawRow]:
    tracker = BalanceTracker.seeded(find_opening_balance(text, _OPENING_RE))
    rows: list[RawRow] = []
    for entry in iter_entries(text, _ANCHOR_RE):
        date = "".join(entry.anchor.group(1).split())
        rest = entry.content
        if not rest or any(marker in rest for marker in _SKIP_MARKERS):
            continue
        ref = _REFERENCE_RE.match(rest)
        if ref is None:
            continue
        after_ref = rest[ref.end() :]
        tail = _TAIL_RE.search(after_ref)
        if tail is None:
            continue
        amount = parse_money(tail.group(1))
        balance = parse_money(tail.group(2))
        if amount is None or balance is None:
            continue
        is_credit, tracker = tracker.classify(amount, balance)
        rows.append(
            [
                date,
                ref.group(1),
                after_ref[: tail.start()].strip(),
                tail.group(1),
                "credit" if is_credit else "debit",
            ]
        )
    return rows


COUNTERPARTY_RULES = (
    group_rule("nip", r"NIP:([^-]+)-(.+)", counterparty=1),
    group_rule("transfer_to", r"TRANSFER TO\s+(.+?)(?:\s+FROM|\s*$)", counterparty=1),
)

_T = TransactionType
TYPE_RULES = (
    type_rule(_T.BANK_CHARGE, "vat ", "comm ", "sms alert"),
    type_rule(_T.BANK_CHARGE, "levy"),
    type_rule(_T.CARD_PAYMENT, "pos buy", "web buy"),
    type_rule(_T.TRANSFER, "nip:", "nip transfer", "alat nip"),
    type_rule(_T.AIRTIME, "airtime", "recharge"),
    type_rule(_T.REVERSAL, "reversal", "refund"),
)

SPEC = BankSpec(
    bank=BankType.WEMA,
    display_name="Wema",
    id_prefix="wema",
    min_columns=4,
    columns=ColumnMap(date=0, reference=1, description=2, amount=3, flag=4),
    date_format=DateFormat.DD_MMM_YYYY_LOOSE,
    amount_mode=AmountMode.FLAGGED,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    reconstruct=extract_rows,
)
