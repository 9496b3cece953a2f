"""Standard Chartered statements (PDF text).

Entries start at a ``01 Jan 2025`` date and end at the next one. Deposit and
withdrawal share one printed column, so direction comes from the running
balance, seeded by the ``BALANCE FROM PREVIOUS STATEMENT`` line. Without that
line the first entry is read as a debit. Reconstructed rows are
``[date, description, amount, balance, "credit" | "debit"]``.
"""

from __future__ import annotations

import re

from ..models import BankType, RawRow, TransactionType
from ..normalize import DateFormat, parse_money
from ..reconstruct import (
    BalanceTracker,
    amount_and_balance,
    iter_entries,
    money_tokens,
    strip_boilerplate,
)
from ..rules import group_rule, type_rule
from .base import AmountMode, BankSpec, ColumnMap

_BOILERPLATE = (
    re.compile(r"Page of\d+ \d+"),
    re.compile(r"Date Description Deposit Withdrawal Balance"),
)
_ANCHOR_RE = re.compile(r"(\d{2} [A-Z][a-z]{2} \d{4})")
_TRAILING_BALANCE_RE = re.compile(r"([\d,]+\.\d{2})\s*$")
_MIN_CONTENT = 10


def extract_rows(text: str) -> list[RawRow]:
    cleaned = strip_boilerplate(text, _BOILERPLATE, replacement="")
    tracker = BalanceTracker()
    rows: list[RawRow] = []
    for entry in iter_entries(cleaned, _ANCHOR_RE):
        content = entry.content
        if "BALANCE FROM PREVIOUS STATEMENT" in content:
            m = _TRAILING_BALANCE_RE.search(content)
            if m:
                tracker = BalanceTracker.seeded(parse_money(m.group(1)))
            continue
        if "CLOSING BALANCE" in content or len(content) < _MIN_CONTENT:
            continue

        pair = amount_and_balance(money_tokens(content))
        if pair is None:
            continue
        amount, balance = pair
        is_credit, tracker = tracker.classify(amount.value, balance.value)
        rows.append(
            [
                entry.anchor.group(1),
                content[: amount.start].strip(),
                amount.text,
                balance.text,
                "credit" if is_credit else "debit",
            ]
        )
    return rows


COUNTERPARTY_RULES = (
    group_rule(
        "leading_name",
        r"^([A-Z][A-Z\s,\-\.]+?)(?:\s+(?:V\.\d+|\d{5,}|IL\d+|NG-|NIP|IBK|POS|CASH|100\d{3}))",
        counterparty=1,
    ),
    group_rule(
        "pos_merchant",
        r"(?:POS|CASH ADV)[^A-Z]*T?\s*([A-Z][A-Z\s]+?)(?:\s+\d)",
        counterparty=1,
    ),
    group_rule("ibanking", r"^IBKG\s+([A-Z]+\s+[A-Z]+)", counterparty=1),
)

_T = TransactionType
TYPE_RULES = (
    type_rule(_T.TRANSFER, "nip", "transfer"),
    type_rule(_T.CARD_PAYMENT, "pos", "cash adv"),
    type_rule(_T.AIRTIME, "airtime", "top-up", "mtn", "airtel"),
    type_rule(_T.BANK_CHARGE, "stampdutycharg", "levy"),
    type_rule(_T.CARD_PAYMENT, "debit card txn", "remita"),
    type_rule(_T.INTEREST, "cash back", "reward"),
    type_rule(_T.TRANSFER, "ibk", "ibanking"),
)

SPEC = BankSpec(
    bank=BankType.STANDARD_CHARTERED,
    display_name="Standard Chartered",
    id_prefix="sc",
    min_columns=5,
    columns=ColumnMap(date=0, description=1, amount=2, balance=3, flag=4),
    date_format=DateFormat.DD_MON_YYYY,
    amount_mode=AmountMode.FLAGGED,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    reference_length=15,
    reconstruct=extract_rows,
)
