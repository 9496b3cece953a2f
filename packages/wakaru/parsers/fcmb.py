"""FCMB statements (PDF text).

Each entry is ``txn date, value date, narration, amount, balance`` on one
line. The amount column carries no sign, so direction comes from the balance
delta against the previous entry (seeded from ``OPENING BALANCE``).
"""

from __future__ import annotations

import re
from decimal import Decimal

from ..models import BankType, RawRow, TransactionType
from ..normalize import DateFormat, parse_money
from ..reconstruct import STRICT_MONEY, BalanceTracker, find_opening_balance
from ..rules import CounterpartyInfo, CounterpartyRule, group_rule, type_rule
from .base import AmountMode, BankSpec, ColumnMap

_DATE = r"\d{2}-[A-Za-z]{3}-\d{4}"
_ROW_RE = re.compile(rf"({_DATE})\s+({_DATE})\s+(.+?)\s+({STRICT_MONEY})\s+({STRICT_MONEY})")
_OPENING_RE = re.compile(r"OPENING BALANCE\s+([\d,]+\.\d{2})", re.IGNORECASE)

# Order matters: the first keyword found in the narration is the bank.
APP_BANK_KEYWORDS = ("Opay", "Palmpay", "Kuda", "MONIEPOINT", "GTB", "Wema", "VFD", "POCKETAPP")


def extract_rows(text: str) -> list[RawRow]:
    tracker = BalanceTracker.seeded(find_opening_balance(text, _OPENING_RE) or Decimal(0))
    rows: list[RawRow] = []
    for m in _ROW_RE.finditer(text):
        txn_date, value_date, description, amount_text, balance_text = m.groups()
        if "opening balance" in description.lower():
            continue
        amount = parse_money(amount_text)
        balance = parse_money(balance_text)
        if amount is None or balance is None:
            continue
        is_credit, tracker = tracker.classify(amount, balance)
        rows.append(
            [
                txn_date,
                value_date,
                description.strip(),
                "" if is_credit else amount_text,
                amount_text if is_credit else "",
                balance_text,
            ]
        )
    return rows


def _app_transfer(m: re.Match[str]) -> CounterpartyInfo:
    target = m.group(1)
    words = target.split()
    fallback = " ".join(words[-2:])
    lowered = target.lower()
    for keyword in APP_BANK_KEYWORDS:
        pos = lowered.find(keyword.lower())
        if pos >= 0:
            name = target[pos + len(keyword) :].strip()
            return CounterpartyInfo(name=name or fallback, bank=keyword)
    return CounterpartyInfo(name=fallback)


COUNTERPARTY_RULES: tuple[CounterpartyRule, ...] = (
    CounterpartyRule(
        "app_transfer",
        re.compile(r"App(?:\s*:?\s*\w*)?\s+To\s+([^\d]+)", re.IGNORECASE),
        _app_transfer,
    ),
    group_rule("nip_from", r"NIP FRM\s+([^-]+)", counterparty=1),
    group_rule(
        "trf_from", r"TRF From\s+(?:App:\s*)?To\s+(\w+)\s+([^/]+)", bank=1, counterparty=2
    ),
    group_rule("trf_to", r"TRF to\s+(?:App:\s*)?To\s+(\w+)\s+([^/]+)", bank=1, counterparty=2),
    group_rule("cop_from", r"COP FRM\s+(.+)", counterparty=1),
)

_T = TransactionType
TYPE_RULES = (
    type_rule(_T.TRANSFER, "app to", "app:", "nip frm", "trf from", "trf to", "cop frm"),
    type_rule(_T.CARD_PAYMENT, "pos purchase", "pos pymnt", "/t "),
    type_rule(_T.AIRTIME, "airtime"),
    type_rule(_T.BANK_CHARGE, "emt levy", "sms alert", "transaction charge"),
    type_rule(_T.REVERSAL, "reversal", "refund"),
)

SPEC = BankSpec(
    bank=BankType.FCMB,
    display_name="FCMB",
    id_prefix="fcmb",
    min_columns=6,
    columns=ColumnMap(date=0, session=1, description=2, debit=3, credit=4, balance=5),
    date_format=DateFormat.DD_MMM_YYYY,
    amount_mode=AmountMode.DEBIT_CREDIT,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    reference_length=15,
    reconstruct=extract_rows,
)
