"""UBA statements (PDF text).

UBA statement PDFs repeat a page banner, a footer and a marketing strip on
every page; those are removed before entries are split at
``trans date  value date`` pairs. Amounts use grouped thousands only, which
keeps long reference numbers out of the amount/balance pair.
"""

from __future__ import annotations

import re
from decimal import Decimal

from ..models import BankType, RawRow, TransactionType
from ..normalize import DateFormat
from ..reconstruct import (
    BalanceTracker,
    amount_and_balance,
    collapse_whitespace,
    find_opening_balance,
    iter_entries,
    money_tokens,
    strip_boilerplate,
)
from ..rules import KeywordMatch, group_rule, narration_rule, type_rule
from .base import AmountMode, BankSpec, ColumnMap

_BOILERPLATE = (
    re.compile(
        r"Bank Statement [A-Z\s]+ \d+[A-Za-z\s,]+Address Line2 [A-Za-z]+ \d{2}, \d{4}"
        r" to [A-Za-z]+ \d{2}, \d{4}"
    ),
    re.compile(r"Download App \| Chat with Leo \| Our Website"),
    re.compile(r"Head Office: 57 Marina.*?cfc@ubagroup\.com \| Privacy Policy"),
    re.compile(r"Africa's global bank"),
    re.compile(r"\d{2}-[A-Za-z]{3}-\d{4} to \d{2}-[A-Za-z]{3}-\d{4} Bank Statement \d+"),
    re.compile(r"TRANS DATE VALUE DATE NARRATION CHQ\.? NO DEBIT CREDIT BALANCE", re.IGNORECASE),
)
_OPENING_RE = re.compile(r"Opening Balance[:\s]*([\d,]+\.\d{2})", re.IGNORECASE)
_ANCHOR_RE = re.compile(r"(\d{2}-[A-Za-z]{3}-\d{4})\s+(\d{2}-[A-Za-z]{3}-\d{4})")
_TRAILING_REFERENCE_RE = re.compile(r"\s+\d{12,}\s*$")


def extract_rows(text: str) -> list[RawRow]:
    cleaned = collapse_whitespace(strip_boilerplate(text, _BOILERPLATE))
    tracker = BalanceTracker.seeded(find_opening_balance(cleaned, _OPENING_RE) or Decimal(0))

    rows: list[RawRow] = []
    for entry in iter_entries(cleaned, _ANCHOR_RE):
        content = entry.content
        if content.lower().startswith("opening balance"):
            continue
        pair = amount_and_balance(money_tokens(content, strict=True))
        if pair is None:
            continue
        amount, balance = pair
        is_credit, tracker = tracker.classify(amount.value, balance.value)
        narration = _TRAILING_REFERENCE_RE.sub("", content[: amount.start].strip()).strip()
        rows.append(
            [
                entry.anchor.group(1),
                entry.anchor.group(2),
                narration,
                "" if is_credit else amount.text,
                amount.text if is_credit else "",
                balance.text,
            ]
        )
    return rows


# Narration codes are matched case-sensitively, except "Transfer from".
COUNTERPARTY_RULES = (
    group_rule(
        "mob_uto", r"MOB\/UTO\/([^/]+)\/([^/]+)\/\d+", flags=0, counterparty=1, narration=2
    ),
    group_rule("mob_satu", r"MOB\/SATU\/(\d+)\/(.+)", flags=0, account=1),
    group_rule("tnf", r"TNF-([^/]+)\/(.+)", flags=0, counterparty=1, narration=2),
    group_rule("transfer_from", r"\.\/Transfer from ([^\d]+)", counterparty=1),
    group_rule(
        "pos_purchase", r"POS Pur @ ([^\s]+)\s+(.+?)(?:\s+\d{6,}|$)", flags=0, counterparty=2
    ),
    group_rule(
        "pos_transfer", r"POS Trf @ ([^\s]+)\s+(.+?)(?:\s+\d{6,}|$)", flags=0, counterparty=2
    ),
    group_rule("atm", r"ATM WD @ ([^\s]+)-(.+)", flags=0, counterparty=2),
    narration_rule("topup", r"(?:USSD|MOB) TOPUP (\d+)", "Airtime for {}", flags=0),
)

_T = TransactionType
TYPE_RULES = (
    type_rule(_T.TRANSFER, "mob/uto", "mob/satu", "tnf-", "transfer from"),
    type_rule(_T.CARD_PAYMENT, "pos pur", "pos trf"),
    type_rule(_T.ATM_WITHDRAWAL, "atm wd"),
    type_rule(_T.AIRTIME, "ussd topup", "mob topup"),
    type_rule(_T.BANK_CHARGE, "stamp duty", "sms", "card maint", "glo charge", "wtax", "charge"),
    type_rule(_T.INTEREST, "int. pd", "interest"),
    type_rule(_T.REVERSAL, "rev/", match=KeywordMatch.STARTSWITH),
    type_rule(_T.REVERSAL, "reversal"),
    type_rule(_T.BILL_PAYMENT, "pstkdirectdebit", "directdebit"),
)

SPEC = BankSpec(
    bank=BankType.UBA,
    display_name="UBA",
    id_prefix="uba",
    min_columns=6,
    columns=ColumnMap(date=0, session=1, description=2, debit=3, credit=4, balance=5),
    date_format=DateFormat.DD_MMM_YYYY,
    amount_mode=AmountMode.DEBIT_CREDIT,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    reference_length=15,
    reconstruct=extract_rows,
)
