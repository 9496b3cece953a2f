"""Access Bank statements (PDF text).

Rows: ``[posted date, value date, description, debit, credit, balance]``.
Debit and credit columns print ``-`` for "no value", so direction is explicit
and no balance tracking is needed.
"""

from __future__ import annotations

import re

from ..models import BankType, RawRow, TransactionType
from ..normalize import DateFormat
from ..reconstruct import STRICT_MONEY
from ..rules import (
    CounterpartyInfo,
    CounterpartyRule,
    group_rule,
    resolve_bank_code,
    type_rule,
)
from .base import AmountMode, BankSpec, ColumnMap

_DATE = r"\d{2}-[A-Z]{3}-\d{2}"
_AMOUNT_OR_DASH = rf"(?:{STRICT_MONEY}|-)"
_ROW_RE = re.compile(
    rf"({_DATE})\s+({_DATE})\s+(.+?)\s+"
    rf"({_AMOUNT_OR_DASH})\s+({_AMOUNT_OR_DASH})\s+({STRICT_MONEY})",
    re.IGNORECASE,
)
_HEADER_TOKENS = ("Posted Date", "Value Date", "Description")

# Bank codes printed in "MOBILE TRF TO XXX/ ..." narrations.
BANK_CODES: dict[str, str] = {
    "GTB": "GTB",
    "PAY": "OPay",
    "FBN": "First Bank",
    "MMF": "Moniepoint",
    "WBP": "Wema Bank",
    "SPB": "Sterling Bank",
    "STL": "Sterling Bank",
    "PPL": "PalmPay",
    "FMO": "FCMB",
    "KMF": "Kuda",
    "ACCESS": "Access Bank",
}


def extract_rows(text: str) -> list[RawRow]:
    rows: list[RawRow] = []
    for m in _ROW_RE.finditer(text):
        posted, value, description, debit, credit, balance = m.groups()
        if any(token in description for token in _HEADER_TOKENS):
            continue
        if description == "Opening Balance":
            continue
        rows.append([posted, value, description.strip(), debit, credit, balance])
    return rows


def _mobile_transfer(m: re.Match[str]) -> CounterpartyInfo:
    parts = m.group(2).split("/")
    name = parts[-1].strip() or parts[0].strip()
    return CounterpartyInfo(name=name, bank=resolve_bank_code(m.group(1), BANK_CODES))


COUNTERPARTY_RULES: tuple[CounterpartyRule, ...] = (
    CounterpartyRule(
        "mobile_transfer",
        re.compile(r"MOBILE TRF (?:TO|FROM) ([A-Z]{3})\/ (.+)", re.IGNORECASE),
        _mobile_transfer,
    ),
    group_rule("nip_transfer", r"NIP (?:TFR FROM|Transfer to) ([^.]+)", counterparty=1),
    group_rule("trf_from", r"TRF\/\/FRM (.+?) TO (.+)", counterparty=2),
)

_T = TransactionType
TYPE_RULES = (
    type_rule(
        _T.TRANSFER, "mobile trf to", "mobile trf from", "nip tfr", "nip transfer", "trf//frm"
    ),
    type_rule(_T.CARD_PAYMENT, "web pymt"),
    type_rule(_T.CARD_PAYMENT, "pos pymt"),
    type_rule(_T.ATM_WITHDRAWAL, "atm cash wdl"),
    # Access books airtime top-ups under bill payments.
    type_rule(_T.BILL_PAYMENT, "bills pymt", "airtime"),
    type_rule(_T.BANK_CHARGE, "commission", "vat ", "sms alert fee", "levy"),
    type_rule(_T.REVERSAL, "reversal", "refund"),
)

SPEC = BankSpec(
    bank=BankType.ACCESS,
    display_name="Access",
    id_prefix="access",
    min_columns=6,
    columns=ColumnMap(date=0, session=1, description=2, debit=3, credit=4, balance=5),
    date_format=DateFormat.DD_MMM_YY,
    amount_mode=AmountMode.DEBIT_CREDIT,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    reference_length=15,
    reconstruct=extract_rows,
)
