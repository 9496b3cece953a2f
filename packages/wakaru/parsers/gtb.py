"""GTBank statements (PDF text).

An entry starts at a ``trans date  value date`` pair and runs to the next
pair. After the reference token come the amount, the running balance, the
originating branch and the remarks. Branch codes and phone numbers inside the
remarks can look like money, so only the last two money tokens before the
branch are read, and direction comes from the balance delta.
"""

from __future__ import annotations

import re
from decimal import Decimal

from ..models import BankType, RawRow, TransactionType
from ..normalize import DateFormat
from ..reconstruct import (
    BalanceTracker,
    amount_and_balance,
    find_opening_balance,
    iter_entries,
    money_tokens,
    strip_boilerplate,
)
from ..rules import (
    CounterpartyInfo,
    CounterpartyRule,
    Extractor,
    resolve_bank_code,
    type_rule,
)
from .base import AmountMode, BankSpec, ColumnMap

_OPENING_RE = re.compile(r"Opening Balance\s+([\d,]+\.\d{2})", re.IGNORECASE)
_BOILERPLATE = (
    re.compile(r"This is a computer generated Email\..*?local branch\.\d+\.", re.DOTALL),
    re.compile(
        r"Trans\.\s*Date\s+Value\.?\s*Date\s+Reference\s+Debits\s+Credits\s+Balance"
        r"\s+Originating\s*Branch\s+Remarks",
        re.IGNORECASE,
    ),
)
_ANCHOR_RE = re.compile(r"(\d{2}-[A-Za-z]{3}-\d{4})\s+(\d{2}-[A-Za-z]{3}-\d{4})")
_REFERENCE_RE = re.compile(r"^'?([^\s]*(?:\s+\d{2}[A-Z]{3})?)\s+")

# Words that open the remarks column after a branch name.
DESCRIPTION_STARTERS = (
    "NIBSS",
    "NIP",
    "NEFT",
    "POSWEB",
    "POS/WEB",
    "Airtime",
    "Electronic",
    "TRANSFER",
    "COMMISSION",
    "VALUE ADDED TAX",
    "SMS ALERT",
    "INTEREST",
    "CASH WITHDRAWAL",
)
_E_CHANNELS_RE = re.compile(r"^(E-\s*CHANNELS)\s+(.+)", re.DOTALL | re.IGNORECASE)
_BRANCH_CODE_RE = re.compile(r"^(\d{3})\s+")
_STARTER_RE = re.compile(
    "(" + "|".join(re.escape(s) for s in DESCRIPTION_STARTERS) + r"|\d{12,})", re.IGNORECASE
)
_BRANCH_FALLBACK_RE = re.compile(r"^([A-Z][A-Z0-9\s-]+?)(?=\s+[a-z]|\s+\d{6,})")

BANK_NAMES: dict[str, str] = {
    "OPAY": "OPay",
    "MONIEMFB": "Moniepoint",
    "MONIEPOINT": "Moniepoint",
    "PALMPAY": "PalmPay",
    "WEMA": "Wema Bank",
    "UBA": "UBA",
    "GTB": "GTB",
    "ACCESS": "Access Bank",
    "ZENITH": "Zenith Bank",
    "KUDA": "Kuda",
    "FIRSTBANK": "First Bank",
    "PIGGYVEST": "PiggyVest",
}


def split_branch_and_remarks(text: str) -> tuple[str, str]:
    """Split the text after the balance into ``(branch, remarks)``."""

    m = _E_CHANNELS_RE.match(text)
    if m:
        return "E-CHANNELS", m.group(2).strip()

    m = _BRANCH_CODE_RE.match(text)
    if m is None:
        return "", text
    after_code = text[m.end() :]

    starter = _STARTER_RE.search(after_code)
    if starter and starter.start() > 0:
        return after_code[: starter.start()].strip(), after_code[starter.start() :].strip()

    fallback = _BRANCH_FALLBACK_RE.match(after_code)
    if fallback:
        return fallback.group(1).strip(), after_code[fallback.end() :].strip()
    return "", after_code


def extract_rows(text: str) -> list[RawRow]:
    tracker = BalanceTracker.seeded(find_opening_balance(text, _OPENING_RE) or Decimal(0))
    cleaned = strip_boilerplate(text, _BOILERPLATE)

    rows: list[RawRow] = []
    for entry in iter_entries(cleaned, _ANCHOR_RE):
        ref = _REFERENCE_RE.match(entry.content)
        if ref is None:
            continue
        remaining = entry.content[ref.end() :]
        pair = amount_and_balance(money_tokens(remaining))
        if pair is None:
            continue
        amount, balance = pair
        is_credit, tracker = tracker.classify(amount.value, balance.value)
        _, remarks = split_branch_and_remarks(remaining[balance.end :].strip())
        rows.append(
            [
                entry.anchor.group(1),
                entry.anchor.group(2),
                ref.group(1) or "",
                "" if is_credit else amount.text,
                amount.text if is_credit else "",
                balance.text,
                remarks,
            ]
        )
    return rows


# ---- counterparty -----------------------------------------------------------

_NAME_TAIL_RE = re.compile(r"\s*\d{6,}.*$")
_TRAILING_SLASH_RE = re.compile(r"/+$")


def clean_counterparty_name(name: str | None) -> str | None:
    """Drop trailing long digit runs (account/phone numbers) and slashes."""

    if not name:
        return None
    name = _NAME_TAIL_RE.sub("", name)
    name = _TRAILING_SLASH_RE.sub("", name)
    return " ".join(name.split()) or None


def _bank_and_name(bank: int, name: int) -> Extractor:
    def extract(m: re.Match[str]) -> CounterpartyInfo:
        return CounterpartyInfo(
            name=clean_counterparty_name(m.group(name)),
            bank=resolve_bank_code(m.group(bank), BANK_NAMES),
        )

    return extract


def _name_only(m: re.Match[str]) -> CounterpartyInfo:
    return CounterpartyInfo(name=clean_counterparty_name(m.group(1)))


def _rule(name: str, pattern: str, extract: Extractor) -> CounterpartyRule:
    return CounterpartyRule(name, re.compile(pattern, re.IGNORECASE), extract)


COUNTERPARTY_RULES: tuple[CounterpartyRule, ...] = (
    _rule("nip_transfer_to", r"NIP TRANSFER TO\s+(\w+)\s+-\s+(.+?)(?:\s*$)", _bank_and_name(1, 2)),
    _rule(
        "to_from_bank",
        r"(?:TO|FROM)\s+(OPAY|MONIEMFB|PALMPAY|WEMA|UBA|GTB|ACCESS|ZENITH|KUDA"
        r"|FIRSTBANK|MONIEPOINT)\s+-\s+(.+?)(?:\s*$)",
        _bank_and_name(1, 2),
    ),
    _rule(
        "trf_to_piped",
        r"Trf to\s+\d+\|(\d+)\/\d+\|(\w+)\|([A-Z\s]+)\s+REF:",
        _bank_and_name(2, 3),
    ),
    _rule(
        "transfer_from",
        r"TRANSFER FROM\s+([A-Z][A-Z\s]+?)[-–]([A-Z]+)[-–]",
        _bank_and_name(2, 1),
    ),
    _rule("neft", r"NEFT TRANSFER.+?\/([^/]+?)\/Being", _name_only),
    _rule(
        "airtime",
        r"Airtime.+?-(\d{11,13})",
        lambda m: CounterpartyInfo(narration=f"Airtime for {m.group(1)}"),
    ),
    _rule("pos_web", r"(?:POS|WEB)[^-]*-\d+-[^-]+-([A-Z][A-Z\s]+)", _name_only),
)

_T = TransactionType
TYPE_RULES = (
    type_rule(_T.TRANSFER, "nibss instant payment", "nip transfer"),
    type_rule(_T.TRANSFER, "transfer between customers", "transfer from"),
    type_rule(_T.TRANSFER, "neft transfer"),
    type_rule(_T.AIRTIME, "airtime"),
    type_rule(_T.BANK_CHARGE, "electronic money transfer levy", "emt levy"),
    type_rule(
        _T.BANK_CHARGE,
        "stamp duty",
        "sms alert",
        "commission",
        "value added tax",
        "maintenance fee",
    ),
    type_rule(_T.CARD_PAYMENT, "posweb purchase", "pos/web purchase", "pos pur", "web pur"),
    type_rule(_T.ATM_WITHDRAWAL, "atm", "cash withdrawal"),
    type_rule(_T.REVERSAL, "reversal", "refund"),
    type_rule(_T.INTEREST, "interest"),
)

SPEC = BankSpec(
    bank=BankType.GTB,
    display_name="GTB",
    id_prefix="gtb",
    min_columns=7,
    columns=ColumnMap(date=0, session=1, debit=3, credit=4, balance=5, description=6),
    date_format=DateFormat.DD_MMM_YYYY,
    amount_mode=AmountMode.DEBIT_CREDIT,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    reference_length=15,
    reconstruct=extract_rows,
)
