"""Ordered rule cascades for counterparty extraction and type inference.

Narrations are bank-specific free text, so each bank declares two ordered
lists:

- ``CounterpartyRule`` entries, tried in declaration order against the raw
  narration. The first rule whose pattern matches wins, even when a later rule
  would also match a substring. No match yields an empty
  :class:`CounterpartyInfo`.
- ``TypeRule`` entries, tried in declaration order against the lower-cased
  narration. The first rule with a matching keyword decides the
  :class:`~wakaru.models.TransactionType`; otherwise the type is ``OTHER``.

Order is behaviour: "NIP Charge" contains both a transfer token and a charge
token, and which one wins depends only on where the rules sit in the list.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum

from .models import TransactionType

_WS_RE = re.compile(r"\s+")

# ---------------------------------------------------------------------------
# Counterparty extraction
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CounterpartyInfo:
    """Fields recovered from a narration. ``narration`` overrides the default."""

    name: str | None = None
    account: str | None = None
    bank: str | None = None
    narration: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.account or self.bank or self.narration)


type Extractor = Callable[[re.Match[str]], CounterpartyInfo]


@dataclass(frozen=True, slots=True)
class CounterpartyRule:
    name: str
    pattern: re.Pattern[str]
    extract: Extractor


def apply_counterparty_rules(rules: Sequence[CounterpartyRule], text: str) -> CounterpartyInfo:
    """Return the extraction of the first matching rule, or an empty result."""

    if not text:
        return CounterpartyInfo()
    for rule in rules:
        match = rule.pattern.search(text)
        if match is not None:
            return _normalized(rule.extract(match))
    return CounterpartyInfo()


def _normalized(info: CounterpartyInfo) -> CounterpartyInfo:
    return replace(
        info,
        name=clean_text(info.name),
        account=clean_text(info.account),
        bank=clean_text(info.bank),
        narration=clean_text(info.narration),
    )


def clean_text(value: str | None) -> str | None:
    """Collapse internal whitespace and strip; blank becomes ``None``."""

    if value is None:
        return None
    collapsed = _WS_RE.sub(" ", value).strip()
    return collapsed or None


def group_rule(
    name: str,
    pattern: str,
    *,
    flags: int = re.IGNORECASE,
    counterparty: int | None = None,
    account: int | None = None,
    bank: int | None = None,
    narration: int | None = None,
    bank_name: str | None = None,
) -> CounterpartyRule:
    """Build a rule that maps numbered capture groups onto fields.

    ``bank_name`` sets a constant bank when the narration format implies one.
    """

    def extract(m: re.Match[str]) -> CounterpartyInfo:
        def g(idx: int | None) -> str | None:
            return m.group(idx) if idx is not None else None

        return CounterpartyInfo(
            name=g(counterparty),
            account=g(account),
            bank=g(bank) if bank is not None else bank_name,
            narration=g(narration),
        )

    return CounterpartyRule(name, re.compile(pattern, flags), extract)


def narration_rule(
    name: str,
    pattern: str,
    template: str,
    *,
    flags: int = re.IGNORECASE,
    counterparty: int | None = None,
) -> CounterpartyRule:
    """Build a rule that rewrites the narration as ``template.format(group 1)``."""

    def extract(m: re.Match[str]) -> CounterpartyInfo:
        return CounterpartyInfo(
            name=m.group(counterparty) if counterparty is not None else None,
            narration=template.format(m.group(1)),
        )

    return CounterpartyRule(name, re.compile(pattern, flags), extract)


def resolve_bank_code(code: str, table: Mapping[str, str]) -> str:
    """Map a narration bank code to a display name (unknown codes pass through)."""

    return table.get(code.strip().upper(), code.strip())


# ---------------------------------------------------------------------------
# Type inference
# ---------------------------------------------------------------------------


class KeywordMatch(StrEnum):
    CONTAINS = "contains"
    STARTSWITH = "startswith"


@dataclass(frozen=True, slots=True)
class TypeRule:
    type: TransactionType
    keywords: tuple[str, ...]
    match: KeywordMatch = KeywordMatch.CONTAINS

    def matches(self, lowered: str) -> bool:
        if self.match is KeywordMatch.STARTSWITH:
            return lowered.startswith(self.keywords)
        return any(k in lowered for k in self.keywords)


def type_rule(
    type_: TransactionType, *keywords: str, match: KeywordMatch = KeywordMatch.CONTAINS
) -> TypeRule:
    return TypeRule(type_, tuple(k.lower() for k in keywords), match)


def infer_transaction_type(rules: Iterable[TypeRule], text: str) -> TransactionType:
    lowered = (text or "").lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.type
    return TransactionType.OTHER


_T = TransactionType

# Fallback cascade for banks that do not declare their own list.
BASE_TYPE_RULES: tuple[TypeRule, ...] = (
    type_rule(_T.REVERSAL, "reversal", "refund"),
    type_rule(_T.INTEREST, "interest"),
    type_rule(_T.TRANSFER, "transfer", "nip", "trf"),
    type_rule(_T.AIRTIME, "airtime", "recharge"),
    type_rule(_T.BANK_CHARGE, "levy", "charge", "fee", "vat "),
    type_rule(_T.CARD_PAYMENT, "pos", "card"),
    type_rule(_T.ATM_WITHDRAWAL, "atm", "withdrawal"),
    type_rule(_T.BILL_PAYMENT, "bill", "electricity", "dstv", "gotv"),
)


__all__ = [
    "BASE_TYPE_RULES",
    "CounterpartyInfo",
    "CounterpartyRule",
    "Extractor",
    "KeywordMatch",
    "TypeRule",
    "apply_counterparty_rules",
    "clean_text",
    "group_rule",
    "infer_transaction_type",
    "narration_rule",
    "resolve_bank_code",
    "type_rule",
]
