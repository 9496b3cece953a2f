"""Building blocks for rebuilding statement rows from flat PDF text.

PDF-to-text extraction loses the table grid: one statement entry becomes a run
of tokens, and several layouts print the amount and the running balance next
to each other with nothing saying which direction the money moved. The
per-bank reconstructors in :mod:`wakaru.parsers` share the same shape:

1. strip headers, footers and legal boilerplate;
2. find the opening balance to seed a :class:`BalanceTracker`;
3. split the text into entries at anchor matches (date pairs, a date followed
   by a reference token, ...);
4. scan each entry for money tokens; the last token is the balance and the one
   before it is the amount;
5. classify credit vs debit from the balance delta and thread the updated
   tracker into the next entry.

The tracker is an immutable value created per reconstruction pass. Nothing here
keeps state between files.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal

from .normalize import parse_money

# Grouped thousands only: rejects phone numbers and account numbers.
STRICT_MONEY = r"\d{1,3}(?:,\d{3})*\.\d{2}"
# Any digit/comma run with two decimals.
LOOSE_MONEY = r"[\d,]+\.\d{2}"

_STRICT_RE = re.compile(STRICT_MONEY)
_LOOSE_RE = re.compile(LOOSE_MONEY)
_WS_RE = re.compile(r"\s+")

BALANCE_TOLERANCE = Decimal("0.01")


# ---------------------------------------------------------------------------
# Text cleanup
# ---------------------------------------------------------------------------


def strip_boilerplate(
    text: str, patterns: Iterable[re.Pattern[str]], *, replacement: str = " "
) -> str:
    """Remove every match of each pattern, in order."""

    for pattern in patterns:
        text = pattern.sub(replacement, text)
    return text


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def find_opening_balance(text: str, pattern: re.Pattern[str]) -> Decimal | None:
    """Return group 1 of the first ``pattern`` match as a Decimal, if any."""

    match = pattern.search(text)
    if match is None:
        return None
    return parse_money(match.group(1))


# ---------------------------------------------------------------------------
# Money tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MoneyToken:
    text: str
    value: Decimal
    start: int
    end: int


def money_tokens(text: str, *, strict: bool = False) -> list[MoneyToken]:
    """Return every money-looking token in ``text`` with its span."""

    pattern = _STRICT_RE if strict else _LOOSE_RE
    tokens: list[MoneyToken] = []
    for m in pattern.finditer(text):
        value = parse_money(m.group(0))
        if value is not None:
            tokens.append(MoneyToken(m.group(0), value, m.start(), m.end()))
    return tokens


def amount_and_balance(tokens: list[MoneyToken]) -> tuple[MoneyToken, MoneyToken] | None:
    """The last token is the balance and the one before it the amount."""

    if len(tokens) < 2:
        return None
    return tokens[-2], tokens[-1]


# ---------------------------------------------------------------------------
# Anchored entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Entry:
    """Text between one anchor match and the next.

    ``content`` starts after the anchor; ``text`` starts at the anchor.
    """

    anchor: re.Match[str]
    content: str
    text: str


def iter_entries(text: str, anchor: re.Pattern[str]) -> Iterator[Entry]:
    matches = list(anchor.finditer(text))
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        yield Entry(
            anchor=match,
            content=text[match.end() : end].strip(),
            text=text[match.start() : end].strip(),
        )


# ---------------------------------------------------------------------------
# Balance-delta classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BalanceTracker:
    """Running balance carried through one reconstruction pass.

    ``balance`` is ``None`` until the tracker is seeded, either from an opening
    balance or from the first classified entry.
    """

    balance: Decimal | None = None

    @classmethod
    def seeded(cls, balance: Decimal | None) -> BalanceTracker:
        return cls(balance)

    def classify(self, amount: Decimal, balance: Decimal) -> tuple[bool, BalanceTracker]:
        """Return ``(is_credit, next_tracker)`` for an entry.

        With ``delta = balance - previous``: ``delta == +amount`` is a credit,
        ``delta == -amount`` a debit (both within one kobo); otherwise the
        sign of ``delta`` decides. An unseeded tracker yields a debit.
        """

        nxt = BalanceTracker(balance)
        if self.balance is None:
            return False, nxt
        delta = balance - self.balance
        if abs(delta - amount) <= BALANCE_TOLERANCE:
            return True, nxt
        if abs(delta + amount) <= BALANCE_TOLERANCE:
            return False, nxt
        return delta > 0, nxt


__all__ = [
    "BALANCE_TOLERANCE",
    "BalanceTracker",
    "Entry",
    "LOOSE_MONEY",
    "MoneyToken",
    "STRICT_MONEY",
    "amount_and_balance",
    "collapse_whitespace",
    "find_opening_balance",
    "iter_entries",
    "money_tokens",
    "strip_boilerplate",
]
