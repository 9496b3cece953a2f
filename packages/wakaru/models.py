"""Canonical transaction model and shared types for ``wakaru``.

A :class:`Transaction` is the single export contract of the engine: every
bank parser produces exactly this shape, and the persistence and export layers
consume only this shape. Field names and the amount sign convention
(positive = inflow, negative = outflow, integer kobo) must not vary per bank.

Instances are frozen: a transaction is created once from one statement row and
never mutated by the engine afterwards.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

# ---------------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------------

type Cell = str | int | float | datetime | date | None
"""One spreadsheet/CSV/reconstructed cell. ``None`` means "not provided"."""

type RawRow = list[Cell]
"""An ordered, positionally meaningful statement row."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class BankType(StrEnum):
    ACCESS = "access"
    FCMB = "fcmb"
    GTB = "gtb"
    KUDA = "kuda"
    OPAY = "opay"
    PALMPAY = "palmpay"
    STANDARD_CHARTERED = "standardchartered"
    STERLING = "sterling"
    UBA = "uba"
    WEMA = "wema"
    ZENITH = "zenith"


class TransactionCategory(StrEnum):
    INFLOW = "inflow"
    OUTFLOW = "outflow"

    @classmethod
    def for_amount(cls, amount: int) -> TransactionCategory:
        """Return the category implied by the sign of ``amount``."""

        if amount == 0:
            raise ValueError("a zero amount has no category")
        return cls.INFLOW if amount > 0 else cls.OUTFLOW


class TransactionType(StrEnum):
    TRANSFER = "transfer"
    BILL_PAYMENT = "bill_payment"
    AIRTIME = "airtime"
    CARD_PAYMENT = "card_payment"
    ATM_WITHDRAWAL = "atm_withdrawal"
    BANK_CHARGE = "bank_charge"
    INTEREST = "interest"
    REVERSAL = "reversal"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Canonical record
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionMeta:
    """Optional enrichment extracted from the narration and side columns.

    ``balance_after`` is in kobo, like ``Transaction.amount``. ``session_id``
    carries the value date or bank session identifier when the statement has
    one. ``raw_category`` is the bank's own category label, verbatim.
    """

    type: TransactionType = TransactionType.OTHER
    narration: str | None = None
    counterparty_name: str | None = None
    counterparty_account: str | None = None
    counterparty_bank: str | None = None
    bill_type: str | None = None
    bill_provider: str | None = None
    bill_token: str | None = None
    session_id: str | None = None
    raw_category: str | None = None
    balance_after: int | None = None


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single normalized statement transaction.

    ``__post_init__`` rejects a ``category`` that disagrees with the sign of
    ``amount``. Construct instances through
    :func:`wakaru.parsers.base.build_transaction` rather than directly.
    """

    id: str
    date: datetime
    description: str
    amount: int
    category: TransactionCategory
    bank_source: BankType
    reference: str
    meta: TransactionMeta | None = None

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError("amount must be an integer number of kobo")
        if self.category is not TransactionCategory.for_amount(self.amount):
            raise ValueError(
                f"category {self.category.value!r} disagrees with amount {self.amount}"
            )
        if not self.description:
            raise ValueError("description must be non-empty")


# ---------------------------------------------------------------------------
# Parse outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParseError:
    """Details of a row whose extraction raised."""

    row_index: int
    message: str
    row: RawRow | None = None


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of parsing one row.

    ``transaction`` is set on success. When it is ``None``, ``error`` is
    ``None`` for a skipped row (header, separator, missing date/amount) and a
    :class:`ParseError` for a row that raised.
    """

    transaction: Transaction | None = None
    error: ParseError | None = None

    @property
    def success(self) -> bool:
        return self.transaction is not None


@dataclass(frozen=True, slots=True)
class ParseStats:
    total_rows: int = 0
    successful: int = 0
    failed: int = 0
    skipped: int = 0
    elapsed_ms: float = 0.0


@dataclass(frozen=True, slots=True)
class StatementParseResult:
    """Result of :func:`wakaru.api.parse_file`.

    A non-``None`` ``error`` means the file could not be processed at all and
    ``transactions`` is empty. An empty ``transactions`` list with no error is
    a valid statement that simply has no entries.
    """

    transactions: list[Transaction] = field(default_factory=list)
    error: str | None = None
    errors: list[ParseError] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)

    @property
    def ok(self) -> bool:
        return self.error is None


type ProgressCallback = Callable[[int, str], None]
"""Receives ``(percent, message)`` while a file is being parsed."""


__all__ = [
    "BankType",
    "Cell",
    "ParseError",
    "ParseResult",
    "ParseStats",
    "ProgressCallback",
    "RawRow",
    "StatementParseResult",
    "Transaction",
    "TransactionCategory",
    "TransactionMeta",
    "TransactionType",
]
