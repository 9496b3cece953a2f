"""Serialisation of normalized transactions (JSON and CSV).

The JSON shape uses camelCase keys (``bankSource``, ``balanceAfter``, ...) so
that exports line up with the browser/worker clients that consume them.
Pydantic models validate the same invariants as the frozen dataclasses when
JSON is loaded back: a non-empty description and a category that matches the
sign of the amount.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from decimal import Decimal

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    TypeAdapter,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .models import (
    BankType,
    Transaction,
    TransactionCategory,
    TransactionMeta,
    TransactionType,
)

# ---------------------------------------------------------------------------
# DTOs
# ---------------------------------------------------------------------------


class TransactionMetaRecord(BaseModel):
    model_config = ConfigDict(
        extra="forbid", alias_generator=to_camel, populate_by_name=True, frozen=True
    )

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


class TransactionRecord(BaseModel):
    """Wire form of :class:`~wakaru.models.Transaction`."""

    model_config = ConfigDict(
        extra="forbid", alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    date: AwareDatetime
    description: str
    amount: int
    category: TransactionCategory
    bank_source: BankType
    reference: str
    meta: TransactionMetaRecord | None = None

    @field_validator("description")
    @classmethod
    def _description_non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("description must be non-empty")
        return v

    @model_validator(mode="after")
    def _category_matches_sign(self) -> TransactionRecord:
        if self.amount == 0:
            raise ValueError("amount must be non-zero")
        if self.category is not TransactionCategory.for_amount(self.amount):
            raise ValueError(
                f"category {self.category.value!r} disagrees with amount {self.amount}"
            )
        return self

    @classmethod
    def from_transaction(cls, tx: Transaction) -> TransactionRecord:
        meta = None
        if tx.meta is not None:
            m = tx.meta
            meta = TransactionMetaRecord(
                type=m.type,
                narration=m.narration,
                counterparty_name=m.counterparty_name,
                counterparty_account=m.counterparty_account,
                counterparty_bank=m.counterparty_bank,
                bill_type=m.bill_type,
                bill_provider=m.bill_provider,
                bill_token=m.bill_token,
                session_id=m.session_id,
                raw_category=m.raw_category,
                balance_after=m.balance_after,
            )
        return cls(
            id=tx.id,
            date=tx.date,
            description=tx.description,
            amount=tx.amount,
            category=tx.category,
            bank_source=tx.bank_source,
            reference=tx.reference,
            meta=meta,
        )

    def to_transaction(self) -> Transaction:
        meta = None
        if self.meta is not None:
            meta = TransactionMeta(**self.meta.model_dump())
        return Transaction(
            id=self.id,
            date=self.date,
            description=self.description,
            amount=self.amount,
            category=self.category,
            bank_source=self.bank_source,
            reference=self.reference,
            meta=meta,
        )


_RECORDS = TypeAdapter(list[TransactionRecord])


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def dump_json(transactions: Iterable[Transaction], *, indent: int | None = 2) -> str:
    records = [TransactionRecord.from_transaction(tx) for tx in transactions]
    return _RECORDS.dump_json(records, by_alias=True, indent=indent).decode("utf-8")


def load_json(data: str | bytes) -> list[Transaction]:
    """Validate a JSON array of transaction records and rebuild the dataclasses.

    Raises ``pydantic.ValidationError`` for malformed or inconsistent records.
    """

    return [record.to_transaction() for record in _RECORDS.validate_json(data)]


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

CSV_HEADERS = ("id", "date", "description", "amount", "category", "bankSource")


def _naira(kobo: int) -> str:
    return f"{Decimal(abs(kobo)) / 100:.2f}"


def transactions_to_csv(transactions: Sequence[Transaction]) -> str:
    """Return a CSV export, oldest first.

    ``amount`` is the absolute value in naira with two decimals; the direction
    is carried by ``category``.
    """

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for tx in sorted(transactions, key=lambda t: t.date):
        writer.writerow(
            [
                tx.id,
                tx.date.isoformat(),
                tx.description,
                _naira(tx.amount),
                tx.category.value,
                tx.bank_source.value,
            ]
        )
    return out.getvalue()


__all__ = [
    "CSV_HEADERS",
    "TransactionMetaRecord",
    "TransactionRecord",
    "dump_json",
    "load_json",
    "transactions_to_csv",
]
