# ruff: noqa: I001
"""Persistence integration for ``wakaru``.

Functions here write and read normalized transactions in the shared store
owned by ``libs/db``. They rely on the ORM model in
``wakaru_db.models.statement`` and a session provided by ``wakaru_db.client``.

Scope:
- Insert transactions into ``wk_transactions``, idempotent on ``id``.
- Load them back as :class:`~wakaru.models.Transaction` objects.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from wakaru_db.models.statement import StatementTransaction
from .config import STATEMENT_TZ
from .logging_setup import get_logger, log_event
from .models import BankType, Transaction, TransactionCategory, TransactionMeta, TransactionType

_logger = get_logger("wakaru.persistence")

# Keeps multi-row VALUES under SQLite's bound-parameter limit.
_BATCH_SIZE = 500


def _row_values(tx: Transaction) -> dict[str, Any]:
    meta = tx.meta or TransactionMeta()
    return {
        "id": tx.id,
        "bank_source": tx.bank_source.value,
        "date": tx.date,
        "description": tx.description,
        "amount": tx.amount,
        "category": tx.category.value,
        "reference": tx.reference,
        "type": meta.type.value,
        "narration": meta.narration,
        "counterparty_name": meta.counterparty_name,
        "counterparty_account": meta.counterparty_account,
        "counterparty_bank": meta.counterparty_bank,
        "bill_type": meta.bill_type,
        "bill_provider": meta.bill_provider,
        "bill_token": meta.bill_token,
        "session_id": meta.session_id,
        "raw_category": meta.raw_category,
        "balance_after": meta.balance_after,
    }


def _batches(items: Sequence[dict[str, Any]]) -> Iterator[Sequence[dict[str, Any]]]:
    for start in range(0, len(items), _BATCH_SIZE):
        yield items[start : start + _BATCH_SIZE]


def insert_transactions(session: Session, transactions: Iterable[Transaction]) -> int:
    """Insert transactions into ``wk_transactions``; return how many were new.

    Rows whose ``id`` already exists are left untouched, so importing the same
    statement twice is a no-op. Duplicates within ``transactions`` collapse to
    the first occurrence.
    """

    payloads: list[dict[str, Any]] = []
    seen: set[str] = set()
    for tx in transactions:
        if tx.id in seen:
            continue
        seen.add(tx.id)
        payloads.append(_row_values(tx))
    if not payloads:
        return 0

    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        insert = pg_insert
    elif dialect == "sqlite":
        insert = sqlite_insert
    else:
        raise RuntimeError(f"unsupported database dialect: {dialect}")

    inserted = 0
    for batch in _batches(payloads):
        stmt = insert(StatementTransaction).values(list(batch))
        stmt = stmt.on_conflict_do_nothing(index_elements=[StatementTransaction.id])
        result = session.execute(stmt)
        inserted += max(result.rowcount or 0, 0)

    log_event(
        _logger,
        logging.INFO,
        "persistence:insert",
        received=len(payloads),
        inserted=inserted,
        skipped=len(payloads) - inserted,
    )
    return inserted


def _local(value: datetime) -> datetime:
    # SQLite hands back naive wall-clock values; PostgreSQL returns UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=STATEMENT_TZ)
    return value.astimezone(STATEMENT_TZ)


def _to_transaction(row: StatementTransaction) -> Transaction:
    meta = TransactionMeta(
        type=TransactionType(row.type),
        narration=row.narration,
        counterparty_name=row.counterparty_name,
        counterparty_account=row.counterparty_account,
        counterparty_bank=row.counterparty_bank,
        bill_type=row.bill_type,
        bill_provider=row.bill_provider,
        bill_token=row.bill_token,
        session_id=row.session_id,
        raw_category=row.raw_category,
        balance_after=row.balance_after,
    )
    return Transaction(
        id=row.id,
        date=_local(row.date),
        description=row.description,
        amount=row.amount,
        category=TransactionCategory(row.category),
        bank_source=BankType(row.bank_source),
        reference=row.reference,
        meta=meta,
    )


def load_transactions(session: Session, bank: BankType | str | None = None) -> list[Transaction]:
    """Return stored transactions, newest first, optionally for one bank."""

    stmt = select(StatementTransaction)
    if bank is not None:
        stmt = stmt.where(StatementTransaction.bank_source == BankType(bank).value)
    stmt = stmt.order_by(StatementTransaction.date.desc(), StatementTransaction.id)
    return [_to_transaction(row) for row in session.scalars(stmt)]


__all__ = ["insert_transactions", "load_transactions"]
