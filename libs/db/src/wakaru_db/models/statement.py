from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, String, Text, func, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: wk_transactions
# ---------------------------


class StatementTransaction(Base):
    """One normalized statement transaction.

    ``id`` is the engine's deterministic identifier, so re-importing the same
    statement is a no-op. ``amount`` and ``balance_after`` are kobo.
    """

    __tablename__ = "wk_transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    bank_source: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    reference: Mapped[str] = mapped_column(String, nullable=False)

    # Enrichment (TransactionMeta); all optional except the type tag.
    type: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'other'"))
    narration: Mapped[str | None] = mapped_column(Text, nullable=True)
    counterparty_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    counterparty_account: Mapped[str | None] = mapped_column(String, nullable=True)
    counterparty_bank: Mapped[str | None] = mapped_column(String, nullable=True)
    bill_type: Mapped[str | None] = mapped_column(String, nullable=True)
    bill_provider: Mapped[str | None] = mapped_column(String, nullable=True)
    bill_token: Mapped[str | None] = mapped_column(String, nullable=True)
    session_id: Mapped[str | None] = mapped_column(String, nullable=True)
    raw_category: Mapped[str | None] = mapped_column(String, nullable=True)
    balance_after: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("category in ('inflow','outflow')", name="ck_wk_tx_category"),
        CheckConstraint(
            "(category = 'inflow' AND amount > 0) OR (category = 'outflow' AND amount < 0)",
            name="ck_wk_tx_category_sign",
        ),
        Index("ix_wk_tx_bank_date", "bank_source", "date"),
    )


__all__ = [
    "Base",
    "StatementTransaction",
]
