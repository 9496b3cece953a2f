"""Shared row-parser core configured by a declarative per-bank :class:`BankSpec`.

Adding a bank means adding a ``BankSpec`` (column indices, date convention,
amount mode and ordered rule lists) and, when its statements arrive as PDF
text, a reconstructor that turns the text into rows. Banks whose row layout
does not fit :class:`ColumnMap` subclass :class:`BankParser` and override
:meth:`BankParser._extract_fields` only.

Every row goes through the same steps:

1. reject rows shorter than ``min_columns``;
2. pull date, amount and description cells via the column map;
3. normalize them (a missing date or amount is a skip, not an error);
4. run the bank's counterparty and type cascades;
5. assemble the record with :func:`build_transaction`, the only place where
   ``category`` and ``id`` are derived.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..config import DESCRIPTION_PLACEHOLDER
from ..identifiers import generate_id, generate_reference
from ..logging_setup import get_logger, log_row_failed, log_row_skipped
from ..models import (
    BankType,
    Cell,
    ParseError,
    ParseResult,
    RawRow,
    Transaction,
    TransactionCategory,
    TransactionMeta,
)
from ..normalize import (
    DateFormat,
    cell_text,
    parse_amount,
    parse_date,
    parse_debit_credit,
    parse_signed_amount,
)
from ..rules import (
    BASE_TYPE_RULES,
    CounterpartyInfo,
    CounterpartyRule,
    TypeRule,
    apply_counterparty_rules,
    infer_transaction_type,
)

type Reconstructor = Callable[[str], list[RawRow]]
type Preprocessor = Callable[[list[RawRow]], list[RawRow]]


class AmountMode(StrEnum):
    """How the signed amount is read from a row."""

    #: separate debit/credit columns, credit wins when both are set
    DEBIT_CREDIT = "debit_credit"
    #: separate debit/credit columns, a non-blank debit wins (OPay)
    DEBIT_FIRST = "debit_first"
    #: money-in if non-blank, else negated money-out (Kuda)
    EXCLUSIVE_IN_OUT = "exclusive_in_out"
    #: one column with an explicit ``+``/``-`` prefix (PalmPay)
    SIGNED = "signed"
    #: unsigned amount plus a ``"credit"``/``"debit"`` flag cell
    FLAGGED = "flagged"


@dataclass(frozen=True, slots=True)
class ColumnMap:
    """Zero-based column indices. ``None`` means the bank has no such column."""

    date: int
    description: int
    debit: int | None = None
    credit: int | None = None
    amount: int | None = None
    flag: int | None = None
    balance: int | None = None
    reference: int | None = None
    session: int | None = None


@dataclass(frozen=True, slots=True)
class BankSpec:
    bank: BankType
    display_name: str
    id_prefix: str
    min_columns: int
    columns: ColumnMap
    date_format: DateFormat
    amount_mode: AmountMode
    counterparty_rules: tuple[CounterpartyRule, ...] = ()
    type_rules: tuple[TypeRule, ...] = BASE_TYPE_RULES
    # characters of the description kept in a generated reference
    reference_length: int = 10
    # lower-case substrings of the description that mark rows to ignore
    skip_keywords: tuple[str, ...] = ()
    reconstruct: Reconstructor | None = None
    preprocess: Preprocessor | None = None
    sheet_name: str | None = None

    @property
    def accepts_pdf(self) -> bool:
        return self.reconstruct is not None


@dataclass(frozen=True, slots=True)
class RowFields:
    """Normalized cells of one row, before rule cascades run.

    ``narration``, ``type_text`` and ``counterparty`` default to values
    derived from ``description`` when left ``None``.
    """

    date: datetime
    amount: int
    description: str
    reference: str | None = None
    balance: int | None = None
    session_id: str | None = None
    raw_category: str | None = None
    narration: str | None = None
    type_text: str | None = None
    counterparty: CounterpartyInfo | None = None


def cell(row: Sequence[Cell], index: int | None) -> Cell:
    """Return ``row[index]`` or ``None`` when the column is absent."""

    if index is None or index < 0 or index >= len(row):
        return None
    return row[index]


def build_transaction(
    spec: BankSpec,
    date: datetime,
    amount: int,
    description: str,
    reference: str,
    meta: TransactionMeta | None = None,
) -> Transaction:
    """Create a :class:`Transaction`, deriving ``category`` and ``id``.

    Raises ``ValueError`` for a zero amount.
    """

    description = description or DESCRIPTION_PLACEHOLDER
    return Transaction(
        id=generate_id(spec.id_prefix, date, amount, reference, description),
        date=date,
        description=description,
        amount=amount,
        category=TransactionCategory.for_amount(amount),
        bank_source=spec.bank,
        reference=reference,
        meta=meta,
    )


class BankParser:
    """Row parser for one bank, driven by its :class:`BankSpec`."""

    def __init__(self, spec: BankSpec) -> None:
        self.spec = spec
        self._logger = get_logger(f"wakaru.parsers.{spec.bank.value}")

    @property
    def bank(self) -> BankType:
        return self.spec.bank

    @property
    def display_name(self) -> str:
        return self.spec.display_name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bank={self.spec.bank.value!r})"

    # ---- public API -------------------------------------------------------

    def parse_transaction(self, row: RawRow, row_index: int = 0) -> Transaction | None:
        """Parse one row; ``None`` for skipped or failed rows. Never raises."""

        return self.parse_transaction_safe(row, row_index).transaction

    def parse_transaction_safe(self, row: RawRow, row_index: int = 0) -> ParseResult:
        try:
            transaction = self._parse(row, row_index)
        except Exception as e:  # noqa: BLE001
            message = str(e) or e.__class__.__name__
            log_row_failed(self._logger, self.spec.display_name, row_index, message)
            return ParseResult(error=ParseError(row_index, message, list(row) if row else None))
        return ParseResult(transaction=transaction)

    def reconstruct_rows(self, text: str) -> list[RawRow]:
        """Rebuild rows from PDF text; ``[]`` for banks without a reconstructor."""

        if self.spec.reconstruct is None:
            return []
        return self.spec.reconstruct(text)

    def preprocess_rows(self, rows: list[RawRow]) -> list[RawRow]:
        if self.spec.preprocess is None:
            return rows
        return self.spec.preprocess(rows)

    # ---- pipeline ---------------------------------------------------------

    def _parse(self, row: RawRow, row_index: int) -> Transaction | None:
        if not row or len(row) < self.spec.min_columns:
            return None
        fields = self._extract_fields(row, row_index)
        if fields is None:
            return None

        counterparty = fields.counterparty
        if counterparty is None:
            counterparty = apply_counterparty_rules(
                self.spec.counterparty_rules, fields.description
            )
        type_text = fields.type_text if fields.type_text is not None else fields.description

        meta = TransactionMeta(
            type=infer_transaction_type(self.spec.type_rules, type_text),
            narration=counterparty.narration or fields.narration or fields.description or None,
            counterparty_name=counterparty.name,
            counterparty_account=counterparty.account,
            counterparty_bank=counterparty.bank,
            session_id=fields.session_id or None,
            raw_category=fields.raw_category or None,
            balance_after=fields.balance,
        )
        reference = fields.reference or generate_reference(
            fields.date, fields.description, self.spec.reference_length
        )
        return build_transaction(
            self.spec, fields.date, fields.amount, fields.description, reference, meta
        )

    def _extract_fields(self, row: RawRow, row_index: int) -> RowFields | None:
        spec = self.spec
        cols = spec.columns
        description = cell_text(cell(row, cols.description))
        if spec.skip_keywords and any(k in description.lower() for k in spec.skip_keywords):
            return None

        date_cell = cell(row, cols.date)
        date = parse_date(date_cell, spec.date_format)
        if date is None:
            self._skip(row_index, "no_date", date_cell)
            return None

        amount = self._read_amount(row)
        if amount is None:
            self._skip(row_index, "no_amount", date_cell)
            return None

        return RowFields(
            date=date,
            amount=amount,
            description=description,
            reference=cell_text(cell(row, cols.reference)) or None,
            balance=parse_amount(cell(row, cols.balance)),
            session_id=cell_text(cell(row, cols.session)) or None,
        )

    def _read_amount(self, row: RawRow) -> int | None:
        cols = self.spec.columns
        mode = self.spec.amount_mode
        if mode is AmountMode.DEBIT_CREDIT:
            return parse_debit_credit(cell(row, cols.debit), cell(row, cols.credit))
        if mode is AmountMode.DEBIT_FIRST:
            debit = cell_text(cell(row, cols.debit))
            if debit and debit != "--":
                kobo = parse_amount(debit)
                return -abs(kobo) if kobo is not None else None
            credit = cell_text(cell(row, cols.credit))
            if credit and credit != "--":
                return parse_amount(credit)
            return None
        if mode is AmountMode.EXCLUSIVE_IN_OUT:
            money_in = cell_text(cell(row, cols.credit))
            if money_in:
                return parse_amount(money_in)
            money_out = cell_text(cell(row, cols.debit))
            if money_out:
                kobo = parse_amount(money_out)
                return -abs(kobo) if kobo is not None else None
            return None
        if mode is AmountMode.SIGNED:
            return parse_signed_amount(cell(row, cols.amount))
        if mode is AmountMode.FLAGGED:
            kobo = parse_amount(cell(row, cols.amount))
            if kobo is None:
                return None
            is_credit = cell_text(cell(row, cols.flag)).lower() == "credit"
            return abs(kobo) if is_credit else -abs(kobo)
        raise ValueError(f"unknown amount mode: {mode!r}")

    def _skip(self, row_index: int, reason: str, date_cell: Cell) -> None:
        # Blank date cells are separators or headers, not malformed rows.
        if date_cell is None or cell_text(date_cell) == "":
            return
        log_row_skipped(self._logger, self.spec.display_name, row_index, reason)


__all__ = [
    "AmountMode",
    "BankParser",
    "BankSpec",
    "ColumnMap",
    "Preprocessor",
    "Reconstructor",
    "RowFields",
    "build_transaction",
    "cell",
]
