"""wakaru: Nigerian bank-statement parsing and normalization engine.

Public exports
--------------
- :func:`parse_file`, :func:`get_parser`, :func:`supported_banks` (``wakaru.api``)
- the canonical record types in ``wakaru.models``
- file-level exceptions in ``wakaru.errors``
"""

from __future__ import annotations

from .api import get_parser, parse_file, supported_banks
from .errors import (
    CorruptFileError,
    EmptyFileError,
    MissingSheetError,
    PasswordError,
    StatementError,
    UnsupportedBankError,
    UnsupportedFormatError,
)
from .models import (
    BankType,
    ParseError,
    ParseResult,
    ParseStats,
    RawRow,
    StatementParseResult,
    Transaction,
    TransactionCategory,
    TransactionMeta,
    TransactionType,
)

__all__ = [
    "BankType",
    "CorruptFileError",
    "EmptyFileError",
    "MissingSheetError",
    "ParseError",
    "ParseResult",
    "ParseStats",
    "PasswordError",
    "RawRow",
    "StatementError",
    "StatementParseResult",
    "Transaction",
    "TransactionCategory",
    "TransactionMeta",
    "TransactionType",
    "UnsupportedBankError",
    "UnsupportedFormatError",
    "get_parser",
    "parse_file",
    "supported_banks",
]
