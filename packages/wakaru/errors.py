"""File-level failures surfaced to callers of :func:`wakaru.api.parse_file`.

Row-level problems never use these classes: a bad row is skipped (and logged),
not raised. These exceptions describe a file that could not be processed at
all; ``parse_file`` converts them into the ``error`` string of its result and
the CLI prints them to stderr.
"""

from __future__ import annotations


class StatementError(Exception):
    """Base class for statement files that cannot be processed."""


class UnsupportedBankError(StatementError):
    def __init__(self, bank: str) -> None:
        super().__init__(f"Unsupported bank: {bank}")
        self.bank = bank


class UnsupportedFormatError(StatementError):
    """The file type is unknown, or the bank does not publish that format."""


class EmptyFileError(StatementError):
    def __init__(self, file_name: str) -> None:
        super().__init__(f"File is empty: {file_name}")
        self.file_name = file_name


class CorruptFileError(StatementError):
    """The bytes could not be decoded as the detected format."""


class MissingSheetError(StatementError):
    """The workbook has no sheets, or not the one the bank exports to."""


class PasswordError(StatementError):
    """The PDF is encrypted and the password is missing or wrong."""

    def __init__(self, *, supplied: bool) -> None:
        msg = "Incorrect password for protected PDF" if supplied else "Password required"
        super().__init__(msg)
        self.supplied = supplied


__all__ = [
    "CorruptFileError",
    "EmptyFileError",
    "MissingSheetError",
    "PasswordError",
    "StatementError",
    "UnsupportedBankError",
    "UnsupportedFormatError",
]
