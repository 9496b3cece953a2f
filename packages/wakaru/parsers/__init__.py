"""Per-bank row parsers and PDF row reconstructors.

Each bank module exposes a ``SPEC`` (:class:`~wakaru.parsers.base.BankSpec`);
Kuda and PalmPay additionally ship a :class:`BankParser` subclass for layouts
the column map cannot express. :func:`get_parser` is the lookup used by the
facade and the CLI.
"""

from __future__ import annotations

from ..errors import UnsupportedBankError
from ..models import BankType
from . import (
    access,
    fcmb,
    gtb,
    kuda,
    opay,
    palmpay,
    standard_chartered,
    sterling,
    uba,
    wema,
    zenith,
)
from .base import AmountMode, BankParser, BankSpec, ColumnMap, RowFields, build_transaction

BANK_SPECS: dict[BankType, BankSpec] = {
    BankType.ACCESS: access.SPEC,
    BankType.FCMB: fcmb.SPEC,
    BankType.GTB: gtb.SPEC,
    BankType.KUDA: kuda.SPEC,
    BankType.OPAY: opay.SPEC,
    BankType.PALMPAY: palmpay.SPEC,
    BankType.STANDARD_CHARTERED: standard_chartered.SPEC,
    BankType.STERLING: sterling.SPEC,
    BankType.UBA: uba.SPEC,
    BankType.WEMA: wema.SPEC,
    BankType.ZENITH: zenith.SPEC,
}

_PARSER_CLASSES: dict[BankType, type[BankParser]] = {
    BankType.KUDA: kuda.KudaParser,
    BankType.PALMPAY: palmpay.PalmPayParser,
}


def resolve_bank(bank: str | BankType) -> BankType:
    """Map a short code (case-insensitive) to :class:`BankType`.

    Raises :class:`UnsupportedBankError` for unknown codes.
    """

    if isinstance(bank, BankType):
        return bank
    try:
        return BankType(bank.strip().lower())
    except ValueError:
        raise UnsupportedBankError(bank) from None


def get_parser(bank: str | BankType) -> BankParser:
    bank_type = resolve_bank(bank)
    cls = _PARSER_CLASSES.get(bank_type, BankParser)
    return cls(BANK_SPECS[bank_type])


def supported_banks() -> list[BankSpec]:
    return list(BANK_SPECS.values())


__all__ = [
    "AmountMode",
    "BANK_SPECS",
    "BankParser",
    "BankSpec",
    "ColumnMap",
    "RowFields",
    "build_transaction",
    "get_parser",
    "resolve_bank",
    "supported_banks",
]
