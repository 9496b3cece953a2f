# ruff: noqa: E501
from __future__ import annotations

import textwrap

from wakaru.models import BankType, TransactionCategory, TransactionType
from wakaru.parsers import get_parser
from wakaru.parsers.fcmb import extract_rows

parser = get_parser("fcmb")


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


def _row(description: str, debit: str = "", credit: str = "1,000.00") -> list[str]:
    return ["15-Nov-2025", "15-Nov-2025", description, debit, credit, "101,000.00"]


def test_short_rows_are_skipped():
    assert parser.parse_transaction(["15-Nov-2025", "15-Nov-2025", "NIP FRM Ada"]) is None


def test_nip_inflow():
    tx = parser.parse_transaction(_row("NIP FRM John Doe", credit="5,000.00"))
    assert tx is not None
    assert tx.bank_source is BankType.FCMB
    assert tx.amount == 500_000
    assert tx.category is TransactionCategory.INFLOW
    assert tx.meta.type is TransactionType.TRANSFER
    assert tx.meta.counterparty_name == "John Doe"
    assert tx.meta.balance_after == 10_100_000
    assert tx.id.startswith("fcmb-")
    assert tx.reference == "20251115-NIPFRMJOHNDO"


def test_app_transfer_finds_bank_keyword():
    tx = parser.parse_transaction(_row("App To Opay Jane Smith", debit="2,000.00", credit=""))
    assert tx.amount == -200_000
    assert tx.category is TransactionCategory.OUTFLOW
    assert tx.meta.type is TransactionType.TRANSFER
    assert tx.meta.counterparty_bank == "Opay"
    assert tx.meta.counterparty_name == "Jane Smith"


def test_cop_from_counterparty():
    tx = parser.parse_transaction(_row("COP FRM Internal Account"))
    assert tx.meta.counterparty_name == "Internal Account"
    assert tx.meta.type is TransactionType.TRANSFER


def test_transaction_types():
    cases = {
        "POS Purchase SHOPRITE LEKKI": TransactionType.CARD_PAYMENT,
        "/Airtime/ MTN 08012345678": TransactionType.AIRTIME,
        "EMT Levy": TransactionType.BANK_CHARGE,
        "SMS Alert Charge": TransactionType.BANK_CHARGE,
        "Transaction Charge": TransactionType.BANK_CHARGE,
        "Reversal of failed debit": TransactionType.REVERSAL,
        "Something unusual": TransactionType.OTHER,
    }
    for description, expected in cases.items():
        tx = parser.parse_transaction(_row(description, debit="50.00", credit=""))
        assert tx is not None, description
        assert tx.meta.type is expected, description


def test_extract_rows_uses_balance_delta():
    text = _dedent(
        """
        OPENING BALANCE 100,000.00
        01-Jan-2025 01-Jan-2025 NIP FRM Ada 5,000.00 105,000.00
        02-Jan-2025 02-Jan-2025 POS Purchase 2,000.00 103,000.00
        """
    )
    rows = extract_rows(text)
    assert rows == [
        ["01-Jan-2025", "01-Jan-2025", "NIP FRM Ada", "", "5,000.00", "105,000.00"],
        ["02-Jan-2025", "02-Jan-2025", "POS Purchase", "2,000.00", "", "103,000.00"],
    ]
    amounts = [parser.parse_transaction(r).amount for r in rows]
    assert amounts == [500_000, -200_000]


def test_pdf_is_accepted():
    assert parser.spec.accepts_pdf
    assert parser.display_name == "FCMB"
