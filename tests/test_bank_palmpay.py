# ruff: noqa: E501
from __future__ import annotations

import textwrap

from wakaru.models import BankType, TransactionCategory, TransactionType
from wakaru.parsers import get_parser
from wakaru.parsers.palmpay import PalmPayParser, extract_rows, merge_continuations

parser = get_parser("palmpay")


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


def test_registry_returns_custom_parser():
    assert isinstance(parser, PalmPayParser)
    assert parser.spec.accepts_pdf


def test_reconstructed_row():
    tx = parser.parse_transaction(["12/29/2025 06:19:00 PM Send to John Doe", "-5,000.00", "tx123abc"])
    assert tx is not None
    assert tx.bank_source is BankType.PALMPAY
    assert tx.amount == -500_000
    assert tx.category is TransactionCategory.OUTFLOW
    assert (tx.date.month, tx.date.day, tx.date.hour, tx.date.minute) == (12, 29, 18, 19)
    assert tx.description == "Send to John Doe"
    assert tx.reference == "tx123abc"
    assert tx.meta.type is TransactionType.TRANSFER
    assert tx.meta.counterparty_name == "John Doe"


def test_spreadsheet_row_uses_money_in_or_out():
    inflow = parser.parse_transaction(["12/30/2025 08:00:00 AM", "Received from Jane Smith", "+10,000.00", "", "tx456"])
    assert inflow.amount == 1_000_000
    assert inflow.meta.counterparty_name == "Jane Smith"
    outflow = parser.parse_transaction(["12/30/2025 09:00:00 AM", "Airtime purchase", "", "-100.00", "tx789"])
    assert outflow.amount == -10_000
    assert outflow.meta.type is TransactionType.AIRTIME
    assert outflow.reference == "tx789"


def test_unparseable_rows_are_skipped():
    assert parser.parse_transaction(["Transaction Date", "Amount", "ID"]) is None
    assert parser.parse_transaction(["12/29/2025 06:19:00 PM Send to X", "", "tx1"]) is None


def test_extract_rows_from_pdf_text():
    text = _dedent(
        """
        Transaction Date Transaction Detail Money In/Out Transaction ID
        12/29/2025 06:19:00 PM Send to John Doe -5,000.00 tx123abc
        12/30/2025 08:00:00 AM Received from Jane Smith +10,000.00 tx456def
        """
    )
    assert extract_rows(text) == [
        ["12/29/2025 06:19:00 PM Send to John Doe", "-5,000.00", "tx123abc"],
        ["12/30/2025 08:00:00 AM Received from Jane Smith", "+10,000.00", "tx456def"],
    ]


def test_merge_continuations_attaches_forward_and_backward():
    rows = [
        ["Send to John Doe"],
        ["12/29/2025 06:19:00 PM", "Transfer", "", "-5,000.00", "tx1"],
        ["for rent"],
        ["12/30/2025 08:00:00 AM", "Cashbox interest", "+12.00", "", "tx2"],
    ]
    merged = merge_continuations(rows)
    assert merged == [
        ["12/29/2025 06:19:00 PM", "Send to John Doe Transfer for rent", "", "-5,000.00", "tx1"],
        ["12/30/2025 08:00:00 AM", "Cashbox interest", "+12.00", "", "tx2"],
    ]
    # the input rows are not modified
    assert rows[1][1] == "Transfer"

    tx = parser.parse_transaction(merged[0])
    assert tx.meta.counterparty_name == "John Doe Transfer for rent"
    assert parser.parse_transaction(merged[1]).meta.type is TransactionType.INTEREST
