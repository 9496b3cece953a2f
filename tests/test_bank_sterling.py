# ruff: noqa: E501
from __future__ import annotations

import textwrap

from wakaru.models import BankType, TransactionCategory, TransactionType
from wakaru.parsers import get_parser
from wakaru.parsers.sterling import extract_rows, to_numeric_date

parser = get_parser("sterling")


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


def _row(narration: str, money_in: str = "-", money_out: str = "1,000.00") -> list[str]:
    return ["15-11-2025", "1234567890", narration, money_in, money_out, "99,000.00"]


def test_onebank_transfer_in():
    tx = parser.parse_transaction(_row("OneBank Transfer from JOHN DOE to JANE SMITH", money_in="5,000.00", money_out="-"))
    assert tx is not None
    assert tx.bank_source is BankType.STERLING
    assert tx.amount == 500_000
    assert tx.category is TransactionCategory.INFLOW
    assert tx.meta.type is TransactionType.TRANSFER
    assert tx.meta.counterparty_name == "JANE SMITH"
    assert tx.meta.counterparty_bank == "Sterling Bank"
    assert tx.meta.session_id == "1234567890"


def test_banknip_sender():
    tx = parser.parse_transaction(_row("BANKNIP From GTB SENDER: JOHN DOE REMARK: rent", money_in="5,000.00", money_out="-"))
    assert tx.meta.counterparty_name == "JOHN DOE"
    assert tx.meta.type is TransactionType.TRANSFER


def test_airtime_narrations():
    data = parser.parse_transaction(_row("Data purchase for 08012345678"))
    assert data.amount == -100_000
    assert data.meta.type is TransactionType.AIRTIME
    assert data.meta.narration == "Data purchase for 08012345678"

    ussd = parser.parse_transaction(_row("USSDAirtime purchase to Mobile 08012345678"))
    assert ussd.meta.narration == "Airtime for 08012345678"
    assert ussd.meta.type is TransactionType.AIRTIME


def test_transaction_types():
    cases = {
        "Bill Payment to DSTV": TransactionType.BILL_PAYMENT,
        "POS Purchase at SHOP": TransactionType.CARD_PAYMENT,
        "SMS Notification Charge": TransactionType.BANK_CHARGE,
        "Reversal of POS": TransactionType.REVERSAL,
        "Interest Earned": TransactionType.INTEREST,
        "Something unusual": TransactionType.OTHER,
    }
    for narration, expected in cases.items():
        tx = parser.parse_transaction(_row(narration))
        assert tx is not None, narration
        assert tx.meta.type is expected, narration
    assert parser.parse_transaction(_row("Bill Payment to DSTV")).meta.counterparty_name == "DSTV"


def test_to_numeric_date():
    assert to_numeric_date("15-Nov-2025") == "15-11-2025"
    assert to_numeric_date("15-11-2025") == "15-11-2025"
    assert to_numeric_date("15-Xyz-2025") == "15-Xyz-2025"


def test_extract_rows_layout_a():
    text = _dedent(
        """
        Date Reference Narration Money In Money Out Balance
        15-11-2025 1234567890 OneBank Transfer from JOHN DOE to JANE SMITH 5,000.00 - 105,000.00
        16-11-2025 0987654321 POS Purchase at SHOP - 2,000.00 103,000.00
        """
    )
    rows = extract_rows(text)
    assert rows == [
        ["15-11-2025", "1234567890", "OneBank Transfer from JOHN DOE to JANE SMITH", "5,000.00", "-", "105,000.00"],
        ["16-11-2025", "0987654321", "POS Purchase at SHOP", "-", "2,000.00", "103,000.00"],
    ]
    assert [parser.parse_transaction(r).amount for r in rows] == [500_000, -200_000]


def test_extract_rows_layout_b():
    text = _dedent(
        """
        Trans Date Narration Value Date Debit Credit Balance
        15-Nov-2025 Transfer to JOHN DOE Ref: 1234567890 15-Nov-2025 1000.00 0.00 99000.00
        """
    )
    rows = extract_rows(text)
    assert rows == [["15-11-2025", "1234567890", "Transfer to", "-", "1000.00", "99000.00"]]
    tx = parser.parse_transaction(rows[0])
    assert tx.amount == -100_000
    assert tx.meta.type is TransactionType.TRANSFER
