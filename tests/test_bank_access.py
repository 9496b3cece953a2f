# ruff: noqa: E501
from __future__ import annotations

import textwrap

from wakaru.models import BankType, TransactionCategory, TransactionType
from wakaru.parsers import get_parser
from wakaru.parsers.access import extract_rows

parser = get_parser("access")


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


def test_short_and_empty_rows_are_skipped():
    assert parser.parse_transaction([]) is None
    assert parser.parse_transaction(["01-JAN-25", "01-JAN-25", "Test"]) is None


def test_credit_transfer():
    row = ["15-NOV-25", "15-NOV-25", "NIP TFR FROM John Doe", "-", "50,000.00", "150,000.00"]
    tx = parser.parse_transaction(row)
    assert tx is not None
    assert tx.bank_source is BankType.ACCESS
    assert tx.amount == 5_000_000
    assert tx.category is TransactionCategory.INFLOW
    assert tx.meta is not None
    assert tx.meta.type is TransactionType.TRANSFER
    assert tx.meta.counterparty_name == "John Doe"
    assert tx.meta.balance_after == 15_000_000
    assert tx.meta.session_id == "15-NOV-25"
    assert tx.id.startswith("access-")
    assert tx.reference == "20251115-NIPTFRFROMJO"


def test_mobile_transfer_resolves_bank_code():
    row = ["20-DEC-25", "20-DEC-25", "MOBILE TRF TO GTB/ 1234567890/ Jane Smith", "25,000.00", "-", "125,000.00"]
    tx = parser.parse_transaction(row)
    assert tx is not None
    assert tx.amount == -2_500_000
    assert tx.category is TransactionCategory.OUTFLOW
    assert tx.meta.counterparty_bank == "GTB"
    assert tx.meta.counterparty_name == "Jane Smith"

    expected = {"PAY": "OPay", "FBN": "First Bank", "MMF": "Moniepoint", "WBP": "Wema Bank", "PPL": "PalmPay", "KMF": "Kuda"}
    for code, bank in expected.items():
        row = ["01-JAN-25", "01-JAN-25", f"MOBILE TRF TO {code}/ Account/ Name", "1,000.00", "-", "99,000.00"]
        tx = parser.parse_transaction(row)
        assert tx is not None
        assert tx.meta.counterparty_bank == bank
        assert tx.meta.counterparty_name == "Name"


def test_transaction_types():
    cases = {
        "WEB PYMT to JUMIA": TransactionType.CARD_PAYMENT,
        "POS PYMT at SHOPRITE": TransactionType.CARD_PAYMENT,
        "ATM CASH WDL at ACCESS BANK ATM": TransactionType.ATM_WITHDRAWAL,
        "BILLS PYMT DSTV Subscription": TransactionType.BILL_PAYMENT,
        "Airtime purchase 08031234567": TransactionType.BILL_PAYMENT,
        "Commission on Transfer": TransactionType.BANK_CHARGE,
        "VAT on Commission": TransactionType.BANK_CHARGE,
        "SMS Alert Fee": TransactionType.BANK_CHARGE,
        "Reversal of failed transfer": TransactionType.REVERSAL,
        "Something unusual": TransactionType.OTHER,
    }
    for description, expected in cases.items():
        tx = parser.parse_transaction(["01-FEB-25", "01-FEB-25", description, "50.00", "-", "66,950.00"])
        assert tx is not None, description
        assert tx.meta.type is expected, description


def test_trf_frm_counterparty_is_recipient():
    row = ["15-FEB-25", "15-FEB-25", "TRF//FRM John Doe TO Jane Smith", "-", "10,000.00", "81,846.25"]
    tx = parser.parse_transaction(row)
    assert tx.meta.type is TransactionType.TRANSFER
    assert tx.meta.counterparty_name == "Jane Smith"


def test_missing_date_or_amount_is_skipped():
    assert parser.parse_transaction(["Invalid", "01-JAN-25", "Test", "-", "1,000.00", "100,000.00"]) is None
    assert parser.parse_transaction(["01-JAN-25", "01-JAN-25", "Test", "-", "-", "100,000.00"]) is None


def test_every_month_abbreviation():
    months = ["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"]
    for index, month in enumerate(months, start=1):
        tx = parser.parse_transaction([f"15-{month}-25", f"15-{month}-25", "Test", "-", "1,000.00", "100,000.00"])
        assert tx is not None
        assert (tx.date.year, tx.date.month, tx.date.day) == (2025, index, 15)


def test_ids_differ_between_rows_and_repeat_for_same_row():
    row1 = ["01-JAN-25", "01-JAN-25", "Transaction 1", "-", "1,000.00", "100,000.00"]
    row2 = ["01-JAN-25", "01-JAN-25", "Transaction 2", "-", "2,000.00", "102,000.00"]
    assert parser.parse_transaction(row1).id != parser.parse_transaction(row2).id
    assert parser.parse_transaction(row1).id == parser.parse_transaction(list(row1)).id


def test_extract_rows_from_pdf_text():
    text = _dedent(
        """
        01-JAN-25 01-JAN-25 Posted Date Value Date Description 0.00 0.00 0.00
        01-JAN-25 01-JAN-25 Opening Balance - - 100,000.00
        01-JAN-25 01-JAN-25 Test transaction 1,000.00 - 99,000.00
        02-JAN-25 02-JAN-25 Another transaction - 500.00 99,500.00
        """
    )
    rows = extract_rows(text)
    assert rows == [
        ["01-JAN-25", "01-JAN-25", "Test transaction", "1,000.00", "-", "99,000.00"],
        ["02-JAN-25", "02-JAN-25", "Another transaction", "-", "500.00", "99,500.00"],
    ]
    amounts = [parser.parse_transaction(r).amount for r in rows]
    assert amounts == [-100_000, 50_000]


def test_display_name():
    assert parser.display_name == "Access"
    assert parser.bank is BankType.ACCESS
