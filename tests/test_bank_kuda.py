# ruff: noqa: E501
from __future__ import annotations

from wakaru.models import BankType, TransactionCategory, TransactionType
from wakaru.parsers import get_parser
from wakaru.parsers.kuda import KudaParser, kuda_reference, split_to_from

parser = get_parser("kuda")


def _row(money_in: str, money_out: str, category: str, to_from: str, description: str) -> list[str]:
    return [
        "22/01/23 12:46:35", "", money_in, "", money_out, "", category, "", to_from, "", description, "", "₦10,000.00",
    ]


def test_registry_returns_custom_parser():
    assert isinstance(parser, KudaParser)
    assert not parser.spec.accepts_pdf


def test_inward_transfer():
    tx = parser.parse_transaction(_row("₦5,000.00", "", "inward transfer", "John Doe/0123456789/GTBank", "Gift"))
    assert tx is not None
    assert tx.bank_source is BankType.KUDA
    assert tx.amount == 500_000
    assert tx.category is TransactionCategory.INFLOW
    assert (tx.date.year, tx.date.month, tx.date.day, tx.date.hour, tx.date.minute) == (2023, 1, 22, 12, 46)
    assert tx.description == "Gift"
    assert tx.reference == "220123-JOHNDOE0-GIFT"
    meta = tx.meta
    assert meta.type is TransactionType.TRANSFER
    assert meta.counterparty_name == "John Doe"
    assert meta.counterparty_account == "0123456789"
    assert meta.counterparty_bank == "GTBank"
    assert meta.raw_category == "inward transfer"
    assert meta.narration == "Gift - John Doe/0123456789/GTBank - inward transfer"
    assert meta.balance_after == 1_000_000


def test_money_out_is_negative_and_typed_from_category():
    tx = parser.parse_transaction(_row("", "₦1,500.00", "airtime", "", "MTN 0803"))
    assert tx.amount == -150_000
    assert tx.category is TransactionCategory.OUTFLOW
    assert tx.meta.type is TransactionType.AIRTIME
    assert tx.meta.counterparty_name is None


def test_description_falls_back_to_category():
    tx = parser.parse_transaction(_row("", "₦50.00", "card maintenance fee", "", ""))
    assert tx.description == "card maintenance fee"
    assert tx.meta.type is TransactionType.CARD_PAYMENT


def test_rows_without_date_or_amount_are_skipped():
    row = _row("₦5,000.00", "", "inward transfer", "", "Gift")
    row[0] = ""
    assert parser.parse_transaction(row) is None
    assert parser.parse_transaction(_row("", "", "inward transfer", "", "Gift")) is None
    assert parser.parse_transaction(["22/01/23 12:46:35", "", "₦5.00"]) is None


def test_split_to_from_and_reference():
    assert split_to_from("Jane/0011").account == "0011"
    assert split_to_from("Jane/0011").bank is None
    assert split_to_from("").is_empty
    assert kuda_reference("22/01/23 12:46:35", "", "Spotify") == "220123-SPOTIFY"
