"""OPay statements (spreadsheet export, "Wallet Account Transactions" sheet).

Columns::

    0 trans. time | 1 value date | 2 description | 3 debit | 4 credit
    | 5 balance after | 6 channel | 7 transaction reference

Empty money cells read ``--``. OWealth auto-save sweeps move money between the
wallet and the savings pocket of the same customer and are skipped.
"""

from __future__ import annotations

from ..models import BankType, TransactionType
from ..normalize import DateFormat
from ..rules import KeywordMatch, group_rule, type_rule
from .base import AmountMode, BankSpec, ColumnMap

SHEET_NAME = "Wallet Account Transactions"

OWEALTH_MARKERS = ("owealth withdrawal", "auto-save to owealth")

COUNTERPARTY_RULES = (
    group_rule(
        "transfer",
        r"Transfer\s+(?:to|from)\s+([^|]+)\s*\|\s*([^|]+)\s*\|\s*([^|]+)(?:\s*\|\s*(.+))?",
        counterparty=1,
        bank=2,
        account=3,
    ),
    group_rule("merchant_order", r"Third-Party Merchant Order\s*\|\s*(.+)", counterparty=1),
    # "Airtime | phone | carrier": the carrier is the counterparty
    group_rule("airtime", r"Airtime\s*\|\s*([^|]+)\s*\|\s*(.+)", counterparty=2),
)

_T = TransactionType
TYPE_RULES = (
    type_rule(_T.TRANSFER, "transfer to", "transfer from"),
    type_rule(_T.AIRTIME, "airtime", match=KeywordMatch.STARTSWITH),
    type_rule(_T.BANK_CHARGE, "electronic money transfer levy", "levy", "charge", "fee"),
    type_rule(_T.BILL_PAYMENT, "third-party merchant order"),
    type_rule(_T.REVERSAL, "reversal", "refund"),
)

SPEC = BankSpec(
    bank=BankType.OPAY,
    display_name="OPay",
    id_prefix="opay",
    min_columns=5,
    columns=ColumnMap(date=0, description=2, debit=3, credit=4, balance=5, reference=7),
    date_format=DateFormat.D_MON_YYYY_TIME,
    amount_mode=AmountMode.DEBIT_FIRST,
    counterparty_rules=COUNTERPARTY_RULES,
    type_rules=TYPE_RULES,
    skip_keywords=OWEALTH_MARKERS,
    sheet_name=SHEET_NAME,
)
