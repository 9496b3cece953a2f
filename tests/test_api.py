# ruff: noqa: E501
from __future__ import annotations

import io
import re
import textwrap
from datetime import datetime

from openpyxl import Workbook

import wakaru.api as api
from wakaru import BankType, StatementParseResult, parse_file
from wakaru.models import ProgressCallback, TransactionType
from wakaru.normalize import DateFormat
from wakaru.parsers.base import AmountMode, BankParser, BankSpec, ColumnMap
from wakaru.rules import CounterpartyRule

GTB_TEXT = textwrap.dedent(
    """
    Opening Balance 100,000.00
    15-Nov-2025 15-Nov-2025 REF123 1,000.00 101,000.00 E-CHANNELS NIP TRANSFER TO OPAY - JOHN DOE
    16-Nov-2025 16-Nov-2025 REF456 500.00 100,500.00 001 LAGOS BRANCH Airtime purchase-08012345678
    """
).strip()

KUDA_CSV = (
    "Date/Time,,Money In,,Money out,,Category,,To / From,,Description,,Balance\n"
    '22/01/23 12:46:35,,"₦5,000.00",,,,inward transfer,,John Doe/0123/GTBank,,Gift,,"₦10,000.00"\n'
    '23/01/23 09:00:00,,,,"₦1,500.00",,airtime,,,,MTN,,"₦8,500.00"\n'
)


def _recorder() -> tuple[list[tuple[int, str]], ProgressCallback]:
    calls: list[tuple[int, str]] = []

    def on_progress(percent: int, message: str) -> None:
        calls.append((percent, message))

    return calls, on_progress


def test_pdf_text_route_progress_and_order():
    calls, on_progress = _recorder()
    result = parse_file(GTB_TEXT.encode("utf-8"), "statement.txt", "gtb", on_progress=on_progress)
    assert isinstance(result, StatementParseResult)
    assert result.ok and result.error is None
    assert [t.amount for t in result.transactions] == [-50_000, 100_000]
    assert result.transactions[0].date > result.transactions[1].date
    assert result.transactions[0].meta.type is TransactionType.AIRTIME
    assert calls == [
        (5, "Reading file..."),
        (20, "Found 2 rows..."),
        (90, "Processing 2 of 2 rows..."),
        (95, "Finalizing..."),
        (100, "Done"),
    ]
    assert result.stats.total_rows == 2
    assert result.stats.successful == 2
    assert result.stats.elapsed_ms >= 0


def test_progress_per_chunk():
    calls, on_progress = _recorder()
    parse_file(GTB_TEXT.encode("utf-8"), "statement.txt", BankType.GTB, on_progress=on_progress, chunk_size=1)
    assert calls[2:4] == [(55, "Processing 1 of 2 rows..."), (90, "Processing 2 of 2 rows...")]


def test_chunk_size_from_environment(monkeypatch):
    monkeypatch.setenv("WAKARU_CHUNK_SIZE", "1")
    calls, on_progress = _recorder()
    parse_file(GTB_TEXT.encode("utf-8"), "statement.txt", "gtb", on_progress=on_progress)
    assert sum(1 for _, message in calls if message.startswith("Processing")) == 2


def test_csv_route_counts_skipped_header():
    result = parse_file(KUDA_CSV.encode("utf-8"), "kuda.csv", "kuda")
    assert result.ok
    assert [t.amount for t in result.transactions] == [-150_000, 500_000]
    assert result.transactions[1].meta.counterparty_name == "John Doe"
    assert (result.stats.total_rows, result.stats.successful, result.stats.failed, result.stats.skipped) == (3, 2, 0, 1)


def test_palmpay_csv_continuations_are_merged():
    data = "Send to John Doe\n12/29/2025 06:19:00 PM,Transfer,,-5000.00,tx1\n"
    result = parse_file(data.encode("utf-8"), "palmpay.csv", "palmpay")
    assert len(result.transactions) == 1
    tx = result.transactions[0]
    assert tx.description == "Send to John Doe Transfer"
    assert tx.amount == -500_000


def test_opay_workbook_uses_wallet_sheet():
    wb = Workbook()
    ws = wb.active
    ws.title = "Wallet Account Transactions"
    ws.append(["Trans. Time", "Value Date", "Description", "Debit", "Credit", "Balance After", "Channel", "Reference"])
    ws.append(["29 Nov 2025 08:12:51", "29 Nov 2025", "Transfer to John Doe | OPay | 8012345678", "5,000.00", "--", "95,000.00", "Mobile", "REF001"])
    out = io.BytesIO()
    wb.save(out)

    result = parse_file(out.getvalue(), "opay.xlsx", "opay")
    assert result.ok
    assert [t.reference for t in result.transactions] == ["REF001"]

    wb2 = Workbook()
    wb2.active.title = "Sheet1"
    out2 = io.BytesIO()
    wb2.save(out2)
    missing = parse_file(out2.getvalue(), "opay.xlsx", "opay")
    assert missing.error == 'Sheet "Wallet Account Transactions" not found'


def _workbook_bytes(*rows: list) -> bytes:
    wb = Workbook()
    for row in rows:
        wb.active.append(row)
    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()


def test_palmpay_workbook_with_native_date_cells():
    data = _workbook_bytes(
        ["Transaction Date", "Transaction Detail", "Money In", "Money Out", "Transaction ID"],
        ["Send to John Doe"],
        [datetime(2025, 12, 29, 18, 19), "Transfer", None, -5000, "tx1"],
        [datetime(2025, 12, 30, 8, 0), "Received from Jane Smith", 10000, None, "tx2"],
    )
    result = parse_file(data, "palmpay.xlsx", "palmpay")
    assert result.ok
    assert [t.reference for t in result.transactions] == ["tx2", "tx1"]
    inflow, outflow = result.transactions
    assert inflow.amount == 1_000_000
    assert inflow.meta.counterparty_name == "Jane Smith"
    assert outflow.amount == -500_000
    assert outflow.description == "Send to John Doe Transfer"
    assert (outflow.date.hour, outflow.date.minute) == (18, 19)


def test_kuda_workbook_dates_match_csv_ids():
    data = _workbook_bytes(
        ["Date/Time", None, "Money In", None, "Money out", None, "Category", None, "To / From", None, "Description", None, "Balance"],
        [datetime(2023, 1, 22, 12, 46, 35), None, 5000, None, None, None, "inward transfer", None, "John Doe/0123/GTBank", None, "Gift", None, 10000],
    )
    result = parse_file(data, "kuda.xlsx", "kuda")
    assert result.ok
    [tx] = result.transactions
    assert tx.reference == "220123-JOHNDOE0-GIFT"
    assert tx.amount == 500_000

    from_csv = parse_file(KUDA_CSV.encode("utf-8"), "kuda.csv", "kuda").transactions[1]
    assert from_csv.reference == tx.reference
    assert from_csv.id == tx.id


def test_file_level_failures_become_error_results():
    calls, on_progress = _recorder()
    empty = parse_file(b"", "statement.csv", "gtb", on_progress=on_progress)
    assert empty.error == "File is empty: statement.csv"
    assert empty.transactions == []
    assert calls == [(5, "Reading file...")]

    assert parse_file(b"x", "s.csv", "xyz").error == "Unsupported bank: xyz"
    assert "xls" in parse_file(b"x", "s.xls", "gtb").error
    assert parse_file(b"%PDF-1.4", "s.pdf", "kuda").error == (
        "Kuda statements are read from spreadsheet or CSV exports, not PDF"
    )


def test_statement_without_entries_is_not_an_error():
    result = parse_file(b"Opening Balance 100.00\n", "statement.txt", "gtb")
    assert result.ok
    assert result.transactions == []
    assert result.stats.total_rows == 0


def _failing_parser() -> BankParser:
    def explode(_m: re.Match[str]):
        raise RuntimeError("boom")

    return BankParser(
        BankSpec(
            bank=BankType.GTB,
            display_name="Test",
            id_prefix="test",
            min_columns=3,
            columns=ColumnMap(date=0, description=1, amount=2),
            date_format=DateFormat.DD_MM_YYYY_SLASH,
            amount_mode=AmountMode.SIGNED,
            counterparty_rules=(CounterpartyRule("explode", re.compile("EXPLODE"), explode),),
        )
    )


def test_parse_rows_collects_errors_and_caps_them(monkeypatch):
    monkeypatch.setattr(api, "MAX_ERRORS_STORED", 2)
    rows = [
        ["01/02/2025", "EXPLODE", "-1.00"],
        ["01/02/2025", "fine", "-1.00"],
        ["01/02/2025", "EXPLODE", "-1.00"],
        ["header", "row", "x"],
        ["01/02/2025", "EXPLODE", "-1.00"],
    ]
    transactions, errors, stats = api.parse_rows(_failing_parser(), rows)
    assert len(transactions) == 1
    assert [e.row_index for e in errors] == [0, 2]
    assert (stats.total_rows, stats.successful, stats.failed, stats.skipped) == (5, 1, 3, 1)
