# ruff: noqa: E501
from __future__ import annotations

import logging
import re

from wakaru import parse_file
from wakaru.logging_setup import get_logger, log_event, resolve_level
from wakaru.models import BankType
from wakaru.normalize import DateFormat
from wakaru.parsers import get_parser
from wakaru.parsers.base import AmountMode, BankParser, BankSpec, ColumnMap
from wakaru.rules import CounterpartyRule


def _messages(caplog, level: int) -> list[str]:
    return [r.getMessage() for r in caplog.records if r.levelno == level]


def test_resolve_level(monkeypatch):
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Error ") == logging.ERROR
    assert resolve_level("15") == 15
    assert resolve_level(logging.INFO) == logging.INFO
    assert resolve_level("chatty") == logging.WARNING
    assert resolve_level(None) == logging.WARNING
    monkeypatch.setenv("WAKARU_LOG_LEVEL", "info")
    assert resolve_level(None) == logging.INFO


def test_log_event_writes_key_value_fields(caplog):
    caplog.set_level(logging.DEBUG, logger="wakaru")
    log_event(get_logger("wakaru.test"), logging.INFO, "stage:done", rows=3, bank="GTB")
    assert _messages(caplog, logging.INFO) == ["stage:done rows=3 bank=GTB"]


def test_log_event_respects_level(caplog):
    caplog.set_level(logging.WARNING, logger="wakaru")
    log_event(get_logger("wakaru.test"), logging.DEBUG, "stage:noise", n=1)
    assert caplog.records == []


def test_skipped_rows_log_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="wakaru")
    parser = get_parser("access")
    assert parser.parse_transaction(["Invalid", "01-JAN-25", "Test", "-", "1,000.00", "1.00"], 4) is None
    # a blank date cell is a separator, not a malformed row
    assert parser.parse_transaction(["", "", "Test", "-", "1,000.00", "1.00"], 5) is None
    assert _messages(caplog, logging.DEBUG) == [
        "parse_row:skipped bank=Access row_index=4 reason=no_date"
    ]


def test_failed_rows_log_at_error(caplog):
    def explode(_m: re.Match[str]):
        raise RuntimeError("boom")

    parser = BankParser(
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
    caplog.set_level(logging.DEBUG, logger="wakaru")
    result = parser.parse_transaction_safe(["01/02/2025", "EXPLODE", "-1.00"], 7)
    assert result.error is not None
    assert _messages(caplog, logging.ERROR) == [
        "parse_row:failed bank=Test row_index=7 error=boom"
    ]


def test_file_failure_logs_warning(caplog):
    caplog.set_level(logging.DEBUG, logger="wakaru")
    parse_file(b"", "statement.csv", "gtb")
    assert _messages(caplog, logging.WARNING) == [
        "parse_file:failed file=statement.csv bank=gtb error=File is empty: statement.csv"
    ]
