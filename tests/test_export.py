# ruff: noqa: E501
from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from wakaru.export import CSV_HEADERS, TransactionRecord, dump_json, load_json, transactions_to_csv
from wakaru.parsers import get_parser

gtb = get_parser("gtb")


def _transactions():
    return [
        gtb.parse_transaction(
            ["16-Nov-2025", "16-Nov-2025", "REF2", "", "1,000.00", "101,000.00", "NIP TRANSFER TO OPAY - JOHN DOE"]
        ),
        gtb.parse_transaction(
            ["15-Nov-2025", "15-Nov-2025", "REF1", "250.50", "", "100,000.00", "SMS ALERT CHARGES"]
        ),
    ]


def test_json_uses_camel_case_and_loads_back():
    txs = _transactions()
    payload = dump_json(txs)
    records = json.loads(payload)
    assert records[0]["bankSource"] == "gtb"
    assert records[0]["meta"]["counterpartyBank"] == "OPay"
    assert records[0]["meta"]["balanceAfter"] == 10_100_000
    assert records[0]["date"] == "2025-11-16T00:00:00+01:00"
    assert load_json(payload) == txs


def test_load_json_rejects_inconsistent_records():
    record = json.loads(dump_json(_transactions()[:1]))[0]
    record["category"] = "outflow"
    with pytest.raises(ValidationError):
        load_json(json.dumps([record]))

    record = json.loads(dump_json(_transactions()[:1]))[0]
    record["description"] = "  "
    with pytest.raises(ValidationError):
        load_json(json.dumps([record]))

    record = json.loads(dump_json(_transactions()[:1]))[0]
    record["unexpected"] = 1
    with pytest.raises(ValidationError):
        load_json(json.dumps([record]))


def test_naive_dates_are_rejected():
    record = json.loads(dump_json(_transactions()[:1]))[0]
    record["date"] = "2025-11-16T00:00:00"
    with pytest.raises(ValidationError):
        TransactionRecord.model_validate(record)


def test_csv_is_oldest_first_with_naira_amounts():
    lines = transactions_to_csv(_transactions()).splitlines()
    assert lines[0] == ",".join(CSV_HEADERS)
    first = lines[1].split(",")
    assert first[1] == "2025-11-15T00:00:00+01:00"
    assert first[2:] == ["SMS ALERT CHARGES", "250.50", "outflow", "gtb"]
    assert lines[2].split(",")[3:] == ["1000.00", "inflow", "gtb"]
    assert len(lines) == 3
