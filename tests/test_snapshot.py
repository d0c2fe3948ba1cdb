# ruff: noqa: E501
from __future__ import annotations

import json
from pathlib import Path

import pytest

from financy.errors import InvalidAmount, InvalidDate, InvalidRecord, UnknownTransactionType
from financy.snapshot import parse_snapshot, read_snapshot_file

DOC = {
    "categories": [
        {"id": "rent", "title": "Aluguel", "icon": "home", "color": "blue"},
        {"id": "transport", "title": "Transporte", "icon": "car", "createdAt": "2026-01-02T10:00:00Z"},
    ],
    "transactions": [
        {"id": "t1", "description": "Salário", "date": "2026-02-01", "type": "entrada", "amount": "6500.00"},
        {"id": "t2", "description": "Aluguel", "date": "2026-02-05T00:00:00.000Z", "type": "EXPENSE", "amountCents": 180000, "categoryId": "rent"},
        {"id": "t3", "description": "Ônibus", "date": "2026-02-08", "type": "saida", "amount": 45, "category_id": "transport"},
    ],
}


def test_parse_snapshot_mixed_schemas():
    snap = parse_snapshot(DOC)
    assert [c.id for c in snap.categories] == ["rent", "transport"]
    assert [t.amount_minor_units for t in snap.transactions] == [650000, 180000, 4500]
    assert snap.transactions[1].category_id == "rent"
    assert snap.category_ids() == {"rent", "transport"}
    assert snap.rejected == ()


def test_parse_snapshot_rejects_bad_documents():
    with pytest.raises(ValueError, match="invalid snapshot document"):
        parse_snapshot([])
    with pytest.raises(ValueError, match="invalid snapshot document"):
        parse_snapshot({"transactions": [], "users": []})
    dup = {"transactions": [DOC["transactions"][0], DOC["transactions"][0]]}
    with pytest.raises(ValueError, match="duplicate transaction id"):
        parse_snapshot(dup)


def test_parse_snapshot_error_policies():
    negative = {"id": "t4", "description": "x", "date": "2026-02-09", "type": "saida", "amount": "-1"}
    doc = {"transactions": [*DOC["transactions"], negative]}
    with pytest.raises(InvalidAmount):
        parse_snapshot(doc)
    snap = parse_snapshot(doc, on_error="skip")
    assert len(snap.transactions) == 3
    assert [r.record_id for r in snap.rejected] == ["t4"]


def test_zero_amount_policy_applies_to_files():
    doc = {"transactions": [{**DOC["transactions"][0], "amount": "0"}]}
    assert parse_snapshot(doc).transactions[0].amount_minor_units == 0
    with pytest.raises(InvalidAmount):
        parse_snapshot(doc, allow_zero=False)


def test_read_snapshot_file(tmp_path: Path):
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps(DOC), encoding="utf-8")
    snap = read_snapshot_file(path)
    assert len(snap.transactions) == 3
    with pytest.raises(FileNotFoundError):
        read_snapshot_file(tmp_path / "missing.json")


def test_badly_typed_rows_follow_the_error_policy():
    numeric_type = {"id": "t4", "description": "x", "date": "2026-02-09", "type": 1, "amount": "1"}
    numeric_date = {"id": "t5", "description": "y", "date": 20260209, "type": "saida", "amount": "1"}
    doc = {
        "categories": [*DOC["categories"], {"id": "c9", "title": 7}],
        "transactions": [*DOC["transactions"], numeric_type, numeric_date],
    }
    with pytest.raises(InvalidRecord) as excinfo:
        parse_snapshot(doc)
    assert excinfo.value.record_id == "c9"
    with pytest.raises(UnknownTransactionType) as excinfo:
        parse_snapshot({"transactions": [numeric_type]})
    assert excinfo.value.record_id == "t4"
    with pytest.raises(InvalidDate):
        parse_snapshot({"transactions": [numeric_date]})

    snap = parse_snapshot(doc, on_error="skip")
    assert [c.id for c in snap.categories] == ["rent", "transport"]
    assert [t.id for t in snap.transactions] == ["t1", "t2", "t3"]
    assert [(r.record_id, r.error) for r in snap.rejected] == [
        ("c9", "InvalidRecord"),
        ("t4", "UnknownTransactionType"),
        ("t5", "InvalidDate"),
    ]


def test_rows_without_an_id_are_rejected_per_record():
    doc = {"transactions": [*DOC["transactions"], {"description": "sem id", "type": "saida"}]}
    snap = parse_snapshot(doc, on_error="skip")
    assert len(snap.transactions) == 3
    assert [(r.record_id, r.error) for r in snap.rejected] == [(None, "InvalidRecord")]
