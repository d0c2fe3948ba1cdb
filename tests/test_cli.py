# ruff: noqa: E501
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from financy.cli import app

from tests.helpers.db import bootstrap_sqlite_db, seed_categories, seed_raw_transactions

runner = CliRunner()

LEDGER = {
    "categories": [
        {"id": "rent", "title": "Aluguel", "icon": "home", "color": "blue"},
        {"id": "transport", "title": "Transporte", "icon": "car", "color": "nope"},
    ],
    "transactions": [
        {"id": "t1", "description": "Salário", "date": "2026-02-01", "type": "INCOME",
         "amountCents": 650000},
        {"id": "t2", "description": "Aluguel", "date": "2026-02-05", "type": "saida",
         "amount": "1800.00", "category_id": "rent"},
        {"id": "t3", "description": "Ônibus", "date": "2026-02-08T00:00:00.000Z",
         "type": "EXPENSE", "amountCents": 4500, "categoryId": "transport"},
    ],
}  # fmt: skip


@pytest.fixture()
def ledger_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    # Keep the callback's .env lookup away from the developer's checkout.
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps(LEDGER), encoding="utf-8")
    return path


def test_summary_from_json(ledger_file: Path):
    result = runner.invoke(app, ["summary", "--json-path", str(ledger_file), "--period", "2026-02"])
    assert result.exit_code == 0, result.output
    out = result.output
    assert "Saldo total: R$ 4.655,00" in out
    assert "Receitas do mês (Fevereiro / 2026): R$ 6.500,00" in out
    assert "Despesas do mês (Fevereiro / 2026): R$ 1.845,00" in out
    assert "Aluguel (home, blue)" in out
    # Unknown color tags fall back to the default.
    assert "Transporte (car, green)" in out
    assert out.index("Aluguel (home") < out.index("Transporte (car")


def test_transactions_paginates_and_sorts(ledger_file: Path):
    result = runner.invoke(
        app,
        [
            "transactions",
            "--json-path",
            str(ledger_file),
            "--sort",
            "amount_asc",
            "--page-size",
            "2",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Transações (3)" in result.output
    assert "Página 1 de 2: <1> 2" in result.output
    assert result.output.index("Ônibus") < result.output.index("Aluguel")
    assert "Salário" not in result.output


def test_transactions_page_size_from_env(ledger_file: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("FINANCY_PAGE_SIZE", "1")
    result = runner.invoke(
        app, ["transactions", "--json-path", str(ledger_file), "--type", "saida", "--page", "9"]
    )
    assert result.exit_code == 0, result.output
    assert "Página 2 de 2: 1 <2>" in result.output


def test_categories_command(ledger_file: Path):
    result = runner.invoke(app, ["categories", "--json-path", str(ledger_file)])
    assert result.exit_code == 0, result.output
    assert "Categorias: 2" in result.output
    assert "Transações: 3" in result.output
    assert "Mais usada: Aluguel (1)" in result.output
    assert "R$ 1.800,00" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["transactions", "--sort", "newest"],
        ["transactions", "--period", "2026-2"],
        ["categories", "--type", "transfer"],
        ["summary", "--period", "february"],
    ],
)
def test_invalid_options_exit_with_error(ledger_file: Path, args: list[str]):
    result = runner.invoke(app, [*args, "--json-path", str(ledger_file)])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_missing_file_and_bad_records(ledger_file: Path, tmp_path: Path):
    result = runner.invoke(app, ["summary", "--json-path", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "File not found" in result.output

    pix = {"id": "t4", "description": "x", "date": "2026-02-09", "type": "pix", "amount": "1"}
    broken = {**LEDGER, "transactions": [*LEDGER["transactions"], pix]}
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(broken), encoding="utf-8")

    result = runner.invoke(app, ["transactions", "--json-path", str(path)])
    assert result.exit_code == 1
    assert "invalid record" in result.output

    result = runner.invoke(app, ["transactions", "--json-path", str(path), "--skip-invalid"])
    assert result.exit_code == 0, result.output
    assert "Transações (3)" in result.output


def test_summary_from_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    url = bootstrap_sqlite_db(tmp_path / "ledger.db")
    seed_categories(database_url=url, rows=[{"id": "rent", "user_id": "u1", "title": "Aluguel"}])
    seed_raw_transactions(
        database_url=url,
        rows=[
            {"id": "t1", "user_id": "u1", "description": "Salário", "type": "entrada",
             "date": "2026-02-01", "amount": "6500.00"},
            {"id": "t2", "user_id": "u1", "description": "Aluguel", "type": "EXPENSE",
             "date": "2026-02-05", "amount_cents": 180000, "category_id": "rent"},
            {"id": "t3", "user_id": "u2", "description": "Outro", "type": "EXPENSE",
             "date": "2026-02-06", "amount_cents": 999},
        ],
    )  # fmt: skip
    monkeypatch.setenv("DATABASE_URL", url)
    result = runner.invoke(app, ["summary", "--user-id", "u1", "--period", "2026-02"])
    assert result.exit_code == 0, result.output
    assert "Saldo total: R$ 4.700,00" in result.output
    assert "Aluguel (wallet, green)" in result.output


def test_missing_database_url_is_reported(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["summary"])
    assert result.exit_code == 1
    assert "DATABASE_URL is not set" in result.output
