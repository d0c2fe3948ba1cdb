# ruff: noqa: I001
"""CLI for the ``financy`` package.

A Typer console over the ledger core. Each command reads a snapshot either
from a JSON file (``--json-path``) or from the database (``--database-url``
or ``DATABASE_URL``), runs the pure aggregation/pipeline functions and
renders the result with ``rich``. Environment variables are loaded from a
local ``.env`` with ``python-dotenv`` before any command runs.

Environment
-----------
- ``DATABASE_URL``: default database when ``--json-path`` is not given.
- ``FINANCY_LOG_LEVEL``: logging level (default ``WARNING``).
- ``FINANCY_PAGE_SIZE``: default page size for ``transactions`` (10).
- ``FINANCY_ALLOW_ZERO_AMOUNT``: ``0``/``false`` rejects zero-value rows.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typer.models import OptionInfo

from .aggregate import category_breakdown, category_stats, dashboard_summary
from .errors import FinancyError
from .logging_setup import configure_logging, get_logger
from .models import Category, Snapshot, TransactionType
from .periods import format_period_label, period_key
from .pipeline import FilterSpec, TypeFilter, run_pipeline
from .presentation import (
    UNCATEGORIZED_LABEL,
    format_brl,
    format_date_br,
    format_signed_brl,
    resolve_color,
    resolve_icon,
    type_label,
)

_logger = get_logger("financy.cli")

_DEFAULT_PAGE_SIZE = 10


# ---- Small module-level helpers used by commands ------------------------------


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"0", "false", "no"}:
        return False
    if v in {"1", "true", "yes"}:
        return True
    return default


def _resolve_page_size(option: int | None) -> int:
    """Explicit option, then ``FINANCY_PAGE_SIZE``, then the default of 10."""

    if option is not None:
        return option
    env_val = os.getenv("FINANCY_PAGE_SIZE")
    try:
        size = int(env_val) if env_val else None
    except ValueError:
        size = None
    if size is not None and size > 0:
        return size
    return _DEFAULT_PAGE_SIZE


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _load_snapshot(
    *,
    json_path: Path | None,
    database_url: str | None,
    user_id: str | None,
    skip_invalid: bool,
) -> Snapshot:
    on_error = "skip" if skip_invalid else "raise"
    allow_zero = _env_flag("FINANCY_ALLOW_ZERO_AMOUNT", True)
    try:
        if json_path is not None:
            from .snapshot import read_snapshot_file

            return read_snapshot_file(json_path, on_error=on_error, allow_zero=allow_zero)

        from db.client import session_scope
        from .store import load_snapshot

        with session_scope(database_url=database_url) as session:
            return load_snapshot(
                session, user_id=user_id, on_error=on_error, allow_zero=allow_zero
            )
    except FileNotFoundError:
        raise _fail(f"File not found: {json_path}") from None
    except FinancyError as e:
        raise _fail(f"invalid record: {e}") from e
    except Exception as e:
        _logger.error("cli:load_failed error=%s", e.__class__.__name__)
        raise _fail(f"failed to load snapshot: {e}") from e


def _category_label(category: Category | None) -> str:
    if category is None:
        return UNCATEGORIZED_LABEL
    icon, color = resolve_icon(category.icon), resolve_color(category.color)
    return f"{escape(category.title)} ({icon}, {color})"


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Summaries, category breakdowns and transaction listings for a Financy ledger.",
)

console = Console()

JSON_PATH_OPTION: OptionInfo = typer.Option(
    "--json-path",
    help="Read a JSON snapshot instead of the database.",
    dir_okay=False,
    file_okay=True,
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    "--database-url", help="Override DATABASE_URL (falls back to env var)."
)
USER_ID_OPTION: OptionInfo = typer.Option(
    "--user-id", help="Restrict database reads to one user."
)
SKIP_INVALID_OPTION: OptionInfo = typer.Option(
    "--skip-invalid", help="Skip (and log) records that fail normalization."
)


@app.command("summary")
def summary_cmd(
    json_path: Annotated[Path | None, JSON_PATH_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
    user_id: Annotated[str | None, USER_ID_OPTION] = None,
    skip_invalid: Annotated[bool, SKIP_INVALID_OPTION] = False,
    period: Annotated[
        str | None, typer.Option(help="Period as YYYY-MM (defaults to the current month).")
    ] = None,
    top: Annotated[int, typer.Option(help="How many categories to list.")] = 5,
) -> None:
    """Dashboard: all-time balance, period totals, top expense categories."""

    snapshot = _load_snapshot(
        json_path=json_path, database_url=database_url, user_id=user_id, skip_invalid=skip_invalid
    )
    current = period or period_key(date.today())
    try:
        view = dashboard_summary(
            snapshot.transactions, snapshot.categories, current_period=current, top_limit=top
        )
        label = format_period_label(current)
    except FinancyError as e:
        raise _fail(str(e)) from e

    totals = view.period_totals
    console.print(f"[bold]Saldo total[/bold]: {format_brl(view.balance)}")
    console.print(f"[bold]Receitas do mês ({label})[/bold]: {format_brl(totals.income)}")
    console.print(f"[bold]Despesas do mês ({label})[/bold]: {format_brl(totals.expense)}")

    table = Table(title="Categorias")
    table.add_column("Categoria")
    table.add_column("Itens", justify="right")
    table.add_column("Total", justify="right")
    for entry in view.top_categories:
        table.add_row(
            _category_label(entry.category), str(entry.count), format_brl(entry.total_minor_units)
        )
    console.print(table)

    recent = Table(title="Transações recentes")
    recent.add_column("Data")
    recent.add_column("Descrição")
    recent.add_column("Valor", justify="right")
    for tx in view.recent:
        recent.add_row(
            format_date_br(tx.date, short=True), escape(tx.description), format_signed_brl(tx)
        )
    console.print(recent)


@app.command("transactions")
def transactions_cmd(
    json_path: Annotated[Path | None, JSON_PATH_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
    user_id: Annotated[str | None, USER_ID_OPTION] = None,
    skip_invalid: Annotated[bool, SKIP_INVALID_OPTION] = False,
    search: Annotated[str, typer.Option(help="Case-insensitive description search.")] = "",
    type_: Annotated[str, typer.Option("--type", help="ALL, INCOME or EXPENSE.")] = "ALL",
    category: Annotated[str, typer.Option(help="ALL or a category id.")] = "ALL",
    period: Annotated[str | None, typer.Option(help="Restrict to a YYYY-MM period.")] = None,
    sort: Annotated[str, typer.Option(help="date_desc, date_asc, description_asc, ...")] = (
        "date_desc"
    ),
    page: Annotated[int, typer.Option(help="1-indexed page (clamped into range).")] = 1,
    page_size: Annotated[int | None, typer.Option(help="Items per page.")] = None,
) -> None:
    """Filtered, sorted and paginated transaction listing."""

    snapshot = _load_snapshot(
        json_path=json_path, database_url=database_url, user_id=user_id, skip_invalid=skip_invalid
    )
    try:
        spec = FilterSpec(search=search, type=type_, category=category, period=period, sort=sort)
        result = run_pipeline(
            snapshot.transactions,
            snapshot.categories,
            spec,
            page=page,
            page_size=_resolve_page_size(page_size),
        )
    except FinancyError as e:
        raise _fail(str(e)) from e

    by_id = {c.id: c for c in snapshot.categories}
    table = Table(title=f"Transações ({result.total_items})")
    table.add_column("Descrição")
    table.add_column("Data")
    table.add_column("Categoria")
    table.add_column("Tipo")
    table.add_column("Valor", justify="right")
    for tx in result.items:
        cat = by_id.get(tx.category_id) if tx.category_id else None
        table.add_row(
            escape(tx.description),
            format_date_br(tx.date),
            escape(cat.title) if cat else UNCATEGORIZED_LABEL,
            type_label(tx.type),
            format_signed_brl(tx),
        )
    console.print(table)
    tokens = " ".join(f"<{t}>" if t == result.page else str(t) for t in result.tokens)
    console.print(f"Página {result.page} de {result.total_pages}: {tokens}")


@app.command("categories")
def categories_cmd(
    json_path: Annotated[Path | None, JSON_PATH_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
    user_id: Annotated[str | None, USER_ID_OPTION] = None,
    skip_invalid: Annotated[bool, SKIP_INVALID_OPTION] = False,
    period: Annotated[str | None, typer.Option(help="Restrict the breakdown to YYYY-MM.")] = None,
    type_: Annotated[
        str, typer.Option("--type", help="EXPENSE, INCOME or ALL for the breakdown.")
    ] = "EXPENSE",
) -> None:
    """Category statistics and the per-category breakdown."""

    snapshot = _load_snapshot(
        json_path=json_path, database_url=database_url, user_id=user_id, skip_invalid=skip_invalid
    )
    try:
        spec_type = FilterSpec(type=type_).type
        type_filter = (
            None if spec_type is TypeFilter.ALL else TransactionType(spec_type.value)
        )
        stats = category_stats(snapshot.transactions, snapshot.categories)
        entries = category_breakdown(
            snapshot.transactions, snapshot.categories, type_filter=type_filter, period=period
        )
    except FinancyError as e:
        raise _fail(str(e)) from e

    console.print(f"[bold]Categorias[/bold]: {stats.total_categories}")
    console.print(f"[bold]Transações[/bold]: {stats.total_transactions}")
    if stats.most_used is not None:
        console.print(
            f"[bold]Mais usada[/bold]: {escape(stats.most_used.category.title)} "
            f"({stats.most_used.count})"
        )

    table = Table(title="Resumo por categoria")
    table.add_column("Categoria")
    table.add_column("Itens", justify="right")
    table.add_column("Total", justify="right")
    for entry in entries:
        table.add_row(
            _category_label(entry.category), str(entry.count), format_brl(entry.total_minor_units)
        )
    console.print(table)


@app.callback()
def _root() -> None:
    """Load ``.env`` (without overriding the environment) and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    app()
