"""Database adapter: load per-user snapshots and write transactions back.

This is the only ``financy`` module that talks to the database. It turns ORM
rows into the raw mappings :mod:`financy.normalize` understands, so rows
from either schema iteration (cents + ``INCOME``/``EXPENSE`` or reais +
``entrada``/``saida``) produce identical core records. Callers own the
session and its transaction scope.
"""

from __future__ import annotations

from typing import Any

from db.models.finance import CategoryRecord, TransactionRecord
from sqlalchemy import select
from sqlalchemy.orm import Session

from .logging_setup import get_logger
from .models import Category, Snapshot, Transaction, TypeVocabulary
from .money import denormalize_type, to_major_units
from .normalize import ErrorPolicy, normalize_categories, normalize_transactions

_logger = get_logger("financy.store")


def _category_row(row: CategoryRecord) -> dict[str, Any]:
    return {
        "id": row.id,
        "title": row.title,
        "description": row.description,
        "icon": row.icon,
        "color": row.color,
        "created_at": row.created_at,
    }


def _transaction_row(row: TransactionRecord) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "id": row.id,
        "description": row.description,
        "date": row.date,
        "type": row.type,
        "category_id": row.category_id,
        "created_at": row.created_at,
    }
    # Integer cents win when both columns are filled.
    if row.amount_cents is not None:
        raw["amount_cents"] = row.amount_cents
    else:
        raw["amount"] = row.amount
    return raw


def load_snapshot(
    session: Session,
    *,
    user_id: str | None = None,
    on_error: ErrorPolicy = "raise",
    allow_zero: bool = True,
) -> Snapshot:
    """Load categories and transactions (optionally for one user).

    Categories come back in creation order, which is the tie-break order used
    by :func:`financy.aggregate.most_used_category`. Transactions come back
    newest first, mirroring the store's default listing.
    """

    cat_stmt = select(CategoryRecord).order_by(CategoryRecord.created_at, CategoryRecord.id)
    tx_stmt = select(TransactionRecord).order_by(
        TransactionRecord.date.desc(), TransactionRecord.created_at.desc(), TransactionRecord.id
    )
    if user_id is not None:
        cat_stmt = cat_stmt.where(CategoryRecord.user_id == user_id)
        tx_stmt = tx_stmt.where(TransactionRecord.user_id == user_id)

    cat_rows = [_category_row(r) for r in session.execute(cat_stmt).scalars()]
    tx_rows = [_transaction_row(r) for r in session.execute(tx_stmt).scalars()]

    cats = normalize_categories(cat_rows, on_error=on_error)
    txs = normalize_transactions(tx_rows, on_error=on_error, allow_zero=allow_zero)
    _logger.info(
        "store:snapshot_loaded user_id=%s categories=%d transactions=%d rejected=%d",
        user_id,
        len(cats.items),
        len(txs.items),
        len(cats.rejected) + len(txs.rejected),
    )
    return Snapshot(
        categories=cats.items,
        transactions=txs.items,
        rejected=cats.rejected + txs.rejected,
    )


def add_category(session: Session, category: Category, *, user_id: str | None = None) -> None:
    """Insert ``category`` (flushes; commit at caller)."""

    row = CategoryRecord(
        id=category.id,
        user_id=user_id,
        title=category.title,
        description=category.description,
        icon=category.icon or "wallet",
        color=category.color or "green",
    )
    if category.created_at is not None:
        row.created_at = category.created_at
        row.updated_at = category.created_at
    session.add(row)
    session.flush()


def add_transaction(
    session: Session,
    tx: Transaction,
    *,
    user_id: str | None = None,
    vocabulary: TypeVocabulary = TypeVocabulary.CANONICAL,
) -> None:
    """Insert ``tx`` using the column conventions of ``vocabulary``.

    ``CANONICAL`` writes integer cents and ``INCOME``/``EXPENSE``; ``LEGACY``
    writes a decimal ``amount`` in reais and ``entrada``/``saida``, the way
    the older schema expects. Flushes; commit at caller.
    """

    legacy = TypeVocabulary(vocabulary) is TypeVocabulary.LEGACY
    row = TransactionRecord(
        id=tx.id,
        user_id=user_id,
        description=tx.description,
        date=tx.date.isoformat(),
        type=denormalize_type(tx.type, vocabulary),
        amount_cents=None if legacy else tx.amount_minor_units,
        amount=to_major_units(tx.amount_minor_units) if legacy else None,
        category_id=tx.category_id,
    )
    if tx.created_at is not None:
        row.created_at = tx.created_at
        row.updated_at = tx.created_at
    session.add(row)
    session.flush()
    _logger.debug(
        "store:transaction_added id=%s type=%s vocabulary=%s", tx.id, row.type, vocabulary
    )


__all__ = [
    "load_snapshot",
    "add_category",
    "add_transaction",
]
