"""JSON snapshot files: a user's categories and transactions in one document.

Layout::

    {
      "categories": [{"id": "...", "title": "...", "icon": "...", ...}],
      "transactions": [{"id": "...", "description": "...", "date": "...", ...}]
    }

Rows may use either store schema (see :mod:`financy.normalize`). The
top-level shape is validated with pydantic; field-level normalization is
left to the record normalizer so both paths report the same errors.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .logging_setup import get_logger
from .models import Snapshot
from .normalize import ErrorPolicy, normalize_categories, normalize_transactions

_logger = get_logger("financy.snapshot")


class CategoryRow(BaseModel):
    """A category row as exported from either store; extras are kept.

    Only the row's shape is checked here. Field values stay as written so
    a badly typed row is rejected by the normalizer under the caller's
    error policy instead of failing the whole document.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    title: Any = None
    icon: Any = None
    color: Any = None
    description: Any = None


class TransactionRow(BaseModel):
    """A transaction row as exported from either store; extras are kept.

    Amount/category/timestamp columns differ between schemas and travel as
    extras (``amountCents`` or ``amount``, ``categoryId`` or
    ``category_id``...). Field types are left to the normalizer, as for
    :class:`CategoryRow`.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    description: Any = None
    date: Any = None
    type: Any = None


class SnapshotFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    categories: list[CategoryRow] = []
    transactions: list[TransactionRow] = []

    @field_validator("transactions")
    @classmethod
    def _unique_transaction_ids(cls, v: list[TransactionRow]) -> list[TransactionRow]:
        seen: set[str] = set()
        for row in v:
            # Rows without an id are rejected per record by the normalizer.
            if row.id is None:
                continue
            key = str(row.id)
            if key in seen:
                raise ValueError(f"duplicate transaction id: {key!r}")
            seen.add(key)
        return v


def _rows(models: list[CategoryRow] | list[TransactionRow]) -> list[dict[str, Any]]:
    return [m.model_dump(exclude_none=True) for m in models]


def parse_snapshot(
    data: Any, *, on_error: ErrorPolicy = "raise", allow_zero: bool = True
) -> Snapshot:
    """Validate an already-decoded snapshot document and normalize its rows."""

    try:
        doc = SnapshotFile.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"invalid snapshot document: {e}") from e

    cats = normalize_categories(_rows(doc.categories), on_error=on_error)
    txs = normalize_transactions(_rows(doc.transactions), on_error=on_error, allow_zero=allow_zero)
    return Snapshot(
        categories=cats.items,
        transactions=txs.items,
        rejected=cats.rejected + txs.rejected,
    )


def read_snapshot_file(
    path: str | Path, *, on_error: ErrorPolicy = "raise", allow_zero: bool = True
) -> Snapshot:
    """Read and normalize a JSON snapshot file."""

    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    snapshot = parse_snapshot(data, on_error=on_error, allow_zero=allow_zero)
    _logger.info(
        "snapshot:loaded path=%s categories=%d transactions=%d rejected=%d",
        p,
        len(snapshot.categories),
        len(snapshot.transactions),
        len(snapshot.rejected),
    )
    return snapshot


__all__ = [
    "CategoryRow",
    "TransactionRow",
    "SnapshotFile",
    "parse_snapshot",
    "read_snapshot_file",
]
