"""Data models for the ``financy`` ledger core.

Input records (:class:`Transaction`, :class:`Category`) are frozen
dataclasses produced by :mod:`financy.normalize` from raw store rows. Every
derived view returned by the aggregator and the pipeline is likewise
immutable; callers get fresh objects on every call.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import NamedTuple

# ---------------------------------------------------------------------------
# Canonical enumerations
# ---------------------------------------------------------------------------


class TransactionType(StrEnum):
    """Canonical two-valued transaction kind, independent of store literals."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TypeVocabulary(StrEnum):
    """Literal vocabularies used by the store's schema iterations.

    - ``CANONICAL``: ``INCOME``/``EXPENSE`` (GraphQL enum, Prisma schema)
    - ``LEGACY``: ``entrada``/``saida`` (Supabase ``transactions.type``)
    """

    CANONICAL = "canonical"
    LEGACY = "legacy"


# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Category:
    """A user-defined category.

    ``icon`` and ``color`` are presentation tags carried through untouched;
    :mod:`financy.presentation` resolves them against the closed icon/color
    sets at render time.
    """

    id: str
    title: str
    icon: str | None = None
    color: str | None = None
    description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Transaction:
    """A normalized ledger entry.

    ``amount_minor_units`` is always a non-negative integer number of cents;
    the sign comes from ``type``. ``date`` has no time-of-day component.
    """

    id: str
    description: str
    date: date
    type: TransactionType
    amount_minor_units: int
    category_id: str | None = None
    created_at: datetime | None = None

    @property
    def signed_minor_units(self) -> int:
        if self.type is TransactionType.INCOME:
            return self.amount_minor_units
        return -self.amount_minor_units


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


class MonthRange(NamedTuple):
    """Half-open ``[start, end_exclusive)`` range covering one calendar month."""

    start: date
    end_exclusive: date


@dataclass(frozen=True, slots=True)
class PeriodTotals:
    income: int = 0
    expense: int = 0

    @property
    def balance(self) -> int:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class CategoryBreakdownEntry:
    """One bucket of a category breakdown.

    ``category`` is ``None`` for the synthetic uncategorized bucket, which
    collects transactions without a reference and those whose reference no
    longer resolves.
    """

    category: Category | None
    count: int
    total_minor_units: int

    @property
    def is_uncategorized(self) -> bool:
        return self.category is None


@dataclass(frozen=True, slots=True)
class MostUsedCategory:
    category: Category
    count: int


@dataclass(frozen=True, slots=True)
class CategoryStats:
    """Header figures of the categories screen."""

    total_categories: int
    total_transactions: int
    counts: dict[str, int]
    most_used: MostUsedCategory | None


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    """Everything the dashboard renders for one period.

    ``balance`` is all-time; ``period_totals`` and ``top_categories`` are
    scoped to ``period``.
    """

    period: str
    balance: int
    period_totals: PeriodTotals
    top_categories: tuple[CategoryBreakdownEntry, ...]
    recent: tuple[Transaction, ...]


# Marker emitted by ``build_page_tokens`` where pages are skipped.
ELLIPSIS = "..."

type PageToken = int | str
"""Either a 1-indexed page number or :data:`ELLIPSIS`."""


@dataclass(frozen=True, slots=True)
class Page:
    """A paginated slice plus the metadata pagers need."""

    items: tuple[Transaction, ...]
    page: int
    page_size: int
    total_pages: int
    total_items: int
    tokens: tuple[PageToken, ...] = field(default=())

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@dataclass(frozen=True, slots=True)
class RecordRejection:
    """A raw record that failed normalization under the ``skip`` policy."""

    record_id: str | None
    error: str
    kind: str


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Point-in-time view of one user's categories and transactions."""

    categories: tuple[Category, ...]
    transactions: tuple[Transaction, ...]
    rejected: tuple[RecordRejection, ...] = ()

    def category_ids(self) -> set[str]:
        return {c.id for c in self.categories}


type Transactions = Sequence[Transaction]
type Categories = Sequence[Category]


__all__ = [
    "TransactionType",
    "TypeVocabulary",
    "Category",
    "Transaction",
    "MonthRange",
    "PeriodTotals",
    "CategoryBreakdownEntry",
    "MostUsedCategory",
    "CategoryStats",
    "DashboardSummary",
    "ELLIPSIS",
    "PageToken",
    "Page",
    "Snapshot",
    "RecordRejection",
    "Transactions",
    "Categories",
]
