"""Ledger aggregations: balances, period totals and per-category views.

All functions are pure folds over already-normalized
:class:`~financy.models.Transaction` sequences. They do not re-validate
their inputs and never read the clock; anything scoped to "the current
month" takes the period key as an argument.

Conventions
-----------
- ``total_balance`` is all-time and never period-scoped; period-scoped
  figures come from ``period_totals``.
- Category-keyed views resolve ``category_id`` against the supplied
  categories. Missing and dangling references both land in the
  uncategorized bucket; no transaction is ever dropped.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .errors import InvalidFilterSpec
from .models import (
    Categories,
    Category,
    CategoryBreakdownEntry,
    CategoryStats,
    DashboardSummary,
    MostUsedCategory,
    PeriodTotals,
    Transaction,
    Transactions,
    TransactionType,
)
from .periods import parse_period_key, period_key

# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


def total_balance(transactions: Iterable[Transaction]) -> int:
    """Sum of income minus sum of expenses over the entire history."""

    return sum(t.signed_minor_units for t in transactions)


def _fold_totals(transactions: Iterable[Transaction]) -> PeriodTotals:
    income = 0
    expense = 0
    for t in transactions:
        if t.type is TransactionType.INCOME:
            income += t.amount_minor_units
        else:
            expense += t.amount_minor_units
    return PeriodTotals(income=income, expense=expense)


def period_totals(transactions: Iterable[Transaction], period: str) -> PeriodTotals:
    """Income and expense sums for transactions dated within ``period``."""

    parse_period_key(period)
    return _fold_totals(t for t in transactions if period_key(t.date) == period)


def overall_totals(transactions: Iterable[Transaction]) -> PeriodTotals:
    """Income and expense sums over the whole history."""

    return _fold_totals(transactions)


# ---------------------------------------------------------------------------
# Category views
# ---------------------------------------------------------------------------


def _index_categories(categories: Categories) -> dict[str, Category]:
    # First definition wins if a caller passes duplicate ids.
    by_id: dict[str, Category] = {}
    for c in categories:
        by_id.setdefault(c.id, c)
    return by_id


def category_breakdown(
    transactions: Transactions,
    categories: Categories,
    *,
    type_filter: TransactionType | None = TransactionType.EXPENSE,
    period: str | None = None,
    limit: int | None = None,
) -> list[CategoryBreakdownEntry]:
    """Group transactions by category, largest total first.

    Parameters
    ----------
    type_filter:
        Only transactions of this type are grouped (default: expenses).
        ``None`` groups both types together.
    period:
        Optional ``"YYYY-MM"`` key restricting the input to one month.
    limit:
        Keep at most this many entries. ``None`` keeps all.

    Returns
    -------
    list[CategoryBreakdownEntry]
        Sorted by ``total_minor_units`` descending; equal totals keep the
        order in which their bucket first appeared in ``transactions``.
        The uncategorized bucket has ``category=None``.
    """

    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 0):
        raise InvalidFilterSpec(f"limit must be a non-negative integer: {limit!r}")
    if period is not None:
        parse_period_key(period)

    by_id = _index_categories(categories)
    # bucket key -> [category, count, total]; dict keeps first-occurrence order
    buckets: dict[str | None, list] = {}
    for t in transactions:
        if type_filter is not None and t.type is not type_filter:
            continue
        if period is not None and period_key(t.date) != period:
            continue
        cat = by_id.get(t.category_id) if t.category_id is not None else None
        key = cat.id if cat is not None else None
        bucket = buckets.get(key)
        if bucket is None:
            buckets[key] = [cat, 1, t.amount_minor_units]
        else:
            bucket[1] += 1
            bucket[2] += t.amount_minor_units

    entries = [
        CategoryBreakdownEntry(category=cat, count=count, total_minor_units=total)
        for cat, count, total in buckets.values()
    ]
    # sorted() is stable, so ties keep first-occurrence order.
    entries = sorted(entries, key=lambda e: -e.total_minor_units)
    return entries if limit is None else entries[:limit]


def category_usage_counts(transactions: Transactions, categories: Categories) -> dict[str, int]:
    """Transaction count per existing category, in ``categories`` order.

    Categories without transactions are present with a count of zero;
    uncategorized and dangling references are not counted.
    """

    counts = {c.id: 0 for c in categories}
    for t in transactions:
        if t.category_id is not None and t.category_id in counts:
            counts[t.category_id] += 1
    return counts


def _creation_order(categories: Categories) -> list[Category]:
    # Earliest created first; categories without a timestamp follow, in the
    # order they were supplied.
    indexed = list(enumerate(categories))
    indexed.sort(
        key=lambda p: (
            p[1].created_at is None,
            p[1].created_at.timestamp() if p[1].created_at is not None else 0.0,
            p[0],
        )
    )
    return [c for _, c in indexed]


def most_used_category(
    transactions: Transactions, categories: Categories
) -> MostUsedCategory | None:
    """Category with the most transactions over the entire set.

    Ties go to the earliest-created category. Returns ``None`` when no
    category has at least one transaction.
    """

    counts = category_usage_counts(transactions, categories)
    best: Category | None = None
    best_count = 0
    for cat in _creation_order(categories):
        n = counts.get(cat.id, 0)
        if n > best_count:
            best, best_count = cat, n
    if best is None:
        return None
    return MostUsedCategory(category=best, count=best_count)


def category_stats(transactions: Transactions, categories: Categories) -> CategoryStats:
    """Counts shown above the category list (totals plus most used)."""

    return CategoryStats(
        total_categories=len(categories),
        total_transactions=len(transactions),
        counts=category_usage_counts(transactions, categories),
        most_used=most_used_category(transactions, categories),
    )


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


def recent_transactions(transactions: Transactions, limit: int = 5) -> list[Transaction]:
    """Newest transactions first.

    Ordered by date descending, then ``created_at`` descending (rows without
    a timestamp last), then ``id`` ascending.
    """

    if limit < 0:
        raise InvalidFilterSpec(f"limit must be a non-negative integer: {limit!r}")
    ordered = sorted(transactions, key=lambda t: t.id)
    ordered.sort(key=_created_at_key, reverse=True)
    ordered.sort(key=lambda t: t.date, reverse=True)
    return ordered[:limit]


def _created_at_key(t: Transaction) -> tuple[int, float]:
    created: datetime | None = t.created_at
    if created is None:
        return (0, 0.0)
    return (1, created.timestamp())


def dashboard_summary(
    transactions: Transactions,
    categories: Categories,
    *,
    current_period: str,
    top_limit: int = 5,
    recent_limit: int = 5,
) -> DashboardSummary:
    """Assemble the dashboard view for ``current_period`` (supplied by the caller)."""

    return DashboardSummary(
        period=current_period,
        balance=total_balance(transactions),
        period_totals=period_totals(transactions, current_period),
        top_categories=tuple(
            category_breakdown(
                transactions,
                categories,
                type_filter=TransactionType.EXPENSE,
                period=current_period,
                limit=top_limit,
            )
        ),
        recent=tuple(recent_transactions(transactions, recent_limit)),
    )


__all__ = [
    "total_balance",
    "period_totals",
    "overall_totals",
    "category_breakdown",
    "category_usage_counts",
    "most_used_category",
    "category_stats",
    "recent_transactions",
    "dashboard_summary",
]
