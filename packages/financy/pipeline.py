"""Filter/sort/paginate pipeline over transaction lists.

The pipeline is a straight transform, applied in this order:

1. search (case-insensitive substring on ``description``)
2. type filter
3. category filter
4. period filter
5. sort (total order; ties broken by ``id`` ascending)
6. pagination (1-indexed page clamped into range)

Raw filter values coming from a UI or CLI are validated by
:class:`FilterSpec`; unknown enum values raise
:class:`~financy.errors.InvalidFilterSpec` rather than falling back to a
default.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .errors import FinancyError, InvalidFilterSpec
from .logging_setup import get_logger
from .models import (
    ELLIPSIS,
    Categories,
    Page,
    PageToken,
    Transaction,
    Transactions,
    TransactionType,
)
from .money import normalize_type
from .periods import parse_period_key, period_key

_logger = get_logger("financy.pipeline")

ALL = "ALL"


class TypeFilter(StrEnum):
    ALL = "ALL"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class SortOrder(StrEnum):
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    DESCRIPTION_ASC = "description_asc"
    DESCRIPTION_DESC = "description_desc"
    AMOUNT_DESC = "amount_desc"
    AMOUNT_ASC = "amount_asc"


# sort order -> (primary key, reverse)
_SORT_KEYS: dict[SortOrder, tuple[Callable[[Transaction], Any], bool]] = {
    SortOrder.DATE_DESC: (lambda t: t.date, True),
    SortOrder.DATE_ASC: (lambda t: t.date, False),
    SortOrder.DESCRIPTION_ASC: (lambda t: t.description.casefold(), False),
    SortOrder.DESCRIPTION_DESC: (lambda t: t.description.casefold(), True),
    SortOrder.AMOUNT_DESC: (lambda t: t.amount_minor_units, True),
    SortOrder.AMOUNT_ASC: (lambda t: t.amount_minor_units, False),
}


def _coerce_type_filter(value: object) -> TypeFilter:
    if isinstance(value, TypeFilter):
        return value
    if isinstance(value, str) and value.strip().upper() == ALL:
        return TypeFilter.ALL
    try:
        return TypeFilter(normalize_type(value).value)
    except FinancyError as exc:
        raise InvalidFilterSpec(f"unknown type filter: {value!r}") from exc


def _coerce_sort(value: object) -> SortOrder:
    if isinstance(value, SortOrder):
        return value
    if isinstance(value, str):
        try:
            return SortOrder(value.strip().lower())
        except ValueError:
            pass
    raise InvalidFilterSpec(f"unknown sort order: {value!r}")


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Validated filter and sort settings.

    Attributes
    ----------
    search:
        Substring to look for in descriptions; blank means no filtering.
    type:
        :class:`TypeFilter` or a raw literal (``"ALL"``, ``"INCOME"``,
        ``"saida"``...).
    category:
        ``"ALL"`` or a category id.
    period:
        ``None`` or a ``"YYYY-MM"`` key.
    sort:
        :class:`SortOrder` or its string value.
    """

    search: str = ""
    type: TypeFilter | str = TypeFilter.ALL
    category: str = ALL
    period: str | None = None
    sort: SortOrder | str = SortOrder.DATE_DESC

    def __post_init__(self) -> None:
        if not isinstance(self.search, str):
            raise InvalidFilterSpec(f"search must be a string: {self.search!r}")
        object.__setattr__(self, "type", _coerce_type_filter(self.type))
        object.__setattr__(self, "sort", _coerce_sort(self.sort))

        if not isinstance(self.category, str) or not self.category.strip():
            raise InvalidFilterSpec(f"invalid category filter: {self.category!r}")
        category = self.category.strip()
        object.__setattr__(self, "category", ALL if category.upper() == ALL else category)

        if self.period is not None:
            try:
                parse_period_key(self.period)
            except FinancyError as exc:
                raise InvalidFilterSpec(f"invalid period filter: {self.period!r}") from exc
            object.__setattr__(self, "period", self.period.strip())


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def filter_by_search(transactions: Iterable[Transaction], term: str) -> list[Transaction]:
    needle = term.strip().casefold()
    if not needle:
        return list(transactions)
    return [t for t in transactions if needle in t.description.casefold()]


def filter_by_type(
    transactions: Iterable[Transaction], type_filter: TypeFilter
) -> list[Transaction]:
    if type_filter is TypeFilter.ALL:
        return list(transactions)
    wanted = TransactionType(type_filter.value)
    return [t for t in transactions if t.type is wanted]


def filter_by_category(
    transactions: Iterable[Transaction], category: str, categories: Categories
) -> list[Transaction]:
    """Exact match on ``category_id``; an id naming no category matches nothing."""

    if category == ALL:
        return list(transactions)
    if category not in {c.id for c in categories}:
        return []
    return [t for t in transactions if t.category_id == category]


def filter_by_period(transactions: Iterable[Transaction], period: str | None) -> list[Transaction]:
    if period is None:
        return list(transactions)
    return [t for t in transactions if period_key(t.date) == period]


def sort_transactions(
    transactions: Iterable[Transaction], order: SortOrder | str = SortOrder.DATE_DESC
) -> list[Transaction]:
    """Return a new list in ``order``; equal keys are ordered by ``id`` ascending."""

    key, reverse = _SORT_KEYS[_coerce_sort(order)]
    # Two stable passes: id ascending first, then the primary key.
    # list.sort keeps equal elements in place even with reverse=True.
    out = sorted(transactions, key=lambda t: t.id)
    out.sort(key=key, reverse=reverse)
    return out


def build_page_tokens(current_page: int, total_pages: int) -> list[PageToken]:
    """Compact pager tokens: first, ellipsis, current +/- 1, ellipsis, last.

    ``build_page_tokens(5, 10)`` -> ``[1, "...", 4, 5, 6, "...", 10]``.
    An ellipsis is emitted only where at least one page is skipped.
    """

    if total_pages <= 0:
        return []
    current = min(max(current_page, 1), total_pages)
    pages = sorted(
        {1, total_pages} | {p for p in (current - 1, current, current + 1) if 1 <= p <= total_pages}
    )
    tokens: list[PageToken] = []
    previous = 0
    for p in pages:
        if p - previous > 1:
            tokens.append(ELLIPSIS)
        tokens.append(p)
        previous = p
    return tokens


def paginate(items: Sequence[Transaction], page: int, page_size: int) -> Page:
    """Slice ``items`` into the requested page, clamping ``page`` into range.

    An empty input still has one (empty) page.
    """

    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise InvalidFilterSpec(f"page_size must be a positive integer: {page_size!r}")
    if isinstance(page, bool) or not isinstance(page, int):
        raise InvalidFilterSpec(f"page must be an integer: {page!r}")

    total_items = len(items)
    total_pages = max(1, math.ceil(total_items / page_size))
    effective = min(max(page, 1), total_pages)
    start = (effective - 1) * page_size
    end = min(start + page_size, total_items)
    return Page(
        items=tuple(items[start:end]),
        page=effective,
        page_size=page_size,
        total_pages=total_pages,
        total_items=total_items,
        tokens=tuple(build_page_tokens(effective, total_pages)),
    )


def run_pipeline(
    transactions: Transactions,
    categories: Categories,
    spec: FilterSpec | None = None,
    *,
    page: int = 1,
    page_size: int = 10,
) -> Page:
    """Apply every step of the pipeline and return the requested page."""

    spec = spec or FilterSpec()
    rows = filter_by_search(transactions, spec.search)
    rows = filter_by_type(rows, TypeFilter(spec.type))
    rows = filter_by_category(rows, spec.category, categories)
    rows = filter_by_period(rows, spec.period)
    rows = sort_transactions(rows, spec.sort)
    result = paginate(rows, page, page_size)
    _logger.debug(
        "pipeline:run total=%d matched=%d page=%d/%d sort=%s",
        len(transactions),
        result.total_items,
        result.page,
        result.total_pages,
        spec.sort,
    )
    return result


__all__ = [
    "ALL",
    "TypeFilter",
    "SortOrder",
    "FilterSpec",
    "filter_by_search",
    "filter_by_type",
    "filter_by_category",
    "filter_by_period",
    "sort_transactions",
    "build_page_tokens",
    "paginate",
    "run_pipeline",
]
