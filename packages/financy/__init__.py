"""Public interface for the ``financy`` package.

Pure ledger core (money, periods, aggregation, the listing pipeline and
normalization) plus the snapshot/store adapters. Importing the package does
not touch the database; :mod:`financy.store` and :mod:`financy.cli` are
imported explicitly by callers that need them.
"""

from .aggregate import (
    category_breakdown,
    category_stats,
    category_usage_counts,
    dashboard_summary,
    most_used_category,
    overall_totals,
    period_totals,
    recent_transactions,
    total_balance,
)
from .errors import (
    FinancyError,
    InvalidAmount,
    InvalidDate,
    InvalidFilterSpec,
    InvalidRecord,
    UnknownTransactionType,
)
from .models import (
    ELLIPSIS,
    Categories,
    Category,
    CategoryBreakdownEntry,
    CategoryStats,
    DashboardSummary,
    MonthRange,
    MostUsedCategory,
    Page,
    PageToken,
    PeriodTotals,
    RecordRejection,
    Snapshot,
    Transaction,
    Transactions,
    TransactionType,
    TypeVocabulary,
)
from .money import (
    denormalize_type,
    normalize_type,
    parse_brl_amount,
    to_major_units,
    to_minor_units,
)
from .normalize import (
    NormalizationResult,
    normalize_categories,
    normalize_category,
    normalize_transaction,
    normalize_transactions,
)
from .periods import (
    format_period_label,
    month_range,
    parse_calendar_date,
    parse_period_key,
    period_key,
    recent_periods,
    shift_period,
)
from .pipeline import (
    ALL,
    FilterSpec,
    SortOrder,
    TypeFilter,
    build_page_tokens,
    paginate,
    run_pipeline,
    sort_transactions,
)
from .snapshot import parse_snapshot, read_snapshot_file

__all__ = [
    # Aggregation
    "total_balance",
    "period_totals",
    "overall_totals",
    "category_breakdown",
    "category_usage_counts",
    "most_used_category",
    "category_stats",
    "recent_transactions",
    "dashboard_summary",
    # Errors
    "FinancyError",
    "InvalidAmount",
    "UnknownTransactionType",
    "InvalidDate",
    "InvalidFilterSpec",
    "InvalidRecord",
    # Models / types
    "TransactionType",
    "TypeVocabulary",
    "Category",
    "Transaction",
    "Transactions",
    "Categories",
    "MonthRange",
    "PeriodTotals",
    "CategoryBreakdownEntry",
    "MostUsedCategory",
    "CategoryStats",
    "DashboardSummary",
    "ELLIPSIS",
    "PageToken",
    "Page",
    "RecordRejection",
    "Snapshot",
    # Money
    "to_minor_units",
    "to_major_units",
    "parse_brl_amount",
    "normalize_type",
    "denormalize_type",
    # Normalization
    "NormalizationResult",
    "normalize_transaction",
    "normalize_category",
    "normalize_transactions",
    "normalize_categories",
    # Periods
    "parse_calendar_date",
    "period_key",
    "parse_period_key",
    "shift_period",
    "month_range",
    "recent_periods",
    "format_period_label",
    # Pipeline
    "ALL",
    "TypeFilter",
    "SortOrder",
    "FilterSpec",
    "sort_transactions",
    "build_page_tokens",
    "paginate",
    "run_pipeline",
    # Snapshot files
    "parse_snapshot",
    "read_snapshot_file",
]
