"""Error taxonomy for the ``financy`` ledger core.

All errors derive from :class:`FinancyError`, itself a ``ValueError`` so
callers that already treat bad input as ``ValueError`` keep working. Each
error optionally carries the ``record_id`` of the offending record; the core
only signals, and the caller decides whether to skip-and-log or abort.
"""

from __future__ import annotations


class FinancyError(ValueError):
    """Base class for recoverable, caller-facing failures."""

    def __init__(self, message: str, *, record_id: str | None = None) -> None:
        self.record_id = record_id
        if record_id is not None:
            message = f"{message} (record id={record_id!r})"
        super().__init__(message)


class InvalidAmount(FinancyError):
    """Non-finite, negative or non-numeric amount presented for normalization."""


class UnknownTransactionType(FinancyError):
    """Type literal outside every known vocabulary."""


class InvalidDate(FinancyError):
    """Date string matching neither the bare pattern nor a parseable timestamp."""


class InvalidFilterSpec(FinancyError):
    """Unrecognized filter/sort value or display option (locale, month table)."""


class InvalidRecord(FinancyError):
    """Structurally broken record (missing id, empty description, ...)."""


__all__ = [
    "FinancyError",
    "InvalidAmount",
    "UnknownTransactionType",
    "InvalidDate",
    "InvalidFilterSpec",
    "InvalidRecord",
]
