"""Raw store rows -> core records.

The application stored transactions under two schema iterations:

- GraphQL/Prisma: ``amountCents`` (integer cents), ``type`` in
  ``INCOME``/``EXPENSE``, ``categoryId`` (or a nested ``category``), ISO
  timestamp ``date`` strings, ``createdAt``.
- Supabase: ``amount`` (``numeric(12,2)`` reais, often serialized as a
  string), ``type`` in ``entrada``/``saida``, ``category_id``, bare
  ``YYYY-MM-DD`` dates, ``created_at``.

Both shapes (and snake/camel mixes of them) normalize to the same
:class:`~financy.models.Transaction`. Errors always carry the record id.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from .errors import FinancyError, InvalidAmount, InvalidRecord
from .logging_setup import get_logger
from .models import Category, RecordRejection, Transaction
from .money import normalize_type, to_minor_units
from .periods import parse_calendar_date

_logger = get_logger("financy.normalize")

type ErrorPolicy = Literal["raise", "skip"]


def _first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in raw and raw[k] is not None:
            return raw[k]
    return None


def _record_id(raw: Mapping[str, Any]) -> str | None:
    value = raw.get("id")
    if value is None or isinstance(value, bool):
        return None
    s = str(value).strip()
    return s or None


def _required_text(raw: Mapping[str, Any], key: str, *, record_id: str | None) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidRecord(f"{key} must be a non-empty string", record_id=record_id)
    return value.strip()


def _optional_id(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _parse_timestamp(value: Any, *, record_id: str | None) -> datetime | None:
    # Offset-less timestamps are UTC.
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        s = value.strip()
        # "Z" suffix as written by JS Date.toISOString().
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError as exc:
            raise InvalidRecord(f"invalid timestamp: {value!r}", record_id=record_id) from exc
    else:
        raise InvalidRecord(f"invalid timestamp: {value!r}", record_id=record_id)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _amount_minor_units(raw: Mapping[str, Any], *, record_id: str | None) -> int:
    cents = _first_present(raw, "amountCents", "amount_cents", "amount_minor_units")
    if cents is not None:
        if isinstance(cents, bool) or not isinstance(cents, int):
            raise InvalidAmount(f"amountCents must be an integer: {cents!r}", record_id=record_id)
        if cents < 0:
            raise InvalidAmount(f"amount must not be negative: {cents!r}", record_id=record_id)
        return cents
    major = raw.get("amount")
    if major is None:
        raise InvalidAmount("amount is required", record_id=record_id)
    return to_minor_units(major, record_id=record_id)


def normalize_transaction(raw: Mapping[str, Any], *, allow_zero: bool = True) -> Transaction:
    """Build a :class:`Transaction` from a raw row of either schema iteration.

    ``allow_zero`` is the caller's business rule for zero-value amounts;
    when ``False`` a zero amount raises :class:`~financy.errors.InvalidAmount`.
    """

    rid = _record_id(raw)
    if rid is None:
        raise InvalidRecord("transaction id is required")
    description = _required_text(raw, "description", record_id=rid)
    tx_date = parse_calendar_date(raw.get("date"), record_id=rid)
    tx_type = normalize_type(raw.get("type"), record_id=rid)
    amount = _amount_minor_units(raw, record_id=rid)
    if amount == 0 and not allow_zero:
        raise InvalidAmount("amount must be greater than zero", record_id=rid)

    category_id = _optional_id(_first_present(raw, "categoryId", "category_id"))
    if category_id is None:
        nested = raw.get("category")
        if isinstance(nested, Mapping):
            category_id = _optional_id(nested.get("id"))

    return Transaction(
        id=rid,
        description=description,
        date=tx_date,
        type=tx_type,
        amount_minor_units=amount,
        category_id=category_id,
        created_at=_parse_timestamp(_first_present(raw, "createdAt", "created_at"), record_id=rid),
    )


def normalize_category(raw: Mapping[str, Any]) -> Category:
    """Build a :class:`Category`; icon/color are passed through untouched."""

    rid = _record_id(raw)
    if rid is None:
        raise InvalidRecord("category id is required")
    icon = raw.get("icon")
    color = raw.get("color")
    description = raw.get("description")
    return Category(
        id=rid,
        title=_required_text(raw, "title", record_id=rid),
        icon=icon if isinstance(icon, str) else None,
        color=color if isinstance(color, str) else None,
        description=description.strip() or None if isinstance(description, str) else None,
        created_at=_parse_timestamp(_first_present(raw, "createdAt", "created_at"), record_id=rid),
    )


@dataclass(frozen=True, slots=True)
class NormalizationResult[T]:
    items: tuple[T, ...]
    rejected: tuple[RecordRejection, ...]


def _normalize_many[T](
    rows: Iterable[Mapping[str, Any]],
    convert: Callable[[Mapping[str, Any]], T],
    *,
    on_error: ErrorPolicy,
    kind: str,
) -> NormalizationResult[T]:
    if on_error not in ("raise", "skip"):
        raise ValueError(f"on_error must be 'raise' or 'skip', got {on_error!r}")
    items: list[T] = []
    rejected: list[RecordRejection] = []
    for raw in rows:
        try:
            items.append(convert(raw))
        except FinancyError as e:
            if on_error == "raise":
                raise
            rid = e.record_id if e.record_id is not None else _record_id(raw)
            _logger.warning(
                "normalize:%s_rejected id=%s error=%s message=%s",
                kind,
                rid,
                e.__class__.__name__,
                e,
            )
            rejected.append(RecordRejection(record_id=rid, error=e.__class__.__name__, kind=kind))
    return NormalizationResult(items=tuple(items), rejected=tuple(rejected))


def normalize_transactions(
    rows: Iterable[Mapping[str, Any]],
    *,
    on_error: ErrorPolicy = "raise",
    allow_zero: bool = True,
) -> NormalizationResult[Transaction]:
    """Normalize many transaction rows under the caller's error policy.

    ``"raise"`` propagates the first error. ``"skip"`` logs each failure at
    WARNING, leaves the record out of ``items`` and reports it in
    ``rejected``.
    """

    return _normalize_many(
        rows,
        lambda raw: normalize_transaction(raw, allow_zero=allow_zero),
        on_error=on_error,
        kind="transaction",
    )


def normalize_categories(
    rows: Iterable[Mapping[str, Any]], *, on_error: ErrorPolicy = "raise"
) -> NormalizationResult[Category]:
    return _normalize_many(rows, normalize_category, on_error=on_error, kind="category")


__all__ = [
    "ErrorPolicy",
    "NormalizationResult",
    "normalize_transaction",
    "normalize_category",
    "normalize_transactions",
    "normalize_categories",
]
