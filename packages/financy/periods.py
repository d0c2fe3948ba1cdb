"""Calendar-date parsing and month periods.

Dates reach the core as bare ``YYYY-MM-DD`` strings (Supabase ``date``
column, HTML date inputs) or as full ISO timestamps (Prisma/GraphQL
serialization). Both are reduced to a :class:`datetime.date` by reading the
lexical date prefix, never by converting between timezones: a timestamp
written as ``2026-02-08T00:00:00.000Z`` is the 8th of February regardless of
the host's local offset.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date, datetime

from .errors import InvalidDate, InvalidFilterSpec
from .models import MonthRange

_DATE_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?![\d])")
_PERIOD_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_calendar_date(raw: object, *, record_id: str | None = None) -> date:
    """Return the calendar date named by ``raw``.

    Accepts ``date``/``datetime`` objects, bare ``YYYY-MM-DD`` strings and
    timestamp strings. The ``YYYY-MM-DD`` prefix wins whenever present; other
    strings fall back to :meth:`datetime.fromisoformat` and keep the wall
    date as written. Raises :class:`~financy.errors.InvalidDate` otherwise.
    """

    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        raise InvalidDate(f"invalid date: {raw!r}", record_id=record_id)

    s = raw.strip()
    m = _DATE_PREFIX_RE.match(s)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError as exc:
            raise InvalidDate(f"invalid date: {raw!r}", record_id=record_id) from exc
    try:
        return datetime.fromisoformat(s).date()
    except ValueError as exc:
        raise InvalidDate(f"invalid date: {raw!r}", record_id=record_id) from exc


def period_key(value: date | datetime | str) -> str:
    """Return the ``"YYYY-MM"`` grouping key for a date (or raw date string)."""

    d = parse_calendar_date(value)
    return f"{d.year:04d}-{d.month:02d}"


def parse_period_key(key: str) -> tuple[int, int]:
    """Validate a ``"YYYY-MM"`` key and return ``(year, month)``."""

    m = _PERIOD_KEY_RE.match(key.strip()) if isinstance(key, str) else None
    if not m:
        raise InvalidDate(f"invalid period key: {key!r}")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidDate(f"invalid period key: {key!r}")
    return year, month


def shift_period(key: str, months: int) -> str:
    """Move ``key`` by ``months`` calendar months (negative goes back)."""

    year, month = parse_period_key(key)
    index = year * 12 + (month - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def month_range(key: str) -> MonthRange:
    """Half-open ``[first day, first day of next month)`` for ``key``."""

    year, month = parse_period_key(key)
    start = date(year, month, 1)
    end_year, end_month = (year + 1, 1) if month == 12 else (year, month + 1)
    return MonthRange(start=start, end_exclusive=date(end_year, end_month, 1))


def recent_periods(current: str, count: int = 8) -> list[str]:
    """``current`` followed by the ``count - 1`` preceding months, newest first."""

    parse_period_key(current)
    return [shift_period(current, -i) for i in range(max(0, count))]


def format_period_label(
    key: str, locale: str = "pt-BR", *, month_names: Sequence[str] | None = None
) -> str:
    """Human-readable ``"Month / Year"`` label.

    Month names are looked up in ``month_names`` (twelve entries, January
    first) or, when omitted, in :data:`financy.presentation.MONTH_NAMES` for
    ``locale``.

    Raises :class:`~financy.errors.InvalidFilterSpec` for an unknown locale
    or a table that does not have twelve entries.
    """

    year, month = parse_period_key(key)
    if month_names is None:
        from .presentation import month_names_for

        month_names = month_names_for(locale)
    if len(month_names) != 12:
        raise InvalidFilterSpec("month_names must have exactly 12 entries")
    return f"{month_names[month - 1]} / {year}"


__all__ = [
    "parse_calendar_date",
    "period_key",
    "parse_period_key",
    "shift_period",
    "month_range",
    "recent_periods",
    "format_period_label",
]
