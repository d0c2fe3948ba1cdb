"""Money and transaction-type normalization.

Amounts are carried as integer minor units (cents) everywhere in the core.
This module is the single place that converts to/from decimal major units
and the single place that knows the literal vocabularies the store uses for
transaction kinds.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import InvalidAmount, UnknownTransactionType
from .models import TransactionType, TypeVocabulary

_CENTS = Decimal("0.01")
_HUNDRED = Decimal(100)

# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------


def _to_decimal(value: Decimal | int | float | str, *, record_id: str | None) -> Decimal:
    # bool is an int subclass; True would silently become one real.
    if isinstance(value, bool):
        raise InvalidAmount(f"invalid amount: {value!r}", record_id=record_id)
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, int):
        d = Decimal(value)
    elif isinstance(value, float):
        # str() gives the shortest repr, so 0.29 stays 0.29 instead of 0.28999...
        d = Decimal(str(value))
    elif isinstance(value, str):
        try:
            d = Decimal(value.strip())
        except InvalidOperation as exc:
            raise InvalidAmount(f"invalid amount: {value!r}", record_id=record_id) from exc
    else:
        raise InvalidAmount(f"invalid amount: {value!r}", record_id=record_id)
    if not d.is_finite():
        raise InvalidAmount(f"amount must be finite: {value!r}", record_id=record_id)
    return d


def to_minor_units(
    major_units: Decimal | int | float | str, *, record_id: str | None = None
) -> int:
    """Convert a decimal major-unit amount (reais) into integer cents.

    Multiplies by 100 and rounds half away from zero. Negative and
    non-finite inputs raise :class:`~financy.errors.InvalidAmount`; zero is
    accepted (the zero-vs-positive rule is a caller policy).
    """

    d = _to_decimal(major_units, record_id=record_id)
    if d < 0:
        raise InvalidAmount(f"amount must not be negative: {major_units!r}", record_id=record_id)
    try:
        cents = (d * _HUNDRED).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        # Result needs more digits than the decimal context carries.
        raise InvalidAmount(f"amount out of range: {major_units!r}", record_id=record_id) from exc
    return int(cents)


def to_major_units(minor_units: int) -> Decimal:
    """Return ``minor_units / 100`` with exactly two decimal places."""

    if isinstance(minor_units, bool) or not isinstance(minor_units, int):
        raise InvalidAmount(f"minor units must be an integer: {minor_units!r}")
    return (Decimal(minor_units) / _HUNDRED).quantize(_CENTS)


_BRL_RE = re.compile(r"^\d+(\.\d{3})*(,\d+)?$|^\d+(,\d+)?$")


def parse_brl_amount(text: str, *, record_id: str | None = None) -> int:
    """Parse a Brazilian-formatted amount as typed in a form into cents.

    ``"1.234,56"`` -> ``123456``; ``"R$ 10,5"`` -> ``1050``; ``"7"`` -> ``700``.
    Dots are thousands separators and the comma is the decimal mark.
    """

    if not isinstance(text, str):
        raise InvalidAmount(f"invalid amount: {text!r}", record_id=record_id)
    s = text.strip()
    if s.upper().startswith("R$"):
        s = s[2:].strip()
    if s.startswith("-"):
        raise InvalidAmount(f"amount must not be negative: {text!r}", record_id=record_id)
    if not s or not _BRL_RE.match(s):
        raise InvalidAmount(f"invalid amount: {text!r}", record_id=record_id)
    return to_minor_units(s.replace(".", "").replace(",", "."), record_id=record_id)


# ---------------------------------------------------------------------------
# Transaction type vocabularies
# ---------------------------------------------------------------------------

# Bidirectional table: vocabulary -> canonical -> literal as the store writes it.
_VOCABULARIES: dict[TypeVocabulary, dict[TransactionType, str]] = {
    TypeVocabulary.CANONICAL: {
        TransactionType.INCOME: "INCOME",
        TransactionType.EXPENSE: "EXPENSE",
    },
    TypeVocabulary.LEGACY: {
        TransactionType.INCOME: "entrada",
        TransactionType.EXPENSE: "saida",
    },
}

_LITERAL_TO_TYPE: dict[str, TransactionType] = {
    literal.casefold(): canonical
    for table in _VOCABULARIES.values()
    for canonical, literal in table.items()
}


def normalize_type(literal: object, *, record_id: str | None = None) -> TransactionType:
    """Map a store literal from either vocabulary onto :class:`TransactionType`.

    Matching ignores surrounding whitespace and case. Unknown literals raise
    :class:`~financy.errors.UnknownTransactionType`; nothing is defaulted.
    """

    if isinstance(literal, TransactionType):
        return literal
    if isinstance(literal, str):
        found = _LITERAL_TO_TYPE.get(literal.strip().casefold())
        if found is not None:
            return found
    raise UnknownTransactionType(
        f"unknown transaction type literal: {literal!r}", record_id=record_id
    )


def denormalize_type(
    canonical: TransactionType, vocabulary: TypeVocabulary = TypeVocabulary.CANONICAL
) -> str:
    """Return the literal ``vocabulary`` uses for ``canonical``."""

    return _VOCABULARIES[TypeVocabulary(vocabulary)][TransactionType(canonical)]


__all__ = [
    "to_minor_units",
    "to_major_units",
    "parse_brl_amount",
    "normalize_type",
    "denormalize_type",
]
