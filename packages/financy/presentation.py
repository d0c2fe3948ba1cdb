"""Presentation-boundary helpers: currency/date formatting and tag resolution.

Nothing in the aggregator depends on this module. It is the place where
opaque category ``icon``/``color`` tags are resolved against the closed sets
the UI knows how to draw, and where integer cents become display strings.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from enum import StrEnum

from .errors import InvalidFilterSpec
from .models import Transaction, TransactionType
from .money import to_major_units


class CategoryIcon(StrEnum):
    WALLET = "wallet"
    CAR = "car"
    HEART = "heart"
    PIG = "pig"
    CART = "cart"
    FILM = "film"
    GIFT = "gift"
    FORK = "fork"
    HOME = "home"
    TOOL = "tool"
    BOOK = "book"
    BAG = "bag"


class CategoryColor(StrEnum):
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"


DEFAULT_ICON = CategoryIcon.WALLET
DEFAULT_COLOR = CategoryColor.GREEN


def resolve_icon(raw: object) -> CategoryIcon:
    """Return the matching icon, or :data:`DEFAULT_ICON` for unknown tags."""

    if isinstance(raw, str):
        try:
            return CategoryIcon(raw.strip().lower())
        except ValueError:
            pass
    return DEFAULT_ICON


def resolve_color(raw: object) -> CategoryColor:
    """Return the matching color, or :data:`DEFAULT_COLOR` for unknown tags."""

    if isinstance(raw, str):
        try:
            return CategoryColor(raw.strip().lower())
        except ValueError:
            pass
    return DEFAULT_COLOR


# ---------------------------------------------------------------------------
# Month name tables
# ---------------------------------------------------------------------------

MONTH_NAMES: dict[str, tuple[str, ...]] = {
    "pt-BR": (
        "Janeiro",
        "Fevereiro",
        "Março",
        "Abril",
        "Maio",
        "Junho",
        "Julho",
        "Agosto",
        "Setembro",
        "Outubro",
        "Novembro",
        "Dezembro",
    ),
    "en-US": (
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
}


def month_names_for(locale: str) -> Sequence[str]:
    try:
        return MONTH_NAMES[locale]
    except KeyError:
        raise InvalidFilterSpec(f"no month name table for locale {locale!r}") from None


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_brl(minor_units: int, *, with_symbol: bool = True) -> str:
    """Format cents as Brazilian reais: ``123456`` -> ``"R$ 1.234,56"``.

    Negative values (a negative balance) get a leading minus.
    """

    value = to_major_units(minor_units)
    digits = f"{abs(value):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    sign = "-" if value < 0 else ""
    symbol = "R$ " if with_symbol else ""
    return f"{sign}{symbol}{digits}"


def format_signed_brl(tx: Transaction) -> str:
    """``"+ R$ 10,00"`` for income, ``"- R$ 10,00"`` for expenses."""

    prefix = "+ " if tx.type is TransactionType.INCOME else "- "
    return prefix + format_brl(tx.amount_minor_units)


def format_date_br(d: date, *, short: bool = False) -> str:
    """``dd/mm/yyyy`` (or ``dd/mm/yy`` when ``short``)."""

    return d.strftime("%d/%m/%y" if short else "%d/%m/%Y")


_TYPE_LABELS = {TransactionType.INCOME: "Entrada", TransactionType.EXPENSE: "Saída"}


def type_label(tx_type: TransactionType) -> str:
    return _TYPE_LABELS[tx_type]


UNCATEGORIZED_LABEL = "Sem categoria"


__all__ = [
    "CategoryIcon",
    "CategoryColor",
    "DEFAULT_ICON",
    "DEFAULT_COLOR",
    "resolve_icon",
    "resolve_color",
    "MONTH_NAMES",
    "month_names_for",
    "format_brl",
    "format_signed_brl",
    "format_date_br",
    "type_label",
    "UNCATEGORIZED_LABEL",
]
