from __future__ import annotations

from datetime import date

import pytest

from financy.errors import InvalidFilterSpec
from financy.models import TransactionType
from financy.presentation import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    MONTH_NAMES,
    CategoryColor,
    CategoryIcon,
    format_brl,
    format_date_br,
    format_signed_brl,
    month_names_for,
    resolve_color,
    resolve_icon,
    type_label,
)

from tests.helpers.ledger import EXPENSE, INCOME, tx


@pytest.mark.parametrize(
    "cents, expected",
    [
        (123456, "R$ 1.234,56"),
        (7, "R$ 0,07"),
        (0, "R$ 0,00"),
        (100000000, "R$ 1.000.000,00"),
        (-250, "-R$ 2,50"),
    ],
)
def test_format_brl(cents, expected):
    assert format_brl(cents) == expected


def test_format_brl_without_symbol_and_signed():
    assert format_brl(465500, with_symbol=False) == "4.655,00"
    assert format_signed_brl(tx("1", INCOME, 1000, "2026-02-01")) == "+ R$ 10,00"
    assert format_signed_brl(tx("2", EXPENSE, 4500, "2026-02-01")) == "- R$ 45,00"


def test_tags_resolve_with_defaults():
    assert resolve_icon("home") is CategoryIcon.HOME
    assert resolve_icon(" CAR ") is CategoryIcon.CAR
    assert resolve_icon("sparkles") is DEFAULT_ICON is CategoryIcon.WALLET
    assert resolve_icon(None) is DEFAULT_ICON
    assert resolve_color("Purple") is CategoryColor.PURPLE
    assert resolve_color("teal") is DEFAULT_COLOR is CategoryColor.GREEN


def test_dates_and_type_labels():
    assert format_date_br(date(2026, 2, 8)) == "08/02/2026"
    assert format_date_br(date(2026, 2, 8), short=True) == "08/02/26"
    assert type_label(TransactionType.INCOME) == "Entrada"
    assert type_label(TransactionType.EXPENSE) == "Saída"


def test_month_names_for_known_and_unknown_locales():
    assert month_names_for("pt-BR") is MONTH_NAMES["pt-BR"]
    assert month_names_for("pt-BR")[0] == "Janeiro"
    with pytest.raises(InvalidFilterSpec, match="fr-FR"):
        month_names_for("fr-FR")
