from __future__ import annotations

from decimal import Decimal

import pytest

from financy.errors import InvalidAmount, UnknownTransactionType
from financy.models import TransactionType, TypeVocabulary
from financy.money import (
    denormalize_type,
    normalize_type,
    parse_brl_amount,
    to_major_units,
    to_minor_units,
)


@pytest.mark.parametrize(
    "major, expected",
    [
        (Decimal("1800.00"), 180000),
        ("45.00", 4500),
        (12, 1200),
        (0.29, 29),  # float repr, not binary expansion
        (19.99, 1999),
        ("0.005", 1),  # half away from zero
        ("0.004", 0),
        (0, 0),
    ],
)
def test_to_minor_units(major, expected):
    assert to_minor_units(major) == expected


@pytest.mark.parametrize("bad", [-1, "-0.01", float("nan"), float("inf"), "abc", True, None])
def test_to_minor_units_rejects(bad):
    with pytest.raises(InvalidAmount):
        to_minor_units(bad)


def test_invalid_amount_carries_record_id():
    with pytest.raises(InvalidAmount) as excinfo:
        to_minor_units("-5", record_id="tx-9")
    assert excinfo.value.record_id == "tx-9"
    assert "tx-9" in str(excinfo.value)
    # Still a ValueError for callers that only know the builtin.
    assert isinstance(excinfo.value, ValueError)


def test_to_major_units_has_two_places():
    assert to_major_units(4500) == Decimal("45.00")
    assert str(to_major_units(7)) == "0.07"
    assert to_major_units(-250) == Decimal("-2.50")
    with pytest.raises(InvalidAmount):
        to_major_units(1.5)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1.234,56", 123456),
        ("R$ 10,5", 1050),
        ("7", 700),
        ("  1.000.000  ", 100000000),
        ("0,99", 99),
    ],
)
def test_parse_brl_amount(text, expected):
    assert parse_brl_amount(text) == expected


@pytest.mark.parametrize("text", ["", "R$", "-10,00", "1234.56", "1,2,3", "abc", "1.23,00"])
def test_parse_brl_amount_rejects(text):
    with pytest.raises(InvalidAmount):
        parse_brl_amount(text)


@pytest.mark.parametrize(
    "literal, expected",
    [
        ("INCOME", TransactionType.INCOME),
        ("EXPENSE", TransactionType.EXPENSE),
        ("entrada", TransactionType.INCOME),
        ("saida", TransactionType.EXPENSE),
        ("  Entrada ", TransactionType.INCOME),
        ("SAIDA", TransactionType.EXPENSE),
        (TransactionType.EXPENSE, TransactionType.EXPENSE),
    ],
)
def test_normalize_type_both_vocabularies(literal, expected):
    assert normalize_type(literal) is expected


@pytest.mark.parametrize("literal", ["refund", "", None, 1, "saída"])
def test_normalize_type_unknown(literal):
    with pytest.raises(UnknownTransactionType):
        normalize_type(literal, record_id="r1")


def test_denormalize_type_per_vocabulary():
    assert denormalize_type(TransactionType.INCOME) == "INCOME"
    assert denormalize_type(TransactionType.EXPENSE, TypeVocabulary.LEGACY) == "saida"
    assert denormalize_type(TransactionType.INCOME, "legacy") == "entrada"
    for vocab in TypeVocabulary:
        for t in TransactionType:
            assert normalize_type(denormalize_type(t, vocab)) is t


@pytest.mark.parametrize("cents", [0, 1, 99, 100, 4500, 123456789])
def test_minor_major_minor_is_identity(cents):
    assert to_minor_units(to_major_units(cents)) == cents


@pytest.mark.parametrize("major", [Decimal("1e30"), "1e26", 1e40])
def test_amounts_beyond_decimal_precision_are_invalid(major):
    with pytest.raises(InvalidAmount) as excinfo:
        to_minor_units(major, record_id="huge")
    assert excinfo.value.record_id == "huge"


def test_parse_brl_amount_beyond_decimal_precision():
    with pytest.raises(InvalidAmount):
        parse_brl_amount("9" * 30)
