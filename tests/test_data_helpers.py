"""Tests for money parsing and display helpers."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from seat_ledger.exceptions import ValidationError
from seat_ledger.utils.data_helpers import (
    format_currency,
    format_headline,
    money_to_str,
    parse_date,
    parse_money,
    seat_label,
)


def test_parse_money_formats():
    """Test accepted monetary inputs."""
    assert parse_money("1249.55") == Decimal("1249.55")
    assert parse_money("$1,249.55") == Decimal("1249.55")
    assert parse_money(450) == Decimal("450.00")
    assert parse_money(0.1) == Decimal("0.10")
    assert parse_money(Decimal("7.5")) == Decimal("7.50")
    assert parse_money("3.000") == Decimal("3.00")
    assert parse_money(None) is None


@pytest.mark.parametrize("value", ["", "abc", "1.005", "-1", "Infinity", True])
def test_parse_money_rejects(value):
    with pytest.raises(ValidationError):
        parse_money(value)


def test_parse_money_negative_when_allowed():
    assert parse_money("-12.30", allow_negative=True) == Decimal("-12.30")


def test_validation_error_names_field():
    with pytest.raises(ValidationError) as exc_info:
        parse_money("x", field="sold_price")
    assert exc_info.value.to_dict()["field"] == "sold_price"


def test_money_to_str():
    assert money_to_str(Decimal("5")) == "5.00"
    assert money_to_str(None) is None


def test_headline_format():
    """Test signed whole-unit headline figures."""
    assert format_headline(Decimal("9996.39")) == "+$9,996"
    assert format_headline(Decimal("-450.00")) == "-$450"
    assert format_headline(Decimal("0")) == "+$0"
    assert format_headline(Decimal("10.50")) == "+$11"
    assert format_headline(None) == "+$0"


def test_format_currency():
    assert format_currency(Decimal("1234.5")) == "$1,234.50"


def test_parse_date():
    assert parse_date("2024-10-25") == date(2024, 10, 25)
    assert parse_date("10/25/2024") == date(2024, 10, 25)
    assert parse_date(datetime(2024, 10, 25, 19, 30)) == date(2024, 10, 25)
    with pytest.raises(ValidationError):
        parse_date("next tuesday")


def test_seat_label():
    assert seat_label("101", "A", "3") == "Sec 101, Row A, Seat 3"


@pytest.mark.parametrize("value", ["1e30", "123456789012345678901234567", Decimal("1E+26")])
def test_parse_money_rejects_amounts_too_large_for_cents(value):
    with pytest.raises(ValidationError) as exc_info:
        parse_money(value, field="cost")
    assert exc_info.value.details["field"] == "cost"


def test_parse_money_largest_accepted_amount():
    assert parse_money("99999999999999999999999999.99") == Decimal("99999999999999999999999999.99")
    assert parse_money(Decimal("0E+30")) == Decimal("0.00")
