"""Helper functions for money values, dates and display formatting."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from ..exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
MAX_MONEY_DIGITS = 26


def parse_money(
    value: Any, field: str = "amount", allow_negative: bool = False
) -> Decimal | None:
    """Parse a monetary value into a two-place Decimal.

    Accepts Decimal, int, float (via its repr, never its binary value) and
    strings such as "1249.55", "$1,249.55" or "450". None passes through.

    Args:
        value: Raw value to parse
        field: Field name reported in validation errors
        allow_negative: Whether negative amounts are accepted

    Returns:
        Decimal quantized to cents, or None

    Raises:
        ValidationError: If the value is malformed, has more than two decimal
            places, or is negative when not allowed
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a monetary amount", field=field, value=value)

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace("$", "")
        if not cleaned:
            raise ValidationError(f"{field} is empty", field=field, value=value)
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            raise ValidationError(
                f"{field} is not a valid monetary amount: '{value}'", field=field, value=value
            )
    else:
        raise ValidationError(f"{field} must be a monetary amount", field=field, value=repr(value))

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite amount", field=field, value=str(value))
    # Quantizing to cents needs every digit to fit the 28-digit decimal context
    if amount and amount.adjusted() >= MAX_MONEY_DIGITS:
        raise ValidationError(f"{field} is too large", field=field, value=str(value))
    if amount.as_tuple().exponent < -2 and amount != amount.quantize(CENT):
        raise ValidationError(
            f"{field} has more than two decimal places: '{value}'", field=field, value=str(value)
        )
    if amount < 0 and not allow_negative:
        raise ValidationError(f"{field} must not be negative", field=field, value=str(value))

    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def money_from_db(value: str | None) -> Decimal | None:
    """Convert a stored decimal string back into a Decimal."""
    if value is None:
        return None
    return Decimal(str(value)).quantize(CENT)


def money_to_str(amount: Decimal | None) -> str | None:
    """Render a Decimal as a two-place string for storage or the wire."""
    if amount is None:
        return None
    return str(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def format_currency(amount: Decimal | float, currency: str = "$") -> str:
    """Format a monetary amount for display.

    Args:
        amount: Monetary amount
        currency: Currency symbol

    Returns:
        Formatted currency string
    """
    return f"{currency}{Decimal(str(amount)):,.2f}"


def format_headline(amount: Decimal | str | float | None, currency: str = "$") -> str:
    """Format a balance or profit as a signed, whole-unit headline figure.

    Zero and positive values get "+", negative values get "-"; the magnitude
    is rounded to zero decimal places, e.g. "+$9,996" or "-$450".
    Missing values render as "+$0".
    """
    value = Decimal(str(amount)) if amount is not None else ZERO
    sign = "-" if value < 0 else "+"
    magnitude = abs(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{sign}{currency}{magnitude:,}"


def parse_date(value: Any, field: str = "date") -> date:
    """Parse a date from a date, datetime or ISO / US formatted string.

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        date_string = value.strip()
        date_formats = [
            "%Y-%m-%d",
            "%Y-%m-%dT%H:%M:%S",
            "%Y-%m-%d %H:%M:%S",
            "%m/%d/%Y",
        ]
        for fmt in date_formats:
            try:
                return datetime.strptime(date_string, fmt).date()
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(date_string.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValidationError(f"{field} is not a valid date: '{value}'", field=field, value=str(value))


def seat_label(section: str, row: str, number: str) -> str:
    """Human-readable seat address."""
    return f"Sec {section}, Row {row}, Seat {number}"
