"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout. Prices in the
demo catalog are whole FCFA (XOF) amounts, but nothing here assumes it.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal, None]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Precision for integer currencies (XOF has no minor unit)
INTEGER_PRECISION = Decimal("1")

INTEGER_CURRENCIES = frozenset({"XOF", "XAF", "JPY"})

# Plain ASCII space between thousands groups
THOUSANDS_SEPARATOR = " "

CURRENCY_LABELS = {
    "XOF": "FCFA",
    "XAF": "FCFA",
    "EUR": "€",
    "USD": "$",
}


def to_decimal(value: Number) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")

    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")

    try:
        if isinstance(value, float):
            # Go through str to keep the shortest repr
            result = Decimal(str(value))
        else:
            result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def round_money(value: Number, to_int: bool = False) -> Decimal:
    """
    Round monetary value to appropriate precision.

    Args:
        value: Value to round
        to_int: If True, round to integer (XOF)

    Returns:
        Rounded Decimal value
    """
    decimal_value = to_decimal(value)
    precision = INTEGER_PRECISION if to_int else MONEY_PRECISION
    return decimal_value.quantize(precision, rounding=ROUND_HALF_UP)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for analytics payloads.

    Use only at boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def format_money(value: Number, currency: str = "XOF") -> str:
    """
    Format monetary value the way the storefront displays it.

    French grouping (space thousands separator, comma decimals),
    label after the amount: ``12 000 FCFA``, ``9,90 €``.
    """
    decimal_value = to_decimal(value)
    label = CURRENCY_LABELS.get(currency, currency)

    if currency in INTEGER_CURRENCIES:
        formatted = f"{int(round_money(decimal_value, to_int=True)):,}".replace(",", THOUSANDS_SEPARATOR)
    else:
        formatted = f"{round_money(decimal_value):,.2f}"
        formatted = formatted.replace(",", THOUSANDS_SEPARATOR).replace(".", ",")

    return f"{formatted} {label}"


def format_xof(value: Number) -> str:
    """Format an amount in FCFA."""
    return format_money(value, "XOF")
