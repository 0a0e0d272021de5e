"""UI-boundary input parsing.

Form controls hand over raw strings (or nothing). These helpers turn them
into the numbers the engine works with and document the fallback for
missing or invalid input instead of relying on truthiness.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def parse_number(raw: Any) -> Optional[Decimal]:
    """
    Parse a finite number from a widget value.

    Accepts ints, floats, Decimals and numeric strings (surrounding blanks
    ignored, comma accepted as decimal separator). Booleans are not numbers.

    Returns:
        Decimal value, or None when the input is missing or not numeric
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else None
    if isinstance(raw, (int, float)):
        raw = str(raw)
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    for separator in (" ", "\u00a0", "\u202f"):
        text = text.replace(separator, "")
    text = text.replace(",", ".")
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_quantity(raw: Any, default: int = 1) -> int:
    """
    Parse a quantity input.

    Missing or invalid input gives ``default`` (1). Fractions are truncated
    and anything below 1 is clamped to 1.
    """
    value = parse_number(raw)
    if value is None:
        return max(1, default)
    return max(1, int(value))


def parse_price_max(raw: Any) -> Decimal:
    """
    Parse the price ceiling input.

    Missing, invalid or negative input gives 0, which means "no ceiling".
    """
    value = parse_number(raw)
    if value is None or value < 0:
        return Decimal("0")
    return value


def clean_text(raw: Any) -> str:
    """Strip a free-text input; non-strings become an empty string."""
    if not isinstance(raw, str):
        return ""
    return raw.strip()
