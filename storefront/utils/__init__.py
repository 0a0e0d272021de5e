# Utilities Module
from .validators import (
    parse_number,
    parse_quantity,
    parse_price_max,
    clean_text,
)

__all__ = [
    "parse_number",
    "parse_quantity",
    "parse_price_max",
    "clean_text",
]
