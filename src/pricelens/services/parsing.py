"""Lenient numeric parsing for provider payloads.

Providers report numbers as JSON numbers, numeric strings, empty strings or
not at all. Everything non-finite becomes None.
"""

import math
from typing import Any


def parse_float(value: Any) -> float | None:
    """Parse a provider number into a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_int(value: Any) -> int | None:
    """Parse a provider count into an int, or None."""
    number = parse_float(value)
    return int(number) if number is not None else None


def parse_positive(value: Any) -> float | None:
    """Parse a price-like value; zero and negatives are treated as missing."""
    number = parse_float(value)
    return number if number is not None and number > 0 else None


def is_positive_price(value: float | None) -> bool:
    """True for finite prices strictly above zero."""
    return value is not None and math.isfinite(value) and value > 0


def percent_change(current: float | None, reference: float | None) -> float | None:
    """Percent change from reference to current; None without a usable reference."""
    if current is None or not reference:
        return None
    return (current - reference) / reference * 100
