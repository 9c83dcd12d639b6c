"""
Numeric helpers for text input, lot quantization and display.

Floats are converted to Decimal through their shortest repr before
quantizing, so a value such as 0.29 floors to 0.29 and not to 0.28.
"""

import math
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any, Optional

from ..errors import InvalidInputError


def parse_number(text: Optional[str]) -> Optional[float]:
    """
    Parse user-entered text as a finite float.

    Args:
        text: Raw field contents, possibly blank

    Returns:
        The parsed value, or None for blank, unparseable or non-finite text
    """
    if text is None:
        return None
    stripped = text.strip()
    if not stripped:
        return None
    try:
        value = float(stripped)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_int(text: Optional[str]) -> Optional[int]:
    """Parse user-entered text as an integer, None when it is not one."""
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def require_positive(value: Any, field: str) -> float:
    """
    Check that a value is a finite positive real.

    Raises:
        InvalidInputError: If the value is missing, non-numeric, non-finite or <= 0
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(
            f"{field.replace('_', ' ')} must be a number",
            field=field,
            value=value,
        )
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(
            f"{field.replace('_', ' ')} must be a positive number",
            field=field,
            value=value,
        )
    return float(value)


def price_difference(a: float, b: float) -> float:
    """
    |a - b| computed on the decimal prices as entered.

    1.1 - 1.095 is 0.005, not 0.0050000000000001155.
    """
    return float(abs(Decimal(repr(a)) - Decimal(repr(b))))


def floor_to_step(value: float, step: float = 0.01) -> float:
    """
    Round down to a multiple of step.

    Never returns a value above the input, so a quantized lot size can not
    exceed the capacity it was computed from.
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot quantize non-finite value {value!r}")
    try:
        quotient = Decimal(repr(value)) / Decimal(repr(step))
        floored = quotient.to_integral_value(rounding=ROUND_FLOOR) * Decimal(repr(step))
    except InvalidOperation as e:
        raise ValueError(f"Cannot quantize {value!r} to step {step!r}") from e
    return float(floored)


def format_amount(value: float, decimals: int = 2) -> str:
    """Fixed-point rendering used for lots and USD amounts."""
    return f"{value:.{decimals}f}"
