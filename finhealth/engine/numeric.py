"""Decimal helpers shared by the engines."""

from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")
ONE_PLACE = Decimal("0.1")
ZERO = Decimal("0")


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce a number to Decimal. Floats go through str to avoid binary noise."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def cents(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def points(value: Decimal | float) -> Decimal:
    """Round a score to one decimal place."""
    return to_decimal(value).quantize(ONE_PLACE, ROUND_HALF_UP)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def safe_ratio(numerator: Decimal, denominator: Decimal, default: float = 0.0) -> float:
    """numerator / denominator as float, or `default` when the denominator is not positive."""
    if denominator <= 0:
        return default
    return float(numerator / denominator)
