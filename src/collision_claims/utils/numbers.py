"""Rounding and money formatting helpers."""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going toward +infinity, unlike Python's banker's rounding."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_cents(value: float) -> float:
    return round_half_up(value, 2)


def round_to_nearest(value: float, step: int) -> int:
    """Round value to the nearest multiple of step."""
    return round_int(value / step) * step


def format_currency(amount: float) -> str:
    """Whole-dollar display with thousands separators, e.g. $1,234."""
    return f"${round_int(amount):,}"


def format_number(value: float) -> str:
    """Shortest display form: integral values without a decimal point (3.0 -> "3")."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
