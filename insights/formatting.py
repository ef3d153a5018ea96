"""Display formatters.

Percentages are always passed as fractions (0.55 -> "55.0%"); nothing here
guesses the scale of its input.
"""

from __future__ import annotations

import math
from typing import Optional


def _missing(value: object) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def format_currency(value: Optional[float], decimals: int = 0) -> str:
    if _missing(value):
        return "N/A"
    value = float(value)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_dollar_index(value: Optional[float]) -> str:
    return format_currency(value, decimals=2)


def format_percentage(value: Optional[float], decimals: int = 1) -> str:
    if _missing(value):
        return "N/A"
    return f"{float(value) * 100:.{decimals}f}%"


def format_delivery_value(value: Optional[float]) -> str:
    if _missing(value):
        return "N/A"
    prefix = "+" if value >= 0 else ""
    return f"{prefix}{format_currency(value)}"


def format_value_capture_percentage(value: Optional[float]) -> str:
    if _missing(value):
        return "N/A"
    return f"{float(value):.0f}%"


def format_rank(rank: Optional[int], total: int) -> str:
    if _missing(rank) or not rank:
        return "N/A"
    return f"#{int(rank)}/{total}"
