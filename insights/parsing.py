from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

SENTINELS = {"", "(blank)", "Grand Total"}

_STRIP_CHARS = re.compile(r"[$,\s]")
_LEADING_NUMBER = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _leading_float(text: str) -> float:
    """Read the number at the start of ``text`` and ignore any trailing characters (``"12abc"`` -> 12)."""
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return 0.0
    value = float(match.group(0))
    return value if math.isfinite(value) else 0.0


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def parse_numeric(raw: object) -> float:
    """Parse currency/number text like ``"$1,234"`` or ``"($500)"``.

    Trailing characters after a leading number are ignored (``"$1.2M"`` -> 1.2).
    Blank text, sentinels and text without a leading number resolve to 0.
    """
    if _is_missing(raw):
        return 0.0
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) else 0.0
    text = str(raw)
    if text in SENTINELS:
        return 0.0
    cleaned = _STRIP_CHARS.sub("", text)
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = "-" + cleaned[1:-1]
    return _leading_float(cleaned)


def parse_percentage(raw: object) -> float:
    """``"55.0%"`` -> 0.55. Not clamped; malformed text -> 0."""
    if _is_missing(raw):
        return 0.0
    cleaned = str(raw).replace("%", "").strip()
    if not cleaned:
        return 0.0
    return _leading_float(cleaned) / 100


def is_valid_key(value: object) -> bool:
    if _is_missing(value):
        return False
    return str(value).strip() not in SENTINELS


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if _is_missing(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def headshot_url(player_name: Optional[str], base: str) -> str:
    if not player_name:
        return ""
    formatted = re.sub(r"\s+", "_", player_name.strip().lower())
    return f"{base}{formatted}.jpg"
