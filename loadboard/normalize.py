"""
Generic value cleanup shared by every field parser.

Everything here is pure and total: malformed input degrades to None or to
the original text, never to an exception.
"""

import math
import re
from typing import Any, Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

Matcher = Callable[[str], Optional[T]]

PLACEHOLDERS = frozenset({"", "N/A", "-", "–"})

_WEIGHT_RE = re.compile(r"(\d+(?:,\d+)*)\s*(k|lbs|pounds?)?", re.IGNORECASE)
_LENGTH_RE = re.compile(r"(\d+)\s*ft", re.IGNORECASE)
_INT_RE = re.compile(r"\$?(\d[\d,]*)")
_FLOAT_RE = re.compile(r"\$?(\d+(?:\.\d+)?|\.\d+)")


def normalize_value(value: Any) -> Optional[str]:
    """Trim a scraped value, mapping placeholders ("N/A", "-", "–", blanks) to None."""
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    text = text.strip()
    if text in PLACEHOLDERS:
        return None
    return text


def first_match(text: str, matchers: Iterable[Matcher]) -> Optional[T]:
    """Run matchers in order and return the first non-None result."""
    for matcher in matchers:
        result = matcher(text)
        if result is not None:
            return result
    return None


def parse_weight(text: Optional[str]) -> Optional[str]:
    """
    Normalize weight text to "<n> lbs" or "<n>k lbs".

    "45,000" -> "45000 lbs", "44K" -> "44k lbs". Text without a number is
    returned unchanged.
    """
    if text is None:
        return None
    match = _WEIGHT_RE.search(text)
    if not match:
        return text

    number, unit = match.groups()
    number = number.replace(",", "")
    if unit and unit.lower().startswith("k"):
        return f"{number}k lbs"
    return f"{number} lbs"


def parse_equipment_length(text: Optional[str]) -> Optional[str]:
    """Normalize "53ft" / "48 FT" to "<n> ft"; anything else is returned unchanged."""
    if text is None:
        return None
    match = _LENGTH_RE.search(text)
    if not match:
        return text
    return f"{match.group(1)} ft"


def coerce_int(value: Any) -> Optional[int]:
    """
    Pull a whole-dollar integer out of "$2,700", "2700", 2700 or 2700.0.
    Returns None when there are no digits or the number is NaN/infinite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _INT_RE.search(str(value))
    if not match:
        return None
    digits = match.group(1).replace(",", "")
    try:
        return int(digits) if digits else None
    except ValueError:
        # more digits than int() will parse
        return None


def _finite(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def coerce_float(value: Any) -> Optional[float]:
    """Pull a 2-decimal float out of "$2.17/mi", "2.17" or 2.17. No digits, NaN or infinity -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = _finite(value)
    else:
        match = _FLOAT_RE.search(str(value))
        number = _finite(match.group(1)) if match else None
    return round(number, 2) if number is not None else None
