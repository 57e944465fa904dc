import re
from typing import Optional, Tuple
from .models import ParsedRate
from .normalize import coerce_float, coerce_int, first_match


# "$2,700$2.17*/mi" - the board glues the total and the per-mile figure together
COMBINED_RATE = re.compile(r"\$?(\d[\d,]*)\$(\d+(?:\.\d+)?|\.\d+)\*?/mi")
TOTAL_RATE = re.compile(r"(?<![\d.])\$?(\d[\d,]*)$")
PER_MILE_RATE = re.compile(r"\$?(\d+(?:\.\d+)?|\.\d+)\*?/mi")

_EMPTY_RATES = {"", "-", "–"}


def _combined(text: str) -> Optional[ParsedRate]:
    match = COMBINED_RATE.search(text)
    if not match:
        return None
    return ParsedRate(total_rate=f"${match.group(1)}", rate_per_mile=f"${match.group(2)}/mi")


def _total_only(text: str) -> Optional[ParsedRate]:
    match = TOTAL_RATE.search(text)
    if not match:
        return None
    return ParsedRate(total_rate=f"${match.group(1)}")


def _per_mile_only(text: str) -> Optional[ParsedRate]:
    match = PER_MILE_RATE.search(text)
    if not match:
        return None
    return ParsedRate(rate_per_mile=f"${match.group(1)}/mi")


RATE_MATCHERS = (_combined, _total_only, _per_mile_only)


def parse_rate(text: Optional[str]) -> ParsedRate:
    """
    Split load board rate text into total and per-mile parts.

    Unrecognized text is kept verbatim as the total so nothing is lost;
    the numeric stage turns it into None later if it has no digits.
    """
    if text is None or text.strip() in _EMPTY_RATES:
        return ParsedRate()

    text = text.strip()
    parsed = first_match(text, RATE_MATCHERS)
    if parsed is None:
        return ParsedRate(total_rate=text)
    return parsed


def rate_amounts(parsed: ParsedRate) -> Tuple[Optional[int], Optional[float]]:
    """Numeric (rate_total_usd, rate_per_mile) for a parsed rate."""
    return coerce_int(parsed.total_rate), coerce_float(parsed.rate_per_mile)
