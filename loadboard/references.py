"""
Reference ID handling.

Two policies exist. ``scraped`` only ever reports an ID read from the page.
``synthetic`` does the same but, when the page shows none, derives a stable
``AUTO_`` pseudo-ID from the record's own fields.
"""

import base64
import re
from enum import Enum
from typing import Any, Optional
from .normalize import first_match, normalize_value


class ReferenceMode(str, Enum):
    SCRAPED = "scraped"
    SYNTHETIC = "synthetic"


SYNTHETIC_PREFIX = "AUTO_"

# Board IDs look like 07B1234: two digits, an uppercase letter, four digits
ANCHORED_REFERENCE = re.compile(r"(?i:reference\s*id)[\s:#]*(\d{2}[A-Z]\d{4})(?!\d)")
BARE_REFERENCE = re.compile(r"\b(\d{2}[A-Z]\d{4})\b")


def _anchored(text: str) -> Optional[str]:
    match = ANCHORED_REFERENCE.search(text)
    return match.group(1) if match else None


def _bare(text: str) -> Optional[str]:
    match = BARE_REFERENCE.search(text)
    return match.group(1) if match else None


REFERENCE_MATCHERS = (_anchored, _bare)


def find_reference_id(text: Optional[str]) -> Optional[str]:
    """Find a board reference ID in free page text, preferring one labelled "Reference ID"."""
    if not text:
        return None
    return first_match(text, REFERENCE_MATCHERS)


def generate_reference_id(origin: Any, destination: Any, company: Any, rate: Any) -> str:
    """
    Deterministic pseudo-ID for loads whose page shows no reference.

    The four fields are normalized, joined with "-" and base64 encoded; the
    first 8 characters, uppercased, follow the AUTO_ prefix. Missing fields
    contribute an empty string.
    """
    parts = [normalize_value(part) or "" for part in (origin, destination, company, rate)]
    details = "-".join(parts)
    encoded = base64.b64encode(details.encode("utf-8")).decode("ascii")
    return SYNTHETIC_PREFIX + encoded[:8].upper()


def is_synthetic(reference: Optional[str]) -> bool:
    return bool(reference) and reference.startswith(SYNTHETIC_PREFIX)


def resolve_reference(
    mode: ReferenceMode,
    scraped: Optional[str] = None,
    page_text: Optional[str] = None,
    origin: Any = None,
    destination: Any = None,
    company: Any = None,
    rate: Any = None,
) -> Optional[str]:
    """
    Pick the reference for a record under the given mode.

    An explicitly scraped value wins, then one found in ``page_text``. Only
    in synthetic mode is a pseudo-ID generated, and only when both are absent.
    """
    reference = normalize_value(scraped) or find_reference_id(page_text)
    if reference:
        return reference
    if ReferenceMode(mode) is ReferenceMode.SYNTHETIC:
        return generate_reference_id(origin, destination, company, rate)
    return None
