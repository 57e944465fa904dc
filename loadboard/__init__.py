"""
Normalization core for scraped freight load board listings.
"""

from .models import LoadRecord, RawLoadRow, ParsedRate, OriginDestination, Contact, CSV_HEADERS, VISION_CSV_HEADERS
from .normalize import normalize_value, parse_weight, parse_equipment_length
from .rates import parse_rate
from .locations import split_origin_destination
from .references import ReferenceMode, find_reference_id, generate_reference_id
from .contacts import extract_contact, redact, display_contact
from .dedupe import is_duplicate, filter_new
from .pipeline import LoadNormalizer, NormalizerConfig
from .ratelimit import RateLimiter

__version__ = "1.0.0"

__all__ = [
    "LoadRecord",
    "RawLoadRow",
    "ParsedRate",
    "OriginDestination",
    "Contact",
    "CSV_HEADERS",
    "VISION_CSV_HEADERS",
    "normalize_value",
    "parse_weight",
    "parse_equipment_length",
    "parse_rate",
    "split_origin_destination",
    "ReferenceMode",
    "find_reference_id",
    "generate_reference_id",
    "extract_contact",
    "redact",
    "display_contact",
    "is_duplicate",
    "filter_new",
    "LoadNormalizer",
    "NormalizerConfig",
    "RateLimiter",
]
