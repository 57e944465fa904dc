from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


CSV_HEADERS = [
    "reference_number",
    "origin",
    "destination",
    "rate_total_usd",
    "rate_per_mile",
    "company",
    "contact",
    "age_posted",
    "extracted_at",
]

VISION_CSV_HEADERS = CSV_HEADERS + [
    "equipment_type",
    "weight",
    "pickup_date",
    "delivery_date",
    "load_type",
    "confidence_score",
]

FULL_CSV_HEADERS = VISION_CSV_HEADERS + ["trip_distance", "estimated_eta"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ParsedRate(BaseModel):
    """Rate text split into its display parts ("$2,700", "$2.17/mi")."""
    total_rate: Optional[str] = None
    rate_per_mile: Optional[str] = None


class OriginDestination(BaseModel):
    origin: Optional[str] = None
    destination: Optional[str] = None


class ContactKind(str, Enum):
    PHONE = "phone"
    EMAIL = "email"
    TEXT = "text"


class Contact(BaseModel):
    """A classified piece of contact text."""
    kind: ContactKind
    value: str


class RawLoadRow(BaseModel):
    """Raw strings handed over by whatever scraped the load board."""
    model_config = ConfigDict(extra="ignore")

    origin: Optional[str] = None
    destination: Optional[str] = None
    rate: Optional[str] = None
    company: Optional[str] = None
    contact: Optional[str] = None
    age: Optional[str] = None
    weight: Optional[str] = None
    length: Optional[str] = None
    equipment_type: Optional[str] = None
    page_text: Optional[str] = None
    reference_number: Optional[str] = None
    pickup_date: Optional[str] = None
    delivery_date: Optional[str] = None
    load_type: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def stringify(cls, v):
        # Scraped cells occasionally arrive as numbers ("rate": 2700)
        if v is None or isinstance(v, str):
            return v
        return str(v)


class LoadRecord(BaseModel):
    """One normalized freight listing."""
    reference_number: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    rate_total_usd: Optional[int] = None
    rate_per_mile: Optional[float] = None
    company: Optional[str] = None
    contact: Optional[str] = None
    age_posted: Optional[str] = None
    equipment_type: Optional[str] = None
    weight: Optional[str] = None
    pickup_date: Optional[str] = None
    delivery_date: Optional[str] = None
    load_type: Optional[str] = None
    confidence_score: Optional[float] = None
    trip_distance: Optional[str] = None
    estimated_eta: Optional[str] = None
    extracted_at: datetime = Field(default_factory=_utcnow)

    @property
    def has_route(self) -> bool:
        return bool(self.origin) and bool(self.destination)

    def to_csv_row(self, headers: List[str] = CSV_HEADERS) -> Dict[str, Any]:
        data = self.model_dump()
        row = {}
        for header in headers:
            value = data.get(header)
            if value is None:
                value = ""
            elif isinstance(value, datetime):
                value = value.isoformat()
            row[header] = value
        return row

    @classmethod
    def from_csv_row(cls, row: Dict[str, Any]) -> "LoadRecord":
        """Rebuild a record from a CSV dict. Blank or unparseable cells become None."""
        from .normalize import coerce_float, coerce_int, normalize_value

        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            if name not in row:
                continue
            values[name] = normalize_value(row[name])

        values["rate_total_usd"] = coerce_int(values.get("rate_total_usd"))
        values["rate_per_mile"] = coerce_float(values.get("rate_per_mile"))
        values["confidence_score"] = coerce_float(values.get("confidence_score"))

        extracted_at = values.pop("extracted_at", None)
        if extracted_at:
            try:
                values["extracted_at"] = datetime.fromisoformat(extracted_at.replace("Z", "+00:00"))
            except ValueError:
                pass

        return cls(**values)
