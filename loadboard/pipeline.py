import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from pydantic import BaseModel
from .contacts import display_contact, resolve_contact
from .locations import split_origin_destination
from .models import LoadRecord, RawLoadRow
from .normalize import coerce_float, coerce_int, normalize_value, parse_equipment_length, parse_weight
from .rates import parse_rate, rate_amounts
from .references import ReferenceMode, resolve_reference

logger = logging.getLogger(__name__)

RawInput = Union[RawLoadRow, Dict[str, Any]]


class NormalizerConfig(BaseModel):
    """Which reference policy to apply and whether contacts are suppressed."""
    reference_mode: ReferenceMode = ReferenceMode.SCRAPED
    redact_contacts: bool = False


class LoadNormalizer:
    """Turns raw scraped rows into ``LoadRecord``s under one policy."""

    def __init__(self, config: Optional[NormalizerConfig] = None):
        self.config = config or NormalizerConfig()

    def normalize(self, raw: RawInput) -> LoadRecord:
        """
        Normalize one raw row. Never raises on malformed text; fields that
        cannot be parsed come back as None (or as their original text where
        the field keeps it).
        """
        row = raw if isinstance(raw, RawLoadRow) else RawLoadRow(**raw)

        route = split_origin_destination(row.origin, row.destination)
        rate_total, rate_per_mile = rate_amounts(parse_rate(row.rate))
        company = normalize_value(row.company)

        reference = resolve_reference(
            self.config.reference_mode,
            scraped=row.reference_number,
            page_text=row.page_text,
            origin=route.origin,
            destination=route.destination,
            company=company,
            rate=rate_total,
        )

        return LoadRecord(
            reference_number=reference,
            origin=route.origin,
            destination=route.destination,
            rate_total_usd=rate_total,
            rate_per_mile=rate_per_mile,
            company=company,
            contact=resolve_contact(row.contact, redact=self.config.redact_contacts),
            age_posted=normalize_value(row.age),
            equipment_type=normalize_value(row.equipment_type),
            weight=parse_weight(normalize_value(row.weight)),
            trip_distance=parse_equipment_length(normalize_value(row.length)),
            pickup_date=normalize_value(row.pickup_date),
            delivery_date=normalize_value(row.delivery_date),
            load_type=normalize_value(row.load_type),
        )

    @staticmethod
    def is_retainable(record: LoadRecord) -> bool:
        return record.has_route

    def normalize_rows(self, rows: Iterable[RawInput]) -> List[LoadRecord]:
        """Normalize a batch, dropping rows without both origin and destination."""
        records = []
        for idx, raw in enumerate(rows, 1):
            record = self.normalize(raw)
            if not self.is_retainable(record):
                logger.debug(f"Skipping row {idx}: missing origin or destination")
                continue
            logger.info(f"{record.origin} -> {record.destination} ({record.company or 'N/A'})")
            if record.contact:
                logger.debug(f"Contact: {display_contact(record.contact)}")
            records.append(record)
        return records

    def from_vision(self, data: Dict[str, Any]) -> Optional[LoadRecord]:
        """
        Validate a load read off a screenshot by a vision model.

        Loads without origin and destination are rejected. The confidence
        score is the share of non-empty fields in the model's answer.
        """
        if not isinstance(data, dict):
            return None

        route = split_origin_destination(data.get("origin"), data.get("destination"))
        if not route.origin or not route.destination:
            logger.warning("Skipping load without origin/destination")
            return None

        values = list(data.values())
        filled = [v for v in values if v is not None and v != ""]
        confidence = round(len(filled) / len(values), 2) if values else 0.0

        rate_total = coerce_int(data.get("rate_total_usd"))
        company = normalize_value(data.get("company"))
        contact_text = data.get("contact") or data.get("contact_phone") or data.get("contact_email")

        reference = resolve_reference(
            self.config.reference_mode,
            scraped=data.get("reference_number"),
            origin=route.origin,
            destination=route.destination,
            company=company,
            rate=rate_total,
        )

        return LoadRecord(
            reference_number=reference,
            origin=route.origin,
            destination=route.destination,
            rate_total_usd=rate_total,
            rate_per_mile=coerce_float(data.get("rate_per_mile")),
            company=company,
            contact=resolve_contact(normalize_value(contact_text), redact=self.config.redact_contacts),
            age_posted=normalize_value(data.get("age_posted")),
            equipment_type=normalize_value(data.get("equipment_type")),
            weight=parse_weight(normalize_value(data.get("weight"))),
            pickup_date=normalize_value(data.get("pickup_date")),
            delivery_date=normalize_value(data.get("delivery_date")),
            load_type=normalize_value(data.get("load_type")),
            confidence_score=confidence,
        )

    def repair(self, record: LoadRecord) -> LoadRecord:
        """
        Fix a stored record: re-split glued origin/destination and, in
        synthetic mode, fill a missing reference.
        """
        route = split_origin_destination(record.origin, record.destination)
        reference = resolve_reference(
            self.config.reference_mode,
            scraped=record.reference_number,
            origin=route.origin,
            destination=route.destination,
            company=record.company,
            rate=record.rate_total_usd,
        )
        contact = None if self.config.redact_contacts else record.contact
        return record.model_copy(update={
            "origin": route.origin,
            "destination": route.destination,
            "reference_number": reference,
            "contact": contact,
        })
