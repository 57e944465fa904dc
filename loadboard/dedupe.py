"""
Record identity for appending to a growing load file.

Two records are the same load when both carry the same board reference
number, or when origin, destination, company and total rate all agree.
Generated AUTO_ references only encode a prefix of the route, so they never
count as a reference match.
"""

import logging
from typing import Iterable, List, Optional, Set, Tuple
from .models import LoadRecord
from .references import is_synthetic

logger = logging.getLogger(__name__)

FieldKey = Tuple[Optional[str], Optional[str], Optional[str], Optional[int]]


def field_key(record: LoadRecord) -> FieldKey:
    return (record.origin, record.destination, record.company, record.rate_total_usd)


def board_reference(record: LoadRecord) -> Optional[str]:
    """The record's reference if it was read from the board, else None."""
    reference = record.reference_number
    if not reference or is_synthetic(reference):
        return None
    return reference


def is_duplicate(candidate: LoadRecord, existing: Iterable[LoadRecord]) -> bool:
    """True if ``candidate`` matches any record in ``existing``."""
    key = field_key(candidate)
    reference = board_reference(candidate)
    for record in existing:
        if reference and reference == board_reference(record):
            return True
        if field_key(record) == key:
            return True
    return False


class DuplicateIndex:
    """Set-backed version of ``is_duplicate`` for checking many candidates."""

    def __init__(self, records: Iterable[LoadRecord] = ()):
        self._references: Set[str] = set()
        self._keys: Set[FieldKey] = set()
        for record in records:
            self.add(record)

    def add(self, record: LoadRecord) -> None:
        reference = board_reference(record)
        if reference:
            self._references.add(reference)
        self._keys.add(field_key(record))

    def __contains__(self, record: LoadRecord) -> bool:
        reference = board_reference(record)
        if reference and reference in self._references:
            return True
        return field_key(record) in self._keys

    def __len__(self) -> int:
        return len(self._keys)


def filter_new(
    candidates: Iterable[LoadRecord],
    existing: Iterable[LoadRecord],
) -> Tuple[List[LoadRecord], int]:
    """
    Split incoming records into the ones not yet stored and a duplicate count.

    Records accepted earlier in the same batch count as existing, so a page
    listing the same load twice only contributes it once.
    """
    index = DuplicateIndex(existing)
    new_records: List[LoadRecord] = []
    duplicates = 0

    for record in candidates:
        if record in index:
            duplicates += 1
            continue
        index.add(record)
        new_records.append(record)

    logger.info(f"Duplicate check: {duplicates} duplicates, {len(new_records)} new records")
    return new_records, duplicates


def dedupe_records(records: Iterable[LoadRecord]) -> List[LoadRecord]:
    """Keep the first occurrence of each load, preserving order."""
    unique, _ = filter_new(records, [])
    return unique
