"""
Example usage of the load board normalizer.
"""

import asyncio
import json
import os
from loadboard import LoadNormalizer, NormalizerConfig, ReferenceMode, is_duplicate
from loadboard.distance import DistanceClient, fill_distances
from loadboard.ratelimit import RateLimiter


RAW_ROWS = [
    {
        "origin": "Salinas, CADenver, CO",
        "rate": "$2,700$2.17*/mi",
        "company": "Westbound Logistics",
        "contact": "(555) 123-4567 x12",
        "age": "5m",
        "weight": "44k lbs",
        "page_text": "Load details Reference ID 07B1234 Flatbed",
    },
    {
        "origin": "Manteca, CA",
        "destination": "Aurora, CO",
        "rate": "$1.85/mi",
        "company": "Blue Ridge Freight",
        "contact": "dispatch@blueridge.example",
        "weight": "45,000",
    },
    {
        "origin": "–",
        "destination": "Reno, NV",
        "rate": "-",
    },
]


def example_1_basic_usage():
    """Normalize a few raw rows."""
    print("=" * 60)
    print("Example 1: Basic normalization")
    print("=" * 60)

    normalizer = LoadNormalizer()
    records = normalizer.normalize_rows(RAW_ROWS)

    print(f"\n✓ Kept {len(records)} of {len(RAW_ROWS)} rows")
    for i, record in enumerate(records, 1):
        print(f"\n{i}. {json.dumps(record.to_csv_row(), indent=2)}")


def example_2_redaction_and_synthetic_ids():
    """Vision-style pipeline: no contacts, AUTO_ references."""
    print("\n" + "=" * 60)
    print("Example 2: Redaction mode with synthetic references")
    print("=" * 60)

    config = NormalizerConfig(reference_mode=ReferenceMode.SYNTHETIC, redact_contacts=True)
    normalizer = LoadNormalizer(config)

    for record in normalizer.normalize_rows(RAW_ROWS):
        print(f"  {record.reference_number}: {record.origin} -> {record.destination} contact={record.contact}")


def example_3_dedup():
    """Check new rows against what is already stored."""
    print("\n" + "=" * 60)
    print("Example 3: Duplicate detection")
    print("=" * 60)

    normalizer = LoadNormalizer()
    existing = normalizer.normalize_rows(RAW_ROWS[:1])
    candidate = normalizer.normalize({**RAW_ROWS[0], "company": "Someone Else"})

    print(f"  Same reference, different company -> duplicate: {is_duplicate(candidate, existing)}")


async def example_4_distances():
    """Fill trip distances through a rate-limited client (needs GOOGLE_MAPS_API_KEY)."""
    print("\n" + "=" * 60)
    print("Example 4: Distance lookup")
    print("=" * 60)

    records = LoadNormalizer().normalize_rows(RAW_ROWS)
    client = DistanceClient(os.getenv("GOOGLE_MAPS_API_KEY"), limiter=RateLimiter(min_interval=0.1))

    try:
        for record in await fill_distances(records, client):
            print(f"  {record.origin} -> {record.destination}: {record.trip_distance or 'N/A'} ({record.estimated_eta or 'N/A'})")
    except Exception as e:
        print(f"Error: {e}")


def main():
    """Run examples."""
    print("Load Board Normalizer - Example Usage\n")
    print("Set GOOGLE_MAPS_API_KEY before running example 4\n")

    example_1_basic_usage()
    example_2_redaction_and_synthetic_ids()
    example_3_dedup()
    # asyncio.run(example_4_distances())


if __name__ == "__main__":
    main()
