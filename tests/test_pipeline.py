"""
End-to-end normalization of raw rows into LoadRecords.
"""

from loadboard.dedupe import filter_new
from loadboard.models import LoadRecord, RawLoadRow
from loadboard.pipeline import LoadNormalizer, NormalizerConfig
from loadboard.references import ReferenceMode


def test_end_to_end_row():
    record = LoadNormalizer().normalize({
        "origin": "Salinas, CADenver, CO",
        "rate": "$2,700$2.17*/mi",
        "weight": "44k lbs",
    })
    assert record.origin == "Salinas, CA"
    assert record.destination == "Denver, CO"
    assert record.rate_total_usd == 2700
    assert record.rate_per_mile == 2.17
    assert record.weight == "44k lbs"
    assert record.extracted_at is not None


def test_full_row():
    row = RawLoadRow(
        origin="Manteca, CA",
        destination="Aurora, CO",
        rate="$1.85/mi",
        company="  Blue Ridge Freight ",
        contact="dispatch@blueridge.example",
        age="2h",
        weight="45,000",
        length="53ft",
        equipment_type="Van",
        page_text="Reference ID 07B1234",
    )
    record = LoadNormalizer().normalize(row)
    assert record.reference_number == "07B1234"
    assert record.rate_total_usd is None
    assert record.rate_per_mile == 1.85
    assert record.company == "Blue Ridge Freight"
    assert record.contact == "dispatch@blueridge.example"
    assert record.age_posted == "2h"
    assert record.weight == "45000 lbs"
    assert record.trip_distance == "53 ft"
    assert record.equipment_type == "Van"


def test_malformed_input_degrades_to_none():
    record = LoadNormalizer().normalize({
        "origin": "–",
        "destination": "N/A",
        "rate": "Call for rate",
        "company": "-",
        "contact": "",
        "age": None,
        "weight": 42000,
    })
    assert record.origin is None
    assert record.destination is None
    assert record.rate_total_usd is None
    assert record.rate_per_mile is None
    assert record.company is None
    assert record.contact is None
    assert record.weight == "42000 lbs"
    assert not LoadNormalizer.is_retainable(record)


def test_unknown_keys_are_ignored():
    record = LoadNormalizer().normalize({"origin": "Reno, NV", "destination": "Boise, ID", "deadhead": "12 mi"})
    assert record.origin == "Reno, NV"


def test_redaction_mode_drops_contact():
    normalizer = LoadNormalizer(NormalizerConfig(redact_contacts=True))
    record = normalizer.normalize({"origin": "Reno, NV", "destination": "Boise, ID", "contact": "555-123-4567"})
    assert record.contact is None


def test_scraped_mode_never_invents_reference():
    record = LoadNormalizer().normalize({"origin": "Reno, NV", "destination": "Boise, ID", "company": "Acme"})
    assert record.reference_number is None


def test_synthetic_mode_generates_reference():
    normalizer = LoadNormalizer(NormalizerConfig(reference_mode=ReferenceMode.SYNTHETIC))
    raw = {"origin": "Reno, NV", "destination": "Boise, ID", "company": "Acme", "rate": "$1,500"}
    first = normalizer.normalize(raw)
    second = normalizer.normalize(raw)
    assert first.reference_number.startswith("AUTO_")
    assert first.reference_number == second.reference_number


def test_normalize_rows_drops_rows_without_route():
    rows = [
        {"origin": "Manteca, CAAurora, CO"},
        {"origin": "Reno, NV"},
        {"destination": "Boise, ID"},
    ]
    records = LoadNormalizer().normalize_rows(rows)
    assert len(records) == 1
    assert records[0].destination == "Aurora, CO"


def test_from_vision():
    normalizer = LoadNormalizer(NormalizerConfig(reference_mode=ReferenceMode.SYNTHETIC))
    record = normalizer.from_vision({
        "origin": "Dallas, TX",
        "destination": "Houston, TX",
        "rate_total_usd": "1500",
        "rate_per_mile": "2.5",
        "company": "Lone Star",
        "contact_email": "ops@lonestar.example",
        "pickup_date": None,
    })
    assert record.rate_total_usd == 1500
    assert record.rate_per_mile == 2.5
    assert record.contact == "ops@lonestar.example"
    assert record.confidence_score == 0.86
    assert record.reference_number.startswith("AUTO_")


def test_from_vision_rejects_missing_route():
    normalizer = LoadNormalizer()
    assert normalizer.from_vision({"origin": "Dallas, TX"}) is None
    assert normalizer.from_vision(["not", "a", "dict"]) is None


def test_repair_splits_and_fills_reference():
    stored = LoadRecord(origin="Ripon, CAAurora, CO", company="Acme", rate_total_usd=2100, contact="a@b.com")
    normalizer = LoadNormalizer(NormalizerConfig(reference_mode=ReferenceMode.SYNTHETIC, redact_contacts=True))
    fixed = normalizer.repair(stored)
    assert fixed.origin == "Ripon, CA"
    assert fixed.destination == "Aurora, CO"
    assert fixed.reference_number.startswith("AUTO_")
    assert fixed.contact is None
    assert fixed.extracted_at == stored.extracted_at


def test_repair_keeps_real_reference():
    stored = LoadRecord(reference_number="07B1234", origin="Reno, NV", destination="Boise, ID")
    fixed = LoadNormalizer(NormalizerConfig(reference_mode=ReferenceMode.SYNTHETIC)).repair(stored)
    assert fixed == stored


def test_synthetic_loads_from_same_origin_stay_distinct():
    normalizer = LoadNormalizer(NormalizerConfig(reference_mode=ReferenceMode.SYNTHETIC))
    denver = normalizer.normalize(
        {"origin": "Salinas, CA", "destination": "Denver, CO", "company": "Acme", "rate": "$2,700"})
    phoenix = normalizer.normalize(
        {"origin": "Salinas, CA", "destination": "Phoenix, AZ", "company": "Zenith", "rate": "$900"})

    assert denver.reference_number == phoenix.reference_number
    new, duplicates = filter_new([phoenix], [denver])
    assert new == [phoenix]
    assert duplicates == 0


def test_from_vision_non_finite_numbers():
    record = LoadNormalizer().from_vision({
        "origin": "Dallas, TX",
        "destination": "Houston, TX",
        "rate_total_usd": float("nan"),
        "rate_per_mile": float("inf"),
    })
    assert record.rate_total_usd is None
    assert record.rate_per_mile is None
