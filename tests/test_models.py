"""
Tests for LoadRecord CSV conversion and settings.
"""

from datetime import datetime, timezone
from loadboard.config import Settings
from loadboard.models import CSV_HEADERS, FULL_CSV_HEADERS, VISION_CSV_HEADERS, LoadRecord, RawLoadRow
from loadboard.references import ReferenceMode


def test_header_order():
    assert CSV_HEADERS == [
        "reference_number", "origin", "destination", "rate_total_usd", "rate_per_mile",
        "company", "contact", "age_posted", "extracted_at",
    ]
    assert VISION_CSV_HEADERS[len(CSV_HEADERS):] == [
        "equipment_type", "weight", "pickup_date", "delivery_date", "load_type", "confidence_score",
    ]
    assert FULL_CSV_HEADERS[-2:] == ["trip_distance", "estimated_eta"]


def test_to_csv_row():
    when = datetime(2025, 7, 8, 12, 30, tzinfo=timezone.utc)
    row = LoadRecord(origin="Reno, NV", rate_total_usd=1500, extracted_at=when).to_csv_row()
    assert list(row) == CSV_HEADERS
    assert row["rate_total_usd"] == 1500
    assert row["contact"] == ""
    assert row["extracted_at"] == "2025-07-08T12:30:00+00:00"


def test_from_csv_row_tolerates_bad_cells():
    record = LoadRecord.from_csv_row({
        "reference_number": "N/A",
        "origin": "Reno, NV",
        "rate_total_usd": "abc",
        "rate_per_mile": "",
        "extracted_at": "2025-07-08T12:30:00.000Z",
        "unknown": "x",
    })
    assert record.reference_number is None
    assert record.rate_total_usd is None
    assert record.rate_per_mile is None
    assert record.extracted_at == datetime(2025, 7, 8, 12, 30, tzinfo=timezone.utc)


def test_from_csv_row_bad_timestamp_uses_now():
    record = LoadRecord.from_csv_row({"extracted_at": "yesterday"})
    assert record.extracted_at.tzinfo is not None


def test_raw_row_stringifies_numbers():
    assert RawLoadRow(rate=2700, weight=44000.0).rate == "2700"


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("LOADBOARD_OUTPUT_DIR", str(tmp_path))
    monkeypatch.setenv("LOADBOARD_REFERENCE_MODE", "synthetic")
    monkeypatch.setenv("LOADBOARD_REDACT", "yes")
    monkeypatch.setenv("LOADBOARD_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.output_path == tmp_path / "loadboard_loads.csv"
    assert settings.reference_mode is ReferenceMode.SYNTHETIC
    assert settings.redact is True
    assert settings.log_level == "DEBUG"
