"""
Tests for scraped and synthetic reference IDs.
"""

from loadboard.references import (
    ReferenceMode,
    find_reference_id,
    generate_reference_id,
    is_synthetic,
    resolve_reference,
)


def test_anchored_reference_beats_earlier_bare_match():
    text = "Posted 12X3456 ago ... Reference ID 07B1234 Flatbed"
    assert find_reference_id(text) == "07B1234"


def test_anchored_reference_with_colon_and_newline():
    assert find_reference_id("Reference ID:\n 31K0042") == "31K0042"


def test_bare_reference_anywhere():
    assert find_reference_id("Details 07B1234 Van 53 ft") == "07B1234"


def test_no_reference_is_never_fabricated():
    assert find_reference_id("Flatbed 48 ft 44k lbs") is None
    assert find_reference_id("") is None
    assert find_reference_id(None) is None


def test_lowercase_letter_is_not_a_reference():
    assert find_reference_id("Reference ID 07b1234") is None


def test_generate_reference_id_known_value():
    ref = generate_reference_id("Salinas, CA", "Denver, CO", "Acme", 2700)
    assert ref == "AUTO_U2FSAW5H"


def test_generate_reference_id_is_idempotent():
    args = ("Manteca, CA", "Aurora, CO", "Blue Ridge Freight", "2700")
    assert generate_reference_id(*args) == generate_reference_id(*args)


def test_generate_reference_id_depends_on_inputs():
    a = generate_reference_id("Reno, NV", "Boise, ID", "Acme", 1000)
    b = generate_reference_id("Fresno, CA", "Boise, ID", "Acme", 1000)
    assert a.startswith("AUTO_") and len(a) == len("AUTO_") + 8
    assert a != b


def test_generate_reference_id_only_sees_leading_bytes():
    # Eight base64 characters cover the first six bytes of "origin-destination-..."
    a = generate_reference_id("Reno, NV", "Boise, ID", "Acme", 1000)
    b = generate_reference_id("Reno, NV", "Boise, ID", "Zenith", 1000)
    assert a == b
    assert is_synthetic(a)
    assert not is_synthetic("07B1234")
    assert not is_synthetic(None)


def test_generate_reference_id_treats_placeholders_as_empty():
    assert generate_reference_id("Reno, NV", "Boise, ID", "N/A", None) == \
        generate_reference_id("Reno, NV", "Boise, ID", None, "")


def test_scraped_mode_leaves_missing_reference_absent():
    assert resolve_reference(ReferenceMode.SCRAPED, page_text="nothing here", origin="Reno, NV") is None


def test_synthetic_mode_prefers_real_reference():
    ref = resolve_reference(
        ReferenceMode.SYNTHETIC,
        page_text="Reference ID 07B1234",
        origin="Reno, NV",
        destination="Boise, ID",
    )
    assert ref == "07B1234"


def test_synthetic_mode_fills_missing_reference():
    ref = resolve_reference(ReferenceMode.SYNTHETIC, scraped="N/A", origin="Reno, NV", destination="Boise, ID")
    assert is_synthetic(ref)
    assert ref == generate_reference_id("Reno, NV", "Boise, ID", None, None)


def test_mode_accepts_plain_string():
    assert resolve_reference("synthetic", origin="Reno, NV").startswith("AUTO_")
