import pytest

from services.activity_types import (
    VALID_ACTIVITY_TYPES,
    get_activity_type_style,
    list_activity_types,
    validate_activity_type,
)


def test_eleven_canonical_types():
    assert len(VALID_ACTIVITY_TYPES) == 11
    assert len(set(VALID_ACTIVITY_TYPES)) == 11


@pytest.mark.parametrize("name", VALID_ACTIVITY_TYPES)
def test_canonical_name_is_returned_unchanged(name):
    assert validate_activity_type(name) == name


def test_canonical_name_is_trimmed():
    assert validate_activity_type("  Food & Drink ") == "Food & Drink"


@pytest.mark.parametrize("label, expected", [
    ("cozy boutique hotel", "Accommodations"),
    ("xyz123", "Other"),
    ("Natural History Museum", "Culture"),
    ("FLIGHT to Rome", "Transportation"),
    ("night train", "Transportation"),
    ("rooftop cafe", "Food & Drink"),
    ("street market", "Shopping"),
    ("jazz concert", "Entertainment"),
    ("day spa", "Wellness"),
    ("summer festival", "Events"),
    ("scenic drive", "Sightseeing"),
    ("outdoor climbing", "Adventure"),
    ("activity", "Other"),
])
def test_keyword_fallback(label, expected):
    assert validate_activity_type(label) == expected


def test_first_keyword_in_table_order_wins():
    # "museum" comes before "bar" in the table
    assert validate_activity_type("museum bar") == "Culture"
    # "restaurant" comes before "hotel"
    assert validate_activity_type("hotel restaurant") == "Food & Drink"


@pytest.mark.parametrize("label", [None, "", "   "])
def test_empty_input_is_other(label):
    assert validate_activity_type(label) == "Other"


def test_always_returns_a_canonical_type_and_is_deterministic():
    labels = ["museum", "Hotel", "sport bar", "???", "Transportation", "shopping spree", "random words", "EVENT"]
    for label in labels:
        first = validate_activity_type(label)
        assert first in VALID_ACTIVITY_TYPES
        assert validate_activity_type(label) == first


def test_styles_cover_every_type_and_default_to_other():
    assert [t["name"] for t in list_activity_types()] == list(VALID_ACTIVITY_TYPES)
    assert get_activity_type_style("Culture")["hex"] == "#6366F1"
    assert get_activity_type_style("not a type") == get_activity_type_style("Other")
