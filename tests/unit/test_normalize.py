import math

import pytest

from catalog_admin.domain.normalize import (
    clean_label,
    dedupe_normalized,
    normalize_option,
    parse_price,
    union_ordered,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  philips ", "PHILIPS"),
        ("Led Bulbs", "LED BULBS"),
        ("already UPPER", "ALREADY UPPER"),
        ("   ", ""),
        (None, ""),
    ],
)
def test_normalize_option(raw, expected):
    assert normalize_option(raw) == expected


def test_normalize_keeps_inner_spacing():
    assert normalize_option(" high  bay ") == "HIGH  BAY"


def test_clean_label_keeps_case():
    assert clean_label("  Red ") == "Red"
    assert clean_label(None) == ""


def test_union_ordered_appends_missing_in_order():
    assert union_ordered(["B", "A"], ["A", "C", "D", "C"]) == ["B", "A", "C", "D"]


def test_dedupe_normalized_collapses_case_variants():
    assert dedupe_normalized(["led", " LED ", "Tube"]) == ["LED", "TUBE"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("120.50", 120.5),
        (" 7 ", 7.0),
        (12, 12.0),
        (3.5, 3.5),
        ("abc", 0),
        ("", 0),
        (None, 0),
        (True, 0),
        ("nan", 0),
        ("inf", 0),
        (math.inf, 0),
    ],
)
def test_parse_price_is_permissive(raw, expected):
    assert parse_price(raw) == expected
