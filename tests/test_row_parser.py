"""Tests for the row parser: numeric, boolean and string coercion."""

import pytest

from vendor_pricing.pricing.errors import RowParseError
from vendor_pricing.pricing.header_mapper import map_headers
from vendor_pricing.pricing.row_parser import parse_bool, parse_number, parse_row


@pytest.mark.parametrize(
    "raw, expected",
    [("45", 45.0), (" 45.50 ", 45.5), ("$1,299.00", 1299.0), ("12,345,678.5", 12345678.5), ("0", 0.0), ("-3", -3.0), ("", None), ("abc", None), ("nan", None), ("inf", None)],
)
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("true", True), ("YES", True), ("1", True), ("false", False), ("No", False), ("0", False), ("", False), ("maybe", None)],
)
def test_parse_bool(raw, expected):
    assert parse_bool(raw) is expected


def test_parse_row_research():
    mapping = map_headers(["peptide_name", "price_usd", "size_mg", "shipping_usd", "notes"], "research")
    row = parse_row([" BPC-157 ", "$45", "5", "", "  "], mapping, line=3)
    assert row.line == 3
    assert row.get("peptide_name") == "BPC-157"
    assert row.get("price_usd") == 45.0
    assert row.get("size_mg") == 5.0
    assert row.get("shipping_usd") is None
    assert row.get("notes") is None
    assert row.get("lab_test_url") is None


def test_required_number_unparsable_raises():
    mapping = map_headers(["peptide_name", "price_usd", "size_mg"], "research")
    with pytest.raises(RowParseError) as exc:
        parse_row(["BPC-157", "forty", "5"], mapping, line=7)
    assert exc.value.field == "price_usd"
    assert exc.value.line == 7


@pytest.mark.parametrize("raw", ["2,5", "1,2,3", "12,34", "1,234,5"])
def test_comma_only_parses_as_thousands_grouping(raw):
    assert parse_number(raw) is None
    mapping = map_headers(["peptide_name", "price_usd", "size_mg"], "research")
    with pytest.raises(RowParseError) as exc:
        parse_row(["BPC-157", "45", raw], mapping, line=1)
    assert exc.value.field == "size_mg"


def test_required_number_blank_is_left_for_validator():
    mapping = map_headers(["peptide_name", "price_usd", "size_mg"], "research")
    row = parse_row(["BPC-157", "  ", "5"], mapping, line=1)
    assert row.get("price_usd") is None


def test_optional_number_unparsable_is_none():
    mapping = map_headers(["peptide_name", "price_usd", "size_mg", "shipping_usd"], "research")
    row = parse_row(["BPC-157", "45", "5", "free"], mapping, line=1)
    assert row.get("shipping_usd") is None


def test_short_row_cells_are_absent():
    mapping = map_headers(["peptide_name", "price_usd", "size_mg", "shipping_usd"], "research")
    row = parse_row(["BPC-157", "45", "5"], mapping, line=1)
    assert row.get("shipping_usd") is None


def test_boolean_parse_error_and_default():
    mapping = map_headers(
        ["peptide_name", "subscription_price_monthly", "subscription_includes_medication", "glp_type", "mg_per_visit", "visit_count"],
        "telehealth",
    )
    row = parse_row(["Semaglutide", "299", "", "Semaglutide", "2.5", "4"], mapping, line=1)
    assert row.get("subscription_includes_medication") is False
    # unmapped boolean column defaults to False
    assert row.get("consultation_included") is False
    with pytest.raises(RowParseError):
        parse_row(["Semaglutide", "299", "sometimes", "Semaglutide", "2.5", "4"], mapping, line=2)
