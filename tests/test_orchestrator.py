"""Tests for the ingestion orchestrator: partial success, line numbers, fatal header errors."""

import csv

import pytest

from vendor_pricing.pricing.errors import HeaderMappingError, MalformedCsvError
from vendor_pricing.pricing.orchestrator import ingest_csv_text, ingest_rows


def _research_rows(n: int, bad_line: int | None = None) -> list[list[str]]:
    rows = []
    for i in range(1, n + 1):
        price = "-5" if i == bad_line else "45"
        rows.append([f"Peptide {i}", price, "5"])
    return rows


def test_one_bad_row_in_ten():
    result = ingest_rows(["peptide_name", "price_usd", "size_mg"], _research_rows(10, bad_line=5), "research")
    s = result.summary
    assert (s.total_rows, s.success_count, s.failure_count) == (10, 9, 1)
    assert s.errors[0].line == 5
    assert s.errors[0].kind == "validation"
    assert "price_usd must be > 0" in s.errors[0].message
    assert [r.line for r in result.valid_rows] == [1, 2, 3, 4, 6, 7, 8, 9, 10]


def test_counts_always_add_up():
    rows = _research_rows(4, bad_line=2) + [["Peptide X", "abc", "5"]]
    s = ingest_rows(["peptide_name", "price_usd", "size_mg"], rows, "research").summary
    assert s.success_count + s.failure_count == s.total_rows == 5
    assert [e.kind for e in s.errors] == ["validation", "parse"]


def test_missing_required_header_is_fatal():
    with pytest.raises(HeaderMappingError) as exc:
        ingest_rows(["peptide_name", "size_mg"], _research_rows(3), "research")
    assert exc.value.missing == ["price_usd"]


@pytest.mark.parametrize(
    "tier, header, row, field",
    [
        ("research", ["peptide_name", "price_usd", "size_mg"], ["BPC-157", "", "5"], "price_usd"),
        (
            "telehealth",
            ["peptide_name", "subscription_price_monthly", "subscription_includes_medication", "glp_type", "mg_per_visit", "visit_count"],
            ["Semaglutide", "299", "true", "", "2.5", "4"],
            "glp_type",
        ),
        ("brand", ["peptide_name", "dose_strength", "price_per_dose", "dose_count"], ["Semaglutide", "0.25mg", "185", ""], "dose_count"),
    ],
)
def test_blank_required_field_rejects_the_row(tier, header, row, field):
    s = ingest_rows(header, [row], tier).summary
    assert s.failure_count == 1
    assert s.errors[0].message == f"{field} is required"
    assert s.errors[0].fields == [field]


def test_valid_row_payload():
    result = ingest_rows(["peptide_name", "price_usd", "size_mg", "vendor_name"], [["BPC-157", "45", "5", "Acme"]], "research")
    row = result.valid_rows[0]
    assert row.tier == "research"
    assert row.peptide_name == "BPC-157"
    assert row.vendor_name == "Acme"
    assert row.pricing.price_per_mg == pytest.approx(9.0, abs=1e-9)


def test_csv_text_skips_blank_lines_and_bom():
    text = "\ufeffpeptide_name,price_usd,size_mg\nBPC-157,45,5\n\n,,\nTB-500,0,10\n"
    result = ingest_csv_text(text, "research")
    s = result.summary
    assert s.total_rows == 2
    assert s.success_count == 1
    assert s.errors[0].line == 2


def test_csv_text_with_quoted_commas_and_ignored_columns():
    text = 'Peptide,"Price (USD)",Size (mg),Color\n"BPC-157, 5mg","$1,045.00",5,blue\n'
    result = ingest_csv_text(text, "research")
    assert result.ignored_columns == ["Color"]
    assert result.valid_rows[0].peptide_name == "BPC-157, 5mg"
    assert result.valid_rows[0].pricing.price_usd == 1045.0


def test_empty_input_is_a_header_error():
    with pytest.raises(HeaderMappingError):
        ingest_csv_text("", "brand")


def test_oversized_cell_is_read_not_fatal():
    text = "peptide_name,price_usd,size_mg\nBPC-157,45,5\n" + "X" * 200_000 + ",45,5\nTB-500,abc,5\n"
    s = ingest_csv_text(text, "research").summary
    assert (s.total_rows, s.success_count, s.failure_count) == (3, 2, 1)
    assert s.errors[0].line == 3


def test_unreadable_csv_is_a_single_error():
    text = "peptide_name,price_usd,size_mg\n" + "X" * (csv.field_size_limit() + 1) + ",45,5\n"
    with pytest.raises(MalformedCsvError):
        ingest_csv_text(text, "research")
