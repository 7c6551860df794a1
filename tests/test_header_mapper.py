"""Tests for the header mapper: alias folding, ignored columns, missing required columns."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vendor_pricing.pricing.errors import HeaderMappingError
from vendor_pricing.pricing.header_mapper import map_headers
from vendor_pricing.pricing.rules import normalize_header


class TestNormalizeHeader(unittest.TestCase):
    def test_punctuation_and_case_fold_to_same_key(self):
        self.assertEqual(normalize_header(" Price (USD) "), "price_usd")
        self.assertEqual(normalize_header("price_usd"), "price_usd")
        self.assertEqual(normalize_header("PRICE-USD"), "price_usd")

    def test_blank(self):
        self.assertEqual(normalize_header("   "), "")


class TestMapHeaders(unittest.TestCase):
    def test_canonical_and_alias_headers(self):
        mapping = map_headers(["Peptide", " Price (USD) ", "Size (mg)", "Shipping"], "research")
        self.assertEqual(
            mapping.columns,
            {"peptide_name": 0, "price_usd": 1, "size_mg": 2, "shipping_usd": 3},
        )
        self.assertEqual(mapping.ignored_columns, [])

    def test_unknown_and_derived_columns_are_ignored(self):
        mapping = map_headers(["peptide_name", "price_usd", "size_mg", "price_per_mg", "Color"], "research")
        self.assertIsNone(mapping.index_of("price_per_mg"))
        self.assertEqual(mapping.ignored_columns, ["price_per_mg", "Color"])

    def test_first_matching_column_wins(self):
        mapping = map_headers(["peptide_name", "price", "price_usd", "size_mg"], "research")
        self.assertEqual(mapping.index_of("price_usd"), 1)
        self.assertIn("price_usd", mapping.ignored_columns)

    def test_missing_required_column_lists_every_field(self):
        with self.assertRaises(HeaderMappingError) as ctx:
            map_headers(["peptide_name", "shipping_usd"], "research")
        self.assertEqual(ctx.exception.missing, ["price_usd", "size_mg"])
        self.assertIn("price_usd", str(ctx.exception))
        self.assertIn("research", str(ctx.exception))

    def test_tiers_do_not_share_columns(self):
        # a research header is not a valid brand header
        with self.assertRaises(HeaderMappingError):
            map_headers(["peptide_name", "price_usd", "size_mg"], "brand")

    def test_telehealth_aliases(self):
        mapping = map_headers(
            ["peptide", "Monthly Price (USD)", "glp", "dose_mg_per_injection", "injections_per_month"],
            "telehealth",
        )
        self.assertEqual(mapping.index_of("subscription_price_monthly"), 1)
        self.assertEqual(mapping.index_of("glp_type"), 2)
        self.assertEqual(mapping.index_of("mg_per_visit"), 3)
        self.assertEqual(mapping.index_of("visit_count"), 4)

    def test_unknown_tier(self):
        with self.assertRaises(ValueError):
            map_headers(["peptide_name"], "wholesale")


if __name__ == "__main__":
    unittest.main()
