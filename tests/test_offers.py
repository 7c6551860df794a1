"""Tests for offer admin operations: verification transitions, ranking, manual entry, bulk actions."""

import sys
import unittest
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vendor_pricing.db import init_db
from vendor_pricing.db.repositories import offer_repo
from vendor_pricing.pricing import offers
from vendor_pricing.pricing.errors import (
    CrossTierComparisonError,
    HeaderMappingError,
    InvalidOfferError,
    InvalidTransitionError,
    OfferNotFoundError,
    TierNotSupportedError,
)
from vendor_pricing.pricing.orchestrator import ingest_rows
from vendor_pricing.pricing.persistence import persist_offers
from vendor_pricing.pricing.verification import can_transition, check_transition, status_after_overwrite
from tests.helpers import make_vendor


def _seed(vendor_id, batch_id, *rows):
    valid = ingest_rows(["peptide_name", "price_usd", "size_mg"], [list(r) for r in rows], "research").valid_rows
    persist_offers(valid, vendor_id, "research", batch_id, "mod")
    return [offer_repo.find_offer(vendor_id, r[0], "research") for r in rows]


class TestVerificationStateMachine(unittest.TestCase):
    def test_allowed(self):
        check_transition("pending", "verified")
        check_transition("pending", "rejected")

    def test_everything_else_is_rejected(self):
        for current, target in [
            ("verified", "rejected"),
            ("rejected", "verified"),
            ("verified", "pending"),
            ("rejected", "pending"),
            ("verified", "verified"),
            ("pending", "pending"),
        ]:
            self.assertFalse(can_transition(current, target))
            with self.assertRaises(InvalidTransitionError):
                check_transition(current, target)

    def test_overwrite_always_returns_to_pending(self):
        self.assertEqual(status_after_overwrite(), "pending")


class TestOfferOperations(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def setUp(self):
        self.vendor = make_vendor("research", "brand")
        self.batch = str(uuid.uuid4())

    def test_verify_then_verify_again_conflicts(self):
        (offer,) = _seed(self.vendor["id"], self.batch, ("BPC-157", "45", "5"))
        verified = offers.verify_offer(offer["id"], "admin-1")
        self.assertEqual(verified["verification_status"], "verified")
        self.assertEqual(verified["verified_by"], "admin-1")
        self.assertIsNotNone(verified["verified_at"])
        with self.assertRaises(InvalidTransitionError):
            offers.reject_offer(offer["id"], "admin-1")

    def test_unknown_offer(self):
        with self.assertRaises(OfferNotFoundError):
            offers.verify_offer("missing", "admin-1")
        with self.assertRaises(OfferNotFoundError):
            offers.price_history("missing")

    def test_rank_by_price_per_mg(self):
        _seed(self.vendor["id"], self.batch, ("A", "50", "5"), ("B", "20", "5"), ("C", "90", "10"))
        ranked = offers.list_offers(tier="research", vendor_id=self.vendor["id"], sort="price")
        self.assertEqual([o["peptide_name"] for o in ranked], ["B", "C", "A"])
        ranked = offers.list_offers(tier="research", vendor_id=self.vendor["id"], sort="price", descending=True)
        self.assertEqual([o["peptide_name"] for o in ranked], ["A", "C", "B"])

    def test_updated_sort_defaults_to_newest_first(self):
        _seed(self.vendor["id"], self.batch, ("Older", "50", "5"))
        _seed(self.vendor["id"], self.batch, ("Newer", "20", "5"))
        for descending, expected in [(None, ["Newer", "Older"]), (True, ["Newer", "Older"]), (False, ["Older", "Newer"])]:
            rows = offers.list_offers(vendor_id=self.vendor["id"], descending=descending)
            self.assertEqual([o["peptide_name"] for o in rows], expected)

    def test_price_sort_without_tier_is_rejected(self):
        with self.assertRaises(CrossTierComparisonError):
            offers.list_offers(vendor_id=self.vendor["id"], sort="price")

    def test_rank_offers_refuses_mixed_tiers(self):
        mixed = [
            {"tier": "research", "pricing": {"price_per_mg": 1.0}},
            {"tier": "brand", "pricing": {"price_per_dose": 1.0}},
        ]
        with self.assertRaises(CrossTierComparisonError):
            offers.rank_offers(mixed)

    def test_unknown_sort_key(self):
        with self.assertRaises(ValueError):
            offers.list_offers(sort="rating")

    def test_manual_entry_accepts_camel_case(self):
        offer = offers.create_manual_offer(
            {"peptideName": "Semaglutide", "doseStrength": "0.25mg", "pricePerDose": 185, "doseCount": 4, "brandName": "Wegovy"},
            self.vendor["id"],
            "brand",
            "mod-1",
        )
        self.assertEqual(offer["tier"], "brand")
        self.assertEqual(offer["price_source_type"], "manual")
        self.assertEqual(offer["pricing"]["total_price"], 740.0)
        self.assertEqual(offer["pricing"]["brand_name"], "Wegovy")

    def test_manual_entry_validation_and_header_errors(self):
        with self.assertRaises(InvalidOfferError) as ctx:
            offers.create_manual_offer(
                {"peptide_name": "BPC-157", "price_usd": 45, "size_mg": 0}, self.vendor["id"], "research", None
            )
        self.assertIn("size_mg must be > 0", str(ctx.exception))
        with self.assertRaises(HeaderMappingError):
            offers.create_manual_offer({"peptide_name": "BPC-157"}, self.vendor["id"], "research", None)

    def test_manual_entry_checks_tier_support(self):
        with self.assertRaises(TierNotSupportedError):
            offers.create_manual_offer({"peptide_name": "X"}, self.vendor["id"], "telehealth", None)

    def test_bulk_verify_by_batch_skips_non_pending(self):
        first, second, third = _seed(self.vendor["id"], self.batch, ("A", "10", "1"), ("B", "20", "2"), ("C", "30", "3"))
        offers.reject_offer(third["id"], "admin")
        result = offers.bulk_set_status({"upload_batch_id": self.batch}, "verified", "admin")
        self.assertEqual((result.matched, result.succeeded, result.skipped, result.failed), (3, 2, 1, 0))
        self.assertEqual(offer_repo.get_offer(first["id"])["verification_status"], "verified")
        self.assertEqual(offer_repo.get_offer(third["id"])["verification_status"], "rejected")

    def test_bulk_reject_by_vendor_and_status(self):
        _seed(self.vendor["id"], self.batch, ("A", "10", "1"), ("B", "20", "2"))
        result = offers.bulk_set_status(
            {"vendor_id": self.vendor["id"], "verification_status": "pending"}, "rejected", "admin"
        )
        self.assertEqual(result.succeeded, 2)

    def test_bulk_requires_a_criterion(self):
        with self.assertRaises(ValueError):
            offers.bulk_set_status({}, "verified", "admin")
        with self.assertRaises(ValueError):
            offers.bulk_delete({"vendor_id": None, "tier": ""}, "admin")

    def test_bulk_delete_by_batch(self):
        _seed(self.vendor["id"], self.batch, ("A", "10", "1"), ("B", "20", "2"))
        other_batch = str(uuid.uuid4())
        _seed(self.vendor["id"], other_batch, ("C", "30", "3"))
        result = offers.bulk_delete({"upload_batch_id": self.batch}, "admin")
        self.assertEqual(result.succeeded, 2)
        remaining = offer_repo.list_offers(vendor_id=self.vendor["id"])
        self.assertEqual([o["peptide_name"] for o in remaining], ["C"])


if __name__ == "__main__":
    unittest.main()
