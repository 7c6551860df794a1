"""Tests for the offer persistence adapter: upsert key, status reset, history, per-row failures."""

import sys
import unittest
from pathlib import Path
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy.exc import OperationalError

from vendor_pricing.db import init_db
from vendor_pricing.db.repositories import offer_repo
from vendor_pricing.pricing.orchestrator import ingest_rows
from vendor_pricing.pricing.persistence import persist_offers
from tests.helpers import make_vendor

HEADER = ["peptide_name", "price_usd", "size_mg"]


def _valid_rows(*rows):
    return ingest_rows(HEADER, [list(r) for r in rows], "research").valid_rows


class TestPersistOffers(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def setUp(self):
        self.vendor = make_vendor("research")

    def test_creates_offers_with_pending_status(self):
        result = persist_offers(_valid_rows(("BPC-157", "45", "5")), self.vendor["id"], "research", "batch-1", "mod-1")
        self.assertEqual((result.created, result.updated, result.persisted), (1, 0, 1))
        offer = offer_repo.find_offer(self.vendor["id"], "BPC-157", "research")
        self.assertEqual(offer["verification_status"], "pending")
        self.assertEqual(offer["upload_batch_id"], "batch-1")
        self.assertEqual(offer["submitted_by"], "mod-1")
        self.assertAlmostEqual(offer["pricing"]["price_per_mg"], 9.0, delta=1e-9)

    def test_only_own_tier_payload_is_set(self):
        persist_offers(_valid_rows(("BPC-157", "45", "5")), self.vendor["id"], "research", None, None)
        from vendor_pricing.db import get_session
        from vendor_pricing.db.models import VendorOffer

        offer = offer_repo.find_offer(self.vendor["id"], "BPC-157", "research")
        with get_session() as session:
            row = session.get(VendorOffer, offer["id"])
            self.assertIsNotNone(row.research_pricing)
            self.assertIsNone(row.telehealth_pricing)
            self.assertIsNone(row.brand_pricing)

    def test_upsert_key_trims_peptide_name(self):
        persist_offers(_valid_rows(("BPC-157", "45", "5")), self.vendor["id"], "research", "b1", None)
        result = persist_offers(_valid_rows(("  BPC-157 ", "40", "5")), self.vendor["id"], "research", "b2", None)
        self.assertEqual((result.created, result.updated), (0, 1))
        offers = offer_repo.list_offers(vendor_id=self.vendor["id"])
        self.assertEqual(len(offers), 1)
        self.assertEqual(offers[0]["upload_batch_id"], "b2")

    def test_overwrite_resets_verified_to_pending_and_writes_history(self):
        persist_offers(_valid_rows(("BPC-157", "45", "5")), self.vendor["id"], "research", "b1", None)
        offer = offer_repo.find_offer(self.vendor["id"], "BPC-157", "research")
        offer_repo.set_verification_status(offer["id"], "verified", "admin-1")

        result = persist_offers(_valid_rows(("BPC-157", "50", "5")), self.vendor["id"], "research", "b2", "mod-2")
        self.assertEqual(result.history_created, 1)
        offer = offer_repo.get_offer(offer["id"])
        self.assertEqual(offer["verification_status"], "pending")
        self.assertIsNone(offer["verified_by"])

        history = offer_repo.get_history(offer["id"])
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["previous_pricing"]["price_usd"], 45.0)
        self.assertEqual(history[0]["new_pricing"]["price_usd"], 50.0)
        self.assertIn("price_usd", history[0]["changed_fields"])
        self.assertAlmostEqual(history[0]["percent_change"], 11.11, places=2)
        self.assertEqual(history[0]["changed_by"], "mod-2")

    def test_unchanged_payload_writes_no_history_but_still_resets_status(self):
        persist_offers(_valid_rows(("BPC-157", "45", "5")), self.vendor["id"], "research", "b1", None)
        offer = offer_repo.find_offer(self.vendor["id"], "BPC-157", "research")
        offer_repo.set_verification_status(offer["id"], "rejected", "admin-1")
        result = persist_offers(_valid_rows(("BPC-157", "45", "5")), self.vendor["id"], "research", "b2", None)
        self.assertEqual(result.history_created, 0)
        self.assertEqual(offer_repo.get_offer(offer["id"])["verification_status"], "pending")

    def test_failed_write_is_recorded_and_earlier_rows_stay(self):
        rows = _valid_rows(("Alpha", "10", "1"), ("Beta", "20", "2"), ("Gamma", "30", "3"))
        real_upsert = offer_repo.upsert_offer

        def flaky(vendor_id, row, *args, **kwargs):
            if row.peptide_name == "Beta":
                raise OperationalError("INSERT", {}, Exception("database is locked"))
            return real_upsert(vendor_id, row, *args, **kwargs)

        with mock.patch.object(offer_repo, "upsert_offer", side_effect=flaky):
            result = persist_offers(rows, self.vendor["id"], "research", "b1", None)

        self.assertEqual(result.created, 2)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].line, 2)
        self.assertEqual(result.errors[0].kind, "persistence")
        names = sorted(o["peptide_name"] for o in offer_repo.list_offers(vendor_id=self.vendor["id"]))
        self.assertEqual(names, ["Alpha", "Gamma"])

    def test_camel_case_stored_payload_is_read_back_canonical(self):
        from vendor_pricing.db import get_session
        from vendor_pricing.db.models import VendorOffer

        with get_session() as session:
            row = VendorOffer(
                vendor_id=self.vendor["id"],
                peptide_name="Legacy",
                tier="research",
                research_pricing={"priceUsd": 30.0, "sizeMg": 10.0, "pricePerMg": 3.0},
            )
            session.add(row)
            session.flush()
            offer_id = row.id
        offer = offer_repo.get_offer(offer_id)
        self.assertEqual(offer["pricing"]["price_usd"], 30.0)
        self.assertEqual(offer["pricing"]["price_per_mg"], 3.0)


if __name__ == "__main__":
    unittest.main()
