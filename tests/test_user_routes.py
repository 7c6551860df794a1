"""Tests for the role administration API."""

import sys
import unittest
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from vendor_pricing.api.server import create_app
from vendor_pricing.db import init_db
from tests.helpers import make_user, make_vendor, research_csv


class TestUserRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()
        cls.client = TestClient(create_app(drain_interval=0))
        cls.admin = {"X-User-Id": make_user("admin")}

    def test_granted_moderator_can_upload(self):
        user_id = f"new-{uuid.uuid4().hex[:8]}"
        vendor = make_vendor("research")
        headers = {"X-User-Id": user_id, "Content-Type": "text/csv"}
        params = {"vendor_id": vendor["id"], "tier": "research"}
        body = research_csv("BPC-157,45,5").encode("utf-8")
        self.assertEqual(self.client.post("/uploads", params=params, content=body, headers=headers).status_code, 403)

        resp = self.client.put(f"/users/{user_id}/role", json={"role": "moderator"}, headers=self.admin)
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["granted_by"], self.admin["X-User-Id"])
        self.assertEqual(self.client.get(f"/users/{user_id}", headers=self.admin).json()["role"], "moderator")
        self.assertEqual(self.client.post("/uploads", params=params, content=body, headers=headers).status_code, 200)

    def test_admin_cannot_be_granted_or_changed_here(self):
        user_id = f"new-{uuid.uuid4().hex[:8]}"
        resp = self.client.put(f"/users/{user_id}/role", json={"role": "admin"}, headers=self.admin)
        self.assertEqual(resp.status_code, 422)
        other_admin = make_user("admin")
        resp = self.client.put(f"/users/{other_admin}/role", json={"role": "user"}, headers=self.admin)
        self.assertEqual(resp.status_code, 422)

    def test_only_admins_manage_roles(self):
        moderator = {"X-User-Id": make_user("moderator")}
        resp = self.client.put(f"/users/{uuid.uuid4().hex}/role", json={"role": "moderator"}, headers=moderator)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.client.get("/users", headers=moderator).status_code, 403)
        self.assertEqual(self.client.get("/users").status_code, 401)

    def test_unknown_user_has_default_role(self):
        user_id = f"nobody-{uuid.uuid4().hex[:8]}"
        self.assertEqual(self.client.get(f"/users/{user_id}", headers=self.admin).json()["role"], "user")
        listed = self.client.get("/users", params={"role": "admin"}, headers=self.admin).json()
        self.assertIn(self.admin["X-User-Id"], [u["user_id"] for u in listed["users"]])


if __name__ == "__main__":
    unittest.main()
