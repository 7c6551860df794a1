"""Factories shared by the DB-backed tests. Names are unique because the test DB is shared."""

import uuid

from vendor_pricing.db.repositories import user_repo, vendor_repo


def make_vendor(*tiers: str) -> dict:
    return vendor_repo.create_vendor(
        f"Vendor {uuid.uuid4().hex[:10]}",
        website_url="https://vendor.example.com",
        tier_support=list(tiers or ("research", "telehealth", "brand")),
    )


def make_user(role: str) -> str:
    user_id = f"{role}-{uuid.uuid4().hex[:8]}"
    user_repo.set_role(user_id, role, granted_by="tests")
    return user_id


def research_csv(*rows: str, header: str = "peptide_name,price_usd,size_mg") -> str:
    return "\n".join([header, *rows]) + "\n"
