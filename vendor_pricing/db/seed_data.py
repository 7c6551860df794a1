"""Seed the vendor directory from data/vendors.csv when the table is first created."""

from typing import Any

from sqlalchemy.orm import Session

from vendor_pricing.db.models.vendor import Vendor
from vendor_pricing.models.tiers import TIERS
from vendor_pricing.utils.csv_loader import load_vendors
from vendor_pricing.utils.logger import get_logger

logger = get_logger("vendor_pricing.db.seed_data")


def _parse_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        return (val or "").strip().lower() in ("true", "1", "yes")
    return False


def _parse_tiers(val: Any) -> list[str]:
    """'research|brand' -> ['research', 'brand']; unknown tiers are dropped."""
    parts = [p.strip().lower() for p in str(val or "").replace(",", "|").split("|")]
    return [p for p in parts if p in TIERS]


def seed_vendors(session: Session) -> int:
    """Insert vendors from the seed CSV. Rows without a name or with a repeated name are skipped."""
    from vendor_pricing.db.repositories.vendor_repo import normalize_vendor_name

    seen: set[str] = set()
    count = 0
    for r in load_vendors():
        name = (r.get("name") or "").strip()
        if not name:
            continue
        normalized = normalize_vendor_name(name)
        if normalized in seen:
            logger.warning("seed.duplicate_vendor", name=name)
            continue
        seen.add(normalized)
        session.add(
            Vendor(
                name=name,
                normalized_name=normalized,
                website_url=(r.get("website_url") or "").strip() or None,
                verified=_parse_bool(r.get("verified")),
                tier_support=_parse_tiers(r.get("tier_support")),
            )
        )
        count += 1
    session.flush()
    return count
