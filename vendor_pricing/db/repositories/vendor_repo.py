"""Vendor directory repository: sync functions returning plain dicts."""

import re
from typing import Any, Optional

from sqlalchemy import select

from vendor_pricing.db import get_session
from vendor_pricing.db.models.vendor import Vendor
from vendor_pricing.pricing.errors import DuplicateVendorError, VendorNotFoundError

_WS = re.compile(r"\s+")


def normalize_vendor_name(name: str) -> str:
    """Trim, lowercase and collapse inner whitespace."""
    return _WS.sub(" ", (name or "").strip()).lower()


def _to_dict(v: Vendor) -> dict[str, Any]:
    return {
        "id": v.id,
        "name": v.name,
        "website_url": v.website_url,
        "verified": v.verified,
        "tier_support": list(v.tier_support or []),
        "created_at": v.created_at.isoformat() if v.created_at else None,
        "updated_at": v.updated_at.isoformat() if v.updated_at else None,
    }


def create_vendor(
    name: str,
    website_url: Optional[str] = None,
    tier_support: Optional[list[str]] = None,
    verified: bool = False,
) -> dict[str, Any]:
    """Insert a vendor. Raises DuplicateVendorError when the normalized name is taken."""
    normalized = normalize_vendor_name(name)
    with get_session() as session:
        existing = session.scalars(select(Vendor).where(Vendor.normalized_name == normalized)).first()
        if existing is not None:
            raise DuplicateVendorError(name, existing.id)
        vendor = Vendor(
            name=name.strip(),
            normalized_name=normalized,
            website_url=website_url,
            verified=verified,
            tier_support=list(tier_support or []),
        )
        session.add(vendor)
        session.flush()
        return _to_dict(vendor)


def get_vendor(vendor_id: str) -> Optional[dict[str, Any]]:
    with get_session() as session:
        vendor = session.get(Vendor, vendor_id)
        return _to_dict(vendor) if vendor is not None else None


def require_vendor(vendor_id: str) -> dict[str, Any]:
    """Return the vendor or raise VendorNotFoundError."""
    vendor = get_vendor(vendor_id)
    if vendor is None:
        raise VendorNotFoundError(vendor_id)
    return vendor


def list_vendors(tier: Optional[str] = None) -> list[dict[str, Any]]:
    """All vendors ordered by name; when tier is given, only vendors enabled for it."""
    with get_session() as session:
        vendors = session.scalars(select(Vendor).order_by(Vendor.normalized_name)).all()
        rows = [_to_dict(v) for v in vendors]
    if tier:
        rows = [r for r in rows if tier in r["tier_support"]]
    return rows


def update_vendor(vendor_id: str, **changes: Any) -> dict[str, Any]:
    """Apply non-None changes (name, website_url, verified, tier_support)."""
    with get_session() as session:
        vendor = session.get(Vendor, vendor_id)
        if vendor is None:
            raise VendorNotFoundError(vendor_id)
        name = changes.get("name")
        if name is not None:
            normalized = normalize_vendor_name(name)
            clash = session.scalars(
                select(Vendor).where(Vendor.normalized_name == normalized).where(Vendor.id != vendor_id)
            ).first()
            if clash is not None:
                raise DuplicateVendorError(name, clash.id)
            vendor.name = name.strip()
            vendor.normalized_name = normalized
        if changes.get("website_url") is not None:
            vendor.website_url = changes["website_url"]
        if changes.get("verified") is not None:
            vendor.verified = bool(changes["verified"])
        if changes.get("tier_support") is not None:
            vendor.tier_support = list(changes["tier_support"])
        session.flush()
        return _to_dict(vendor)
