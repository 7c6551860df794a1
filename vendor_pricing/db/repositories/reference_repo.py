"""Brand reference price repository."""

from typing import Any, Optional

from sqlalchemy import select

from vendor_pricing.db import get_session
from vendor_pricing.db.base import utcnow
from vendor_pricing.db.models.reference import BrandReferencePrice
from vendor_pricing.pricing.errors import ReferencePriceNotFoundError

EDITABLE_FIELDS = ("vendor_id", "product_name", "product_url", "glp_type", "brand_pricing", "pricing_source", "notes")


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _to_dict(r: BrandReferencePrice) -> dict[str, Any]:
    return {
        "id": r.id,
        "vendor_id": r.vendor_id,
        "product_name": r.product_name,
        "product_url": r.product_url,
        "glp_type": r.glp_type,
        "tier": "brand",
        "brand_pricing": dict(r.brand_pricing or {}),
        "pricing_source": r.pricing_source,
        "notes": r.notes,
        "verification_status": r.verification_status,
        "verified_by": r.verified_by,
        "verified_at": _iso(r.verified_at),
        "last_price_check": _iso(r.last_price_check),
        "updated_by": r.updated_by,
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }


def create_reference(actor: Optional[str], **fields: Any) -> dict[str, Any]:
    """Admin-entered references are verified on creation."""
    now = utcnow()
    with get_session() as session:
        ref = BrandReferencePrice(
            **{k: fields.get(k) for k in EDITABLE_FIELDS},
            verification_status="verified",
            verified_by=actor,
            verified_at=now,
            last_price_check=now,
            updated_by=actor,
        )
        session.add(ref)
        session.flush()
        return _to_dict(ref)


def get_reference(reference_id: str) -> Optional[dict[str, Any]]:
    with get_session() as session:
        ref = session.get(BrandReferencePrice, reference_id)
        return _to_dict(ref) if ref is not None else None


def list_references(glp_type: Optional[str] = None, vendor_id: Optional[str] = None) -> list[dict[str, Any]]:
    """References ordered by product name."""
    q = select(BrandReferencePrice)
    if glp_type:
        q = q.where(BrandReferencePrice.glp_type == glp_type)
    if vendor_id:
        q = q.where(BrandReferencePrice.vendor_id == vendor_id)
    q = q.order_by(BrandReferencePrice.product_name)
    with get_session() as session:
        return [_to_dict(r) for r in session.scalars(q).all()]


def update_reference(reference_id: str, actor: Optional[str], **fields: Any) -> dict[str, Any]:
    """Replace the editable fields and stamp last_price_check. Raises ReferencePriceNotFoundError."""
    with get_session() as session:
        ref = session.get(BrandReferencePrice, reference_id)
        if ref is None:
            raise ReferencePriceNotFoundError(reference_id)
        for key in EDITABLE_FIELDS:
            setattr(ref, key, fields.get(key))
        ref.last_price_check = utcnow()
        ref.updated_by = actor
        session.flush()
        return _to_dict(ref)


def touch_price_check(reference_id: str, actor: Optional[str]) -> dict[str, Any]:
    """Record that the price was re-checked without changing it."""
    with get_session() as session:
        ref = session.get(BrandReferencePrice, reference_id)
        if ref is None:
            raise ReferencePriceNotFoundError(reference_id)
        ref.last_price_check = utcnow()
        ref.updated_by = actor
        session.flush()
        return _to_dict(ref)


def delete_reference(reference_id: str) -> bool:
    with get_session() as session:
        ref = session.get(BrandReferencePrice, reference_id)
        if ref is None:
            return False
        session.delete(ref)
        return True
