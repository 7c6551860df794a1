"""Vendor directory API."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from vendor_pricing.api.auth import Actor, require_role
from vendor_pricing.api.errors import to_http
from vendor_pricing.api.models import VendorCreate, VendorUpdate
from vendor_pricing.db.repositories import vendor_repo
from vendor_pricing.models.tiers import VendorTier
from vendor_pricing.pricing.errors import PricingError
from vendor_pricing.utils.logger import get_logger

logger = get_logger("vendor_pricing.api.vendors")

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("")
def list_vendors(tier: Optional[VendorTier] = Query(None)) -> dict[str, Any]:
    """All vendors, or only those enabled for the given tier."""
    return {"vendors": vendor_repo.list_vendors(tier=tier)}


@router.post("", status_code=201)
def create_vendor(body: VendorCreate, actor: Actor = Depends(require_role("admin"))) -> dict[str, Any]:
    try:
        vendor = vendor_repo.create_vendor(
            body.name,
            website_url=body.website_url,
            tier_support=list(body.tier_support),
            verified=body.verified,
        )
    except PricingError as e:
        raise to_http(e) from e
    logger.info("vendors.created", vendor_id=vendor["id"], name=vendor["name"], actor=actor.user_id)
    return vendor


@router.get("/{vendor_id}")
def get_vendor(vendor_id: str) -> dict[str, Any]:
    try:
        return vendor_repo.require_vendor(vendor_id)
    except PricingError as e:
        raise to_http(e) from e


@router.patch("/{vendor_id}")
def update_vendor(vendor_id: str, body: VendorUpdate, actor: Actor = Depends(require_role("admin"))) -> dict[str, Any]:
    try:
        vendor = vendor_repo.update_vendor(vendor_id, **body.model_dump(exclude_none=True))
    except PricingError as e:
        raise to_http(e) from e
    logger.info("vendors.updated", vendor_id=vendor_id, actor=actor.user_id)
    return vendor
