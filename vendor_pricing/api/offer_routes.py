"""Offer API: listing, manual entry, verification and bulk admin actions."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from vendor_pricing.api.auth import Actor, require_role
from vendor_pricing.api.errors import to_http
from vendor_pricing.api.models import BulkCriteria, RejectBody
from vendor_pricing.models.tiers import TIERS, VendorTier, VerificationStatus
from vendor_pricing.pricing import offers
from vendor_pricing.pricing.errors import PricingError
from vendor_pricing.pricing.verification import REJECTED, VERIFIED

router = APIRouter(prefix="/offers", tags=["offers"])


@router.get("")
def list_offers(
    tier: Optional[VendorTier] = Query(None),
    vendor_id: Optional[str] = Query(None),
    verification_status: Optional[VerificationStatus] = Query(None),
    upload_batch_id: Optional[str] = Query(None),
    sort: str = Query("updated", description="updated | price | peptide_name"),
    descending: Optional[bool] = Query(None, description="defaults to newest-first for sort=updated"),
) -> dict[str, Any]:
    """Sorting by price ranks by the tier's comparison metric and requires a tier filter."""
    try:
        rows = offers.list_offers(
            tier=tier,
            vendor_id=vendor_id,
            verification_status=verification_status,
            upload_batch_id=upload_batch_id,
            sort=sort,
            descending=descending,
        )
    except (PricingError, ValueError) as e:
        raise to_http(e) from e
    return {"offers": rows, "count": len(rows)}


@router.post("", status_code=201)
def create_offer(
    body: dict[str, Any] = Body(...),
    actor: Actor = Depends(require_role("moderator")),
) -> dict[str, Any]:
    """Manual entry: one offer as a flat JSON object with vendor_id, tier and the tier's fields."""
    data = dict(body)
    vendor_id = data.pop("vendor_id", None) or data.pop("vendorId", None)
    tier = data.pop("tier", None)
    if not vendor_id or tier not in TIERS:
        raise HTTPException(status_code=422, detail=f"vendor_id and tier ({', '.join(TIERS)}) are required")
    try:
        return offers.create_manual_offer(data, vendor_id, tier, actor.user_id)
    except (PricingError, ValueError) as e:
        raise to_http(e) from e


def _bulk_criteria(body: BulkCriteria) -> dict[str, Optional[str]]:
    return body.model_dump()


@router.post("/bulk-verify")
def bulk_verify(body: BulkCriteria, actor: Actor = Depends(require_role("moderator"))) -> dict[str, Any]:
    try:
        result = offers.bulk_set_status(_bulk_criteria(body), VERIFIED, actor.user_id)
    except ValueError as e:
        raise to_http(e) from e
    return result.model_dump(by_alias=True)


@router.post("/bulk-reject")
def bulk_reject(body: BulkCriteria, actor: Actor = Depends(require_role("moderator"))) -> dict[str, Any]:
    try:
        result = offers.bulk_set_status(_bulk_criteria(body), REJECTED, actor.user_id)
    except ValueError as e:
        raise to_http(e) from e
    return result.model_dump(by_alias=True)


@router.post("/bulk-delete")
def bulk_delete(body: BulkCriteria, actor: Actor = Depends(require_role("admin"))) -> dict[str, Any]:
    try:
        result = offers.bulk_delete(_bulk_criteria(body), actor.user_id)
    except ValueError as e:
        raise to_http(e) from e
    return result.model_dump(by_alias=True)


@router.get("/{offer_id}")
def get_offer(offer_id: str) -> dict[str, Any]:
    try:
        return offers.get_offer(offer_id)
    except PricingError as e:
        raise to_http(e) from e


@router.get("/{offer_id}/history")
def get_offer_history(offer_id: str) -> dict[str, Any]:
    try:
        return {"offer_id": offer_id, "history": offers.price_history(offer_id)}
    except PricingError as e:
        raise to_http(e) from e


@router.post("/{offer_id}/verify")
def verify_offer(offer_id: str, actor: Actor = Depends(require_role("moderator"))) -> dict[str, Any]:
    try:
        return offers.verify_offer(offer_id, actor.user_id)
    except PricingError as e:
        raise to_http(e) from e


@router.post("/{offer_id}/reject")
def reject_offer(
    offer_id: str,
    body: Optional[RejectBody] = None,
    actor: Actor = Depends(require_role("moderator")),
) -> dict[str, Any]:
    try:
        return offers.reject_offer(offer_id, actor.user_id, reason=body.reason if body else None)
    except PricingError as e:
        raise to_http(e) from e
