"""Brand reference pricing API: public reads, admin-only edits."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from vendor_pricing.api.auth import Actor, require_role
from vendor_pricing.api.errors import to_http
from vendor_pricing.api.models import ReferencePriceBody
from vendor_pricing.pricing import references
from vendor_pricing.pricing.errors import PricingError

router = APIRouter(prefix="/reference-pricing", tags=["reference-pricing"])


@router.get("")
def list_references(
    glp_type: Optional[str] = Query(None, description="Semaglutide | Tirzepatide"),
    vendor_id: Optional[str] = Query(None),
) -> dict[str, Any]:
    try:
        rows = references.list_references(glp_type=glp_type, vendor_id=vendor_id)
    except ValueError as e:
        raise to_http(e) from e
    return {"references": rows, "count": len(rows)}


@router.post("", status_code=201)
def create_reference(body: ReferencePriceBody, actor: Actor = Depends(require_role("admin"))) -> dict[str, Any]:
    try:
        return references.create_reference(actor=actor.user_id, **body.model_dump())
    except (PricingError, ValueError) as e:
        raise to_http(e) from e


@router.get("/{reference_id}")
def get_reference(reference_id: str) -> dict[str, Any]:
    try:
        return references.get_reference(reference_id)
    except PricingError as e:
        raise to_http(e) from e


@router.put("/{reference_id}")
def update_reference(
    reference_id: str,
    body: ReferencePriceBody,
    actor: Actor = Depends(require_role("admin")),
) -> dict[str, Any]:
    try:
        return references.update_reference(reference_id, actor=actor.user_id, **body.model_dump())
    except (PricingError, ValueError) as e:
        raise to_http(e) from e


@router.post("/{reference_id}/price-check")
def mark_price_checked(reference_id: str, actor: Actor = Depends(require_role("admin"))) -> dict[str, Any]:
    """Stamp last_price_check without changing the price."""
    try:
        return references.mark_price_checked(reference_id, actor.user_id)
    except PricingError as e:
        raise to_http(e) from e


@router.delete("/{reference_id}", status_code=204)
def delete_reference(reference_id: str, actor: Actor = Depends(require_role("admin"))) -> None:
    try:
        references.delete_reference(reference_id, actor.user_id)
    except PricingError as e:
        raise to_http(e) from e
