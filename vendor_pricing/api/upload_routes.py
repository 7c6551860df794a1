"""Upload API: submit a CSV price list, list and inspect batches, download templates."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from vendor_pricing.api.auth import Actor, require_role
from vendor_pricing.api.errors import to_http
from vendor_pricing.config import MAX_UPLOAD_BYTES
from vendor_pricing.db.repositories import upload_repo
from vendor_pricing.models.tiers import VendorTier
from vendor_pricing.pricing.errors import PricingError
from vendor_pricing.pricing.templates import generate_csv_template, template_file_name
from vendor_pricing.pricing.uploads import delete_upload_offers, get_upload, process_upload
from vendor_pricing.utils.csv_loader import decode_upload
from vendor_pricing.utils.logger import get_logger

logger = get_logger("vendor_pricing.api.uploads")

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("")
async def create_upload(
    request: Request,
    vendor_id: str = Query(..., min_length=1),
    tier: VendorTier = Query(...),
    file_name: Optional[str] = Query(None),
    dry_run: bool = Query(False),
    actor: Actor = Depends(require_role("moderator")),
) -> dict[str, Any]:
    """Body is the raw CSV (UTF-8, header row first). 422 when a required column is missing."""
    payload = await request.body()
    if len(payload) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"Upload exceeds {MAX_UPLOAD_BYTES} bytes")
    try:
        text = decode_upload(payload)
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=422, detail="CSV must be UTF-8 encoded") from e
    try:
        outcome = await run_in_threadpool(
            process_upload, text, vendor_id, tier, actor.user_id, file_name, dry_run
        )
    except (PricingError, ValueError) as e:
        logger.info("api.upload_rejected", vendor_id=vendor_id, tier=tier, reason=str(e))
        raise to_http(e) from e
    return outcome.model_dump(by_alias=True)


@router.get("")
def list_uploads(
    vendor_id: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    actor: Actor = Depends(require_role("moderator")),
) -> dict[str, Any]:
    return {"uploads": upload_repo.list_uploads(vendor_id=vendor_id, limit=limit)}


@router.get("/templates/{tier}", response_class=PlainTextResponse)
async def download_template(tier: VendorTier) -> PlainTextResponse:
    """CSV template with the tier's columns and two example rows."""
    return PlainTextResponse(
        generate_csv_template(tier),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{template_file_name(tier)}"'},
    )


@router.get("/{upload_id}")
def get_upload_endpoint(upload_id: str, actor: Actor = Depends(require_role("moderator"))) -> dict[str, Any]:
    try:
        return get_upload(upload_id)
    except PricingError as e:
        raise to_http(e) from e


@router.delete("/{upload_id}")
def delete_upload_endpoint(upload_id: str, actor: Actor = Depends(require_role("admin"))) -> dict[str, Any]:
    """Delete every offer written by the upload; the upload record stays with status 'deleted'."""
    try:
        return delete_upload_offers(upload_id, actor.user_id)
    except PricingError as e:
        raise to_http(e) from e
