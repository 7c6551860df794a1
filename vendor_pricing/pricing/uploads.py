"""Upload service: one CSV batch from vendor check to the stored upload record."""

from typing import Any, Optional

from vendor_pricing.db.base import new_id
from vendor_pricing.db.repositories import upload_repo
from vendor_pricing.models.records import UploadOutcome
from vendor_pricing.pricing.errors import InvalidTransitionError, UploadNotFoundError
from vendor_pricing.pricing.offers import bulk_delete, require_tier_support
from vendor_pricing.pricing.orchestrator import ingest_csv_text
from vendor_pricing.pricing.persistence import persist_offers
from vendor_pricing.pricing.rules import get_tier_definition
from vendor_pricing.utils.logger import bind_context, get_logger, unbind_context
from vendor_pricing.utils.tracing import get_tracer

logger = get_logger("vendor_pricing.pricing.uploads")


def _status(failures: int, persisted: int) -> str:
    if failures == 0:
        return upload_repo.STATUS_COMPLETED
    if persisted == 0:
        return upload_repo.STATUS_FAILED
    return upload_repo.STATUS_PARTIAL


def process_upload(
    csv_text: str,
    vendor_id: str,
    tier: str,
    uploaded_by: Optional[str] = None,
    file_name: Optional[str] = None,
    dry_run: bool = False,
) -> UploadOutcome:
    """Validate a CSV price list for one vendor and tier, persist the valid rows and record the batch.

    Raises ValueError for an unknown tier, VendorNotFoundError, TierNotSupportedError,
    and HeaderMappingError (nothing is written in any of these cases).
    """
    get_tier_definition(tier)
    require_tier_support(vendor_id, tier)
    batch_id = new_id()
    bind_context(batch_id=batch_id, vendor_id=vendor_id, tier=tier)
    try:
        with get_tracer().start_as_current_span(
            "process_upload",
            attributes={"ingest.tier": tier, "ingest.vendor_id": vendor_id, "ingest.dry_run": dry_run},
        ) as span:
            ingestion = ingest_csv_text(csv_text, tier)
            summary = ingestion.summary
            span.set_attribute("ingest.total_rows", summary.total_rows)
            span.set_attribute("ingest.failure_count", summary.failure_count)
            if dry_run:
                logger.info("upload.dry_run", total_rows=summary.total_rows, failure_count=summary.failure_count)
                return UploadOutcome(
                    dry_run=True,
                    summary=summary,
                    ignored_columns=ingestion.ignored_columns,
                )

            persisted = persist_offers(ingestion.valid_rows, vendor_id, tier, batch_id, uploaded_by)
            status = _status(summary.failure_count + len(persisted.errors), persisted.persisted)
            upload_repo.create_upload(
                upload_id=batch_id,
                vendor_id=vendor_id,
                tier=tier,
                status=status,
                row_count=summary.total_rows,
                success_count=summary.success_count,
                failure_count=summary.failure_count,
                persisted_count=persisted.persisted,
                errors=[e.model_dump() for e in summary.errors],
                persistence_errors=[e.model_dump() for e in persisted.errors],
                ignored_columns=ingestion.ignored_columns,
                file_name=file_name,
                uploaded_by=uploaded_by,
            )
            logger.info("upload.recorded", status=status, persisted=persisted.persisted, file_name=file_name)
            return UploadOutcome(
                upload_id=batch_id,
                status=status,
                summary=summary,
                persisted=persisted.persisted,
                persistence_errors=persisted.errors,
                ignored_columns=ingestion.ignored_columns,
            )
    finally:
        unbind_context("batch_id", "vendor_id", "tier")


def get_upload(upload_id: str) -> dict[str, Any]:
    upload = upload_repo.get_upload(upload_id)
    if upload is None:
        raise UploadNotFoundError(upload_id)
    return upload


def delete_upload_offers(upload_id: str, actor: Optional[str]) -> dict[str, Any]:
    """Delete every offer written by this upload and mark the upload deleted."""
    upload = get_upload(upload_id)
    if upload["status"] == upload_repo.STATUS_DELETED:
        raise InvalidTransitionError(upload["status"], upload_repo.STATUS_DELETED)
    result = bulk_delete({"upload_batch_id": upload_id}, actor)
    upload_repo.update_status(upload_id, upload_repo.STATUS_DELETED)
    logger.info("upload.offers_deleted", upload_id=upload_id, deleted=result.succeeded, actor=actor)
    return {**get_upload(upload_id), "deleted_offers": result.succeeded, "failed": result.failed}
