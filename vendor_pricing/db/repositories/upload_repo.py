"""Upload batch repository. Once written, an upload's status is the only field that changes."""

from typing import Any, Optional

from sqlalchemy import select

from vendor_pricing.db import get_session
from vendor_pricing.db.models.upload import VendorPriceUpload

STATUS_COMPLETED = "completed"
STATUS_PARTIAL = "partial"
STATUS_FAILED = "failed"
STATUS_DELETED = "deleted"
UPLOAD_STATUSES = (STATUS_COMPLETED, STATUS_PARTIAL, STATUS_FAILED, STATUS_DELETED)


def _to_dict(u: VendorPriceUpload) -> dict[str, Any]:
    return {
        "id": u.id,
        "vendor_id": u.vendor_id,
        "tier": u.tier,
        "file_name": u.file_name,
        "uploaded_by": u.uploaded_by,
        "status": u.status,
        "row_count": u.row_count,
        "success_count": u.success_count,
        "failure_count": u.failure_count,
        "persisted_count": u.persisted_count,
        "errors": list(u.errors or []),
        "persistence_errors": list(u.persistence_errors or []),
        "ignored_columns": list(u.ignored_columns or []),
        "created_at": u.created_at.isoformat() if u.created_at else None,
    }


def create_upload(
    upload_id: str,
    vendor_id: str,
    tier: str,
    status: str,
    row_count: int,
    success_count: int,
    failure_count: int,
    persisted_count: int,
    errors: list[dict],
    persistence_errors: list[dict],
    ignored_columns: list[str],
    file_name: Optional[str] = None,
    uploaded_by: Optional[str] = None,
) -> dict[str, Any]:
    with get_session() as session:
        upload = VendorPriceUpload(
            id=upload_id,
            vendor_id=vendor_id,
            tier=tier,
            file_name=file_name,
            uploaded_by=uploaded_by,
            status=status,
            row_count=row_count,
            success_count=success_count,
            failure_count=failure_count,
            persisted_count=persisted_count,
            errors=errors,
            persistence_errors=persistence_errors,
            ignored_columns=ignored_columns,
        )
        session.add(upload)
        session.flush()
        return _to_dict(upload)


def get_upload(upload_id: str) -> Optional[dict[str, Any]]:
    with get_session() as session:
        upload = session.get(VendorPriceUpload, upload_id)
        return _to_dict(upload) if upload is not None else None


def list_uploads(vendor_id: Optional[str] = None, limit: int = 50) -> list[dict[str, Any]]:
    """Most recent uploads first."""
    q = select(VendorPriceUpload)
    if vendor_id:
        q = q.where(VendorPriceUpload.vendor_id == vendor_id)
    q = q.order_by(VendorPriceUpload.created_at.desc()).limit(limit)
    with get_session() as session:
        return [_to_dict(u) for u in session.scalars(q).all()]


def update_status(upload_id: str, status: str) -> bool:
    """Returns True if a row was updated."""
    if status not in UPLOAD_STATUSES:
        raise ValueError(f"Unknown upload status {status!r}")
    with get_session() as session:
        upload = session.get(VendorPriceUpload, upload_id)
        if upload is None:
            return False
        upload.status = status
        return True
