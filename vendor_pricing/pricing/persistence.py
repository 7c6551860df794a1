"""Offer persistence adapter: upsert each valid row independently."""

from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from vendor_pricing.db.repositories import offer_repo
from vendor_pricing.models.records import PersistenceResult, RowError, ValidRow
from vendor_pricing.pricing.errors import PersistenceError
from vendor_pricing.utils.logger import get_logger
from vendor_pricing.utils.tracing import get_tracer

logger = get_logger("vendor_pricing.pricing.persistence")


def persist_offers(
    valid_rows: Sequence[ValidRow],
    vendor_id: str,
    tier: str,
    batch_id: Optional[str],
    submitted_by: Optional[str],
    source: str = "csv",
) -> PersistenceResult:
    """Upsert every row keyed by (vendor_id, peptide_name, tier).

    Each row is its own transaction: a failed write becomes a persistence
    RowError for that line and the rows before it stay committed.
    """
    result = PersistenceResult()
    log = logger.bind(vendor_id=vendor_id, tier=tier, batch_id=batch_id)
    with get_tracer().start_as_current_span(
        "persist_offers", attributes={"ingest.tier": tier, "ingest.rows": len(valid_rows)}
    ):
        for row in valid_rows:
            try:
                offer, created, history_written = _write(row, vendor_id, tier, batch_id, submitted_by, source)
            except PersistenceError as e:
                result.errors.append(RowError(line=e.line, message=str(e), kind="persistence"))
                log.warning("persistence.write_failed", line=e.line, reason=str(e))
                continue
            if created:
                result.created += 1
            else:
                result.updated += 1
            if history_written:
                result.history_created += 1
            log.debug(
                "persistence.offer_upserted",
                line=row.line,
                offer_id=offer["id"],
                peptide_name=offer["peptide_name"],
                created=created,
            )
    log.info(
        "persistence.complete",
        created=result.created,
        updated=result.updated,
        history_created=result.history_created,
        failed=len(result.errors),
    )
    return result


def _write(row: ValidRow, vendor_id: str, tier: str, batch_id: Optional[str], submitted_by: Optional[str], source: str):
    if row.tier != tier:
        raise PersistenceError(row.line, f"row tier {row.tier!r} does not match {tier!r}")
    try:
        return offer_repo.upsert_offer(vendor_id, row, batch_id, submitted_by, source=source)
    except SQLAlchemyError as e:
        raise PersistenceError(row.line, type(e).__name__) from e
