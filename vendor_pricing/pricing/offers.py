"""Offer queries and admin operations: ranking, manual entry, verification, bulk actions."""

from typing import Any, Optional

from pydantic.alias_generators import to_snake
from sqlalchemy.exc import SQLAlchemyError

from vendor_pricing.db.repositories import offer_repo, vendor_repo
from vendor_pricing.models.pricing import COMPARISON_METRIC
from vendor_pricing.models.records import BulkResult
from vendor_pricing.pricing.errors import (
    CrossTierComparisonError,
    InvalidOfferError,
    InvalidTransitionError,
    OfferNotFoundError,
    PersistenceError,
    TierNotSupportedError,
)
from vendor_pricing.pricing.orchestrator import ingest_rows
from vendor_pricing.pricing.persistence import persist_offers
from vendor_pricing.pricing.validators import can_compare_tiers
from vendor_pricing.pricing.verification import REJECTED, VERIFIED
from vendor_pricing.utils.logger import get_logger

logger = get_logger("vendor_pricing.pricing.offers")

SORT_KEYS = ("updated", "price", "peptide_name")
CRITERIA_KEYS = ("upload_batch_id", "vendor_id", "tier", "verification_status")


def require_tier_support(vendor_id: str, tier: str) -> dict[str, Any]:
    """Return the vendor; raise VendorNotFoundError or TierNotSupportedError."""
    vendor = vendor_repo.require_vendor(vendor_id)
    if tier not in vendor["tier_support"]:
        raise TierNotSupportedError(vendor_id, tier)
    return vendor


def rank_offers(offers: list[dict[str, Any]], descending: bool = False) -> list[dict[str, Any]]:
    """Order offers by their tier's comparison metric. All offers must share one tier."""
    if not offers:
        return []
    tier = offers[0]["tier"]
    if not all(can_compare_tiers(tier, o["tier"]) for o in offers):
        raise CrossTierComparisonError("Offers from different tiers cannot be ranked together")
    metric = COMPARISON_METRIC[tier]
    priced = [o for o in offers if isinstance((o["pricing"] or {}).get(metric), (int, float))]
    unpriced = [o for o in offers if o not in priced]
    priced.sort(key=lambda o: o["pricing"][metric], reverse=descending)
    return priced + unpriced


def list_offers(
    tier: Optional[str] = None,
    vendor_id: Optional[str] = None,
    verification_status: Optional[str] = None,
    upload_batch_id: Optional[str] = None,
    sort: str = "updated",
    descending: Optional[bool] = None,
) -> list[dict[str, Any]]:
    """Filtered offers. sort='price' ranks by the tier's comparison metric and needs a tier filter.

    descending defaults to newest-first for sort='updated' and ascending otherwise.
    """
    if sort not in SORT_KEYS:
        raise ValueError(f"sort must be one of: {', '.join(SORT_KEYS)}")
    if sort == "price" and not tier:
        raise CrossTierComparisonError("Sorting by price requires a tier filter; tiers are never compared")
    offers = offer_repo.list_offers(
        tier=tier,
        vendor_id=vendor_id,
        verification_status=verification_status,
        upload_batch_id=upload_batch_id,
    )
    if descending is None:
        descending = sort == "updated"
    if sort == "price":
        return rank_offers(offers, descending=descending)
    if sort == "peptide_name":
        return sorted(offers, key=lambda o: o["peptide_name"].lower(), reverse=descending)
    # store order is newest-first
    return offers if descending else list(reversed(offers))


def get_offer(offer_id: str) -> dict[str, Any]:
    offer = offer_repo.get_offer(offer_id)
    if offer is None:
        raise OfferNotFoundError(offer_id)
    return offer


def create_manual_offer(
    data: dict[str, Any],
    vendor_id: str,
    tier: str,
    submitted_by: Optional[str],
) -> dict[str, Any]:
    """Validate one offer given as a JSON object (camelCase or snake_case keys) and upsert it.

    Goes through the same header mapping, parsing and tier validation as a CSV
    row. Raises HeaderMappingError, InvalidOfferError or PersistenceError.
    """
    require_tier_support(vendor_id, tier)
    header = [to_snake(str(k)) for k in data]
    cells = ["" if v is None else str(v).lower() if isinstance(v, bool) else str(v) for v in data.values()]
    result = ingest_rows(header, [cells], tier)
    if result.summary.errors:
        raise InvalidOfferError([e.message for e in result.summary.errors])
    row = result.valid_rows[0]
    persisted = persist_offers([row], vendor_id, tier, batch_id=None, submitted_by=submitted_by, source="manual")
    if persisted.errors:
        raise PersistenceError(row.line, persisted.errors[0].message)
    offer = offer_repo.find_offer(vendor_id, row.peptide_name, tier)
    logger.info("offers.manual_entry", offer_id=offer["id"], vendor_id=vendor_id, tier=tier)
    return offer


def verify_offer(offer_id: str, actor: Optional[str]) -> dict[str, Any]:
    offer = offer_repo.set_verification_status(offer_id, VERIFIED, actor)
    logger.info("offers.verified", offer_id=offer_id, actor=actor)
    return offer


def reject_offer(offer_id: str, actor: Optional[str], reason: Optional[str] = None) -> dict[str, Any]:
    offer = offer_repo.set_verification_status(offer_id, REJECTED, actor)
    logger.info("offers.rejected", offer_id=offer_id, actor=actor, reason=reason)
    return offer


def _criteria(criteria: dict[str, Optional[str]]) -> dict[str, str]:
    selected = {k: v for k, v in criteria.items() if k in CRITERIA_KEYS and v}
    if not selected:
        raise ValueError(f"At least one criterion is required: {', '.join(CRITERIA_KEYS)}")
    return selected


def bulk_set_status(criteria: dict[str, Optional[str]], target: str, actor: Optional[str]) -> BulkResult:
    """Apply verify or reject to every matching offer, one write per offer.

    Offers that are not pending are skipped. A failed write is counted and the
    others are kept; nothing is rolled back.
    """
    selected = _criteria(criteria)
    ids = offer_repo.list_offer_ids(**selected)
    result = BulkResult(matched=len(ids))
    for offer_id in ids:
        try:
            offer_repo.set_verification_status(offer_id, target, actor)
            result.succeeded += 1
        except InvalidTransitionError:
            result.skipped += 1
        except (OfferNotFoundError, SQLAlchemyError) as e:
            result.failed += 1
            result.failed_ids.append(offer_id)
            logger.warning("offers.bulk_write_failed", offer_id=offer_id, target=target, reason=str(e))
    logger.info(
        "offers.bulk_status",
        target=target,
        criteria=selected,
        matched=result.matched,
        succeeded=result.succeeded,
        skipped=result.skipped,
        failed=result.failed,
    )
    return result


def bulk_delete(criteria: dict[str, Optional[str]], actor: Optional[str]) -> BulkResult:
    """Delete every matching offer, one write per offer; failures are counted, never rolled back."""
    selected = _criteria(criteria)
    ids = offer_repo.list_offer_ids(**selected)
    result = BulkResult(matched=len(ids))
    for offer_id in ids:
        try:
            if offer_repo.delete_offer(offer_id):
                result.succeeded += 1
            else:
                result.skipped += 1
        except SQLAlchemyError as e:
            result.failed += 1
            result.failed_ids.append(offer_id)
            logger.warning("offers.bulk_delete_failed", offer_id=offer_id, reason=str(e))
    logger.info("offers.bulk_delete", criteria=selected, actor=actor, matched=result.matched, deleted=result.succeeded)
    return result


def price_history(offer_id: str) -> list[dict[str, Any]]:
    return offer_repo.get_history(offer_id)
