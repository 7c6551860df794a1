"""Offer repository: upsert with price history, queries, status changes, deletes."""

from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from vendor_pricing.db import get_session
from vendor_pricing.db.base import utcnow
from vendor_pricing.db.models.offer import VendorOffer, VendorOfferPriceHistory
from vendor_pricing.models.pricing import COMPARISON_METRIC, PAYLOAD_KEYS, pricing_from_document
from vendor_pricing.models.records import ValidRow
from vendor_pricing.pricing.errors import OfferNotFoundError
from vendor_pricing.pricing.verification import check_transition, status_after_overwrite


def _canonical_payload(tier: str, data: Optional[dict]) -> Optional[dict]:
    """Stored payloads may be camelCase; hand back snake_case when the document parses."""
    if not data:
        return data
    try:
        return pricing_from_document(tier, data).model_dump()
    except ValidationError:
        return dict(data)


def _payload(offer: VendorOffer) -> Optional[dict]:
    return _canonical_payload(offer.tier, getattr(offer, PAYLOAD_KEYS[offer.tier]))


def _to_dict(o: VendorOffer) -> dict[str, Any]:
    return {
        "id": o.id,
        "vendor_id": o.vendor_id,
        "peptide_name": o.peptide_name,
        "tier": o.tier,
        "pricing": _payload(o),
        "product_url": o.product_url,
        "discount_code": o.discount_code,
        "notes": o.notes,
        "price_source_type": o.price_source_type,
        "verification_status": o.verification_status,
        "verified_by": o.verified_by,
        "verified_at": o.verified_at.isoformat() if o.verified_at else None,
        "upload_batch_id": o.upload_batch_id,
        "submitted_by": o.submitted_by,
        "created_at": o.created_at.isoformat() if o.created_at else None,
        "updated_at": o.updated_at.isoformat() if o.updated_at else None,
    }


def _history_to_dict(h: VendorOfferPriceHistory) -> dict[str, Any]:
    return {
        "id": h.id,
        "offer_id": h.offer_id,
        "tier": h.tier,
        "previous_pricing": h.previous_pricing,
        "new_pricing": h.new_pricing,
        "changed_fields": list(h.changed_fields or []),
        "percent_change": h.percent_change,
        "upload_batch_id": h.upload_batch_id,
        "changed_by": h.changed_by,
        "created_at": h.created_at.isoformat() if h.created_at else None,
    }


def _changed_fields(previous: dict, new: dict) -> list[str]:
    return sorted(k for k in set(previous) | set(new) if previous.get(k) != new.get(k))


def _percent_change(tier: str, previous: dict, new: dict) -> Optional[float]:
    metric = COMPARISON_METRIC[tier]
    old, cur = previous.get(metric), new.get(metric)
    if not isinstance(old, (int, float)) or not isinstance(cur, (int, float)) or old == 0:
        return None
    return round((cur - old) / old * 100, 2)


def _find(session: Session, vendor_id: str, peptide_name: str, tier: str) -> Optional[VendorOffer]:
    q = (
        select(VendorOffer)
        .where(VendorOffer.vendor_id == vendor_id)
        .where(VendorOffer.peptide_name == peptide_name)
        .where(VendorOffer.tier == tier)
    )
    return session.scalars(q).first()


def upsert_offer(
    vendor_id: str,
    row: ValidRow,
    batch_id: Optional[str],
    submitted_by: Optional[str],
    source: str = "csv",
) -> tuple[dict[str, Any], bool, bool]:
    """Create or overwrite the offer keyed by (vendor_id, peptide_name, tier) in one transaction.

    Returns (offer dict, created, history_written). An overwrite always resets
    verification to pending; a changed payload also appends a history entry.
    """
    peptide_name = row.peptide_name.strip()
    new_payload = row.pricing.model_dump()
    with get_session() as session:
        offer = _find(session, vendor_id, peptide_name, row.tier)
        created = offer is None
        history_written = False
        if created:
            offer = VendorOffer(vendor_id=vendor_id, peptide_name=peptide_name, tier=row.tier)
            session.add(offer)
        else:
            previous = _payload(offer)
            if previous != new_payload:
                session.add(
                    VendorOfferPriceHistory(
                        offer_id=offer.id,
                        tier=row.tier,
                        previous_pricing=previous,
                        new_pricing=new_payload,
                        changed_fields=_changed_fields(previous or {}, new_payload),
                        percent_change=_percent_change(row.tier, previous or {}, new_payload),
                        upload_batch_id=batch_id,
                        changed_by=submitted_by,
                    )
                )
                history_written = True
        for tier, key in PAYLOAD_KEYS.items():
            setattr(offer, key, new_payload if tier == row.tier else None)
        offer.product_url = row.product_url
        offer.discount_code = row.discount_code
        offer.notes = row.notes
        offer.price_source_type = source
        offer.verification_status = status_after_overwrite()
        offer.verified_by = None
        offer.verified_at = None
        offer.upload_batch_id = batch_id
        offer.submitted_by = submitted_by
        if not created:
            offer.updated_at = utcnow()
        session.flush()
        return _to_dict(offer), created, history_written


def get_offer(offer_id: str) -> Optional[dict[str, Any]]:
    with get_session() as session:
        offer = session.get(VendorOffer, offer_id)
        return _to_dict(offer) if offer is not None else None


def find_offer(vendor_id: str, peptide_name: str, tier: str) -> Optional[dict[str, Any]]:
    with get_session() as session:
        offer = _find(session, vendor_id, peptide_name.strip(), tier)
        return _to_dict(offer) if offer is not None else None


def list_offers(
    tier: Optional[str] = None,
    vendor_id: Optional[str] = None,
    verification_status: Optional[str] = None,
    upload_batch_id: Optional[str] = None,
) -> list[dict[str, Any]]:
    """Filtered offers, newest first."""
    q = select(VendorOffer)
    if tier:
        q = q.where(VendorOffer.tier == tier)
    if vendor_id:
        q = q.where(VendorOffer.vendor_id == vendor_id)
    if verification_status:
        q = q.where(VendorOffer.verification_status == verification_status)
    if upload_batch_id:
        q = q.where(VendorOffer.upload_batch_id == upload_batch_id)
    q = q.order_by(VendorOffer.updated_at.desc())
    with get_session() as session:
        return [_to_dict(o) for o in session.scalars(q).all()]


def list_offer_ids(**criteria: Optional[str]) -> list[str]:
    return [o["id"] for o in list_offers(**criteria)]


def set_verification_status(offer_id: str, target: str, actor: Optional[str]) -> dict[str, Any]:
    """Admin transition (pending -> verified|rejected). Raises OfferNotFoundError or InvalidTransitionError."""
    with get_session() as session:
        offer = session.get(VendorOffer, offer_id)
        if offer is None:
            raise OfferNotFoundError(offer_id)
        check_transition(offer.verification_status, target)
        offer.verification_status = target
        offer.verified_by = actor
        offer.verified_at = utcnow()
        session.flush()
        return _to_dict(offer)


def delete_offer(offer_id: str) -> bool:
    """Delete an offer and its history. Returns False if it did not exist."""
    with get_session() as session:
        offer = session.get(VendorOffer, offer_id)
        if offer is None:
            return False
        session.execute(delete(VendorOfferPriceHistory).where(VendorOfferPriceHistory.offer_id == offer_id))
        session.delete(offer)
        return True


def get_history(offer_id: str) -> list[dict[str, Any]]:
    """Price history for one offer, oldest first."""
    with get_session() as session:
        if session.get(VendorOffer, offer_id) is None:
            raise OfferNotFoundError(offer_id)
        q = (
            select(VendorOfferPriceHistory)
            .where(VendorOfferPriceHistory.offer_id == offer_id)
            .order_by(VendorOfferPriceHistory.id)
        )
        return [_history_to_dict(h) for h in session.scalars(q).all()]
