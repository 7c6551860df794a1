"""ORM models for vendor offers and their price history."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vendor_pricing.db.base import Base, TimestampMixin, UuidPrimaryKeyMixin, utcnow


class VendorOffer(Base, UuidPrimaryKeyMixin, TimestampMixin):
    """One vendor's offer for one peptide in one tier. Only the tier's own payload column is set."""

    __tablename__ = "vendor_offers"
    __table_args__ = (UniqueConstraint("vendor_id", "peptide_name", "tier", name="uq_offer_vendor_peptide_tier"),)

    vendor_id: Mapped[str] = mapped_column(ForeignKey("vendors.id"), nullable=False, index=True)
    peptide_name: Mapped[str] = mapped_column(String(256), nullable=False)
    tier: Mapped[str] = mapped_column(String(16), nullable=False, index=True)

    research_pricing: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    telehealth_pricing: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    brand_pricing: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    product_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    discount_code: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price_source_type: Mapped[str] = mapped_column(String(16), nullable=False, default="csv")

    verification_status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending", index=True)
    verified_by: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    upload_batch_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    submitted_by: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)


class VendorOfferPriceHistory(Base):
    """Append-only record of a pricing payload change on an existing offer."""

    __tablename__ = "vendor_offer_price_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    offer_id: Mapped[str] = mapped_column(ForeignKey("vendor_offers.id", ondelete="CASCADE"), nullable=False, index=True)
    tier: Mapped[str] = mapped_column(String(16), nullable=False)
    previous_pricing: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    new_pricing: Mapped[dict] = mapped_column(JSON, nullable=False)
    changed_fields: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    percent_change: Mapped[Optional[float]] = mapped_column(nullable=True)
    upload_batch_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    changed_by: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
