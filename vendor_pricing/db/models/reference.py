"""ORM model for admin-maintained brand reference prices."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vendor_pricing.db.base import Base, TimestampMixin, UuidPrimaryKeyMixin, utcnow


class BrandReferencePrice(Base, UuidPrimaryKeyMixin, TimestampMixin):
    """List price of a brand GLP product (e.g. Wegovy), entered by an admin rather than uploaded."""

    __tablename__ = "brand_reference_pricing"

    vendor_id: Mapped[str] = mapped_column(ForeignKey("vendors.id"), nullable=False, index=True)
    product_name: Mapped[str] = mapped_column(String(256), nullable=False)
    product_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    glp_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    brand_pricing: Mapped[dict] = mapped_column(JSON, nullable=False)
    pricing_source: Mapped[str] = mapped_column(String(256), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    verification_status: Mapped[str] = mapped_column(String(16), nullable=False, default="verified")
    verified_by: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    last_price_check: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_by: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
