"""ORM model for the vendor directory."""

from typing import Optional

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from vendor_pricing.db.base import Base, TimestampMixin, UuidPrimaryKeyMixin


class Vendor(Base, UuidPrimaryKeyMixin, TimestampMixin):
    """A vendor and the tiers it may publish offers in."""

    __tablename__ = "vendors"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    # trimmed, lowercased, whitespace collapsed; duplicates are rejected on this column
    normalized_name: Mapped[str] = mapped_column(String(256), unique=True, nullable=False, index=True)
    website_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tier_support: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
