"""ORM model for CSV upload batches."""

from typing import Optional

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from vendor_pricing.db.base import Base, TimestampMixin, UuidPrimaryKeyMixin


class VendorPriceUpload(Base, UuidPrimaryKeyMixin, TimestampMixin):
    """One processed upload. The id doubles as the upload_batch_id stamped on every offer it wrote."""

    __tablename__ = "vendor_price_uploads"

    vendor_id: Mapped[str] = mapped_column(ForeignKey("vendors.id"), nullable=False, index=True)
    tier: Mapped[str] = mapped_column(String(16), nullable=False)
    file_name: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    uploaded_by: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, index=True)

    row_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    success_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failure_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    persisted_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    errors: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    persistence_errors: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    ignored_columns: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
