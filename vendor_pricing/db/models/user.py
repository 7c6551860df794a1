"""ORM model for user roles (identity comes from the upstream auth layer)."""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from vendor_pricing.db.base import Base, TimestampMixin


class UserRoleRecord(Base, TimestampMixin):
    __tablename__ = "user_roles"

    user_id: Mapped[str] = mapped_column(String(256), primary_key=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="user", index=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    granted_by: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
