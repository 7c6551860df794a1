"""User role repository."""

from typing import Any, Optional

from sqlalchemy import select

from vendor_pricing.db import get_session
from vendor_pricing.db.models.user import UserRoleRecord

DEFAULT_ROLE = "user"


def _to_dict(record: UserRoleRecord) -> dict[str, Any]:
    return {"user_id": record.user_id, "role": record.role, "email": record.email, "granted_by": record.granted_by}


def get_role(user_id: str) -> str:
    """Stored role for the user, or 'user' when none is recorded."""
    with get_session() as session:
        record = session.get(UserRoleRecord, user_id)
        return record.role if record is not None else DEFAULT_ROLE


def get_user(user_id: str) -> Optional[dict[str, Any]]:
    with get_session() as session:
        record = session.get(UserRoleRecord, user_id)
        return _to_dict(record) if record is not None else None


def list_users(role: Optional[str] = None) -> list[dict[str, Any]]:
    """Users with a stored role, ordered by id."""
    with get_session() as session:
        q = select(UserRoleRecord).order_by(UserRoleRecord.user_id)
        if role:
            q = q.where(UserRoleRecord.role == role)
        return [_to_dict(r) for r in session.scalars(q).all()]


def set_role(user_id: str, role: str, email: Optional[str] = None, granted_by: Optional[str] = None) -> dict[str, Any]:
    with get_session() as session:
        record = session.get(UserRoleRecord, user_id)
        if record is None:
            record = UserRoleRecord(user_id=user_id)
            session.add(record)
        record.role = role
        if email is not None:
            record.email = email
        record.granted_by = granted_by
        session.flush()
        return _to_dict(record)


def has_admin() -> bool:
    with get_session() as session:
        q = select(UserRoleRecord.user_id).where(UserRoleRecord.role == "admin")
        return session.scalars(q).first() is not None
