"""Role administration API. Admin only; admins themselves are provisioned from the CLI."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from vendor_pricing.api.auth import Actor, require_role
from vendor_pricing.api.errors import to_http
from vendor_pricing.api.models import RoleAssignment
from vendor_pricing.db.repositories import user_repo
from vendor_pricing.models.tiers import UserRole
from vendor_pricing.pricing.roles import assign_role
from vendor_pricing.utils.logger import get_logger

logger = get_logger("vendor_pricing.api.users")

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
def list_users(
    role: Optional[UserRole] = Query(None),
    actor: Actor = Depends(require_role("admin")),
) -> dict[str, Any]:
    users = user_repo.list_users(role=role)
    return {"users": users, "count": len(users)}


@router.get("/{user_id}")
def get_user(user_id: str, actor: Actor = Depends(require_role("admin"))) -> dict[str, Any]:
    """Users without a stored role are reported with the default role."""
    return user_repo.get_user(user_id) or {"user_id": user_id, "role": user_repo.DEFAULT_ROLE}


@router.put("/{user_id}/role")
def set_user_role(
    user_id: str,
    body: RoleAssignment,
    actor: Actor = Depends(require_role("admin")),
) -> dict[str, Any]:
    """Grant moderator or reset to user. 422 for admin targets or role=admin."""
    try:
        record = assign_role(user_id, body.role, granted_by=actor.user_id, email=body.email)
    except ValueError as e:
        logger.info("users.role_refused", user_id=user_id, role=body.role, actor=actor.user_id, reason=str(e))
        raise to_http(e) from e
    return record
