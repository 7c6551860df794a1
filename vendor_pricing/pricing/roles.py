"""Role provisioning. Roles change only through these explicit, logged calls."""

from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email

from vendor_pricing.db.repositories import user_repo
from vendor_pricing.models.tiers import ROLE_RANK
from vendor_pricing.pricing.errors import PricingError
from vendor_pricing.utils.logger import get_logger

logger = get_logger("vendor_pricing.pricing.roles")


class AdminAlreadyProvisionedError(PricingError):
    """An admin exists and the bootstrap was not forced."""


def normalize_email(email: str) -> str:
    """Validated, normalized address. Raises ValueError when malformed."""
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e


def provision_admin(user_id: str, email: Optional[str] = None, force: bool = False, granted_by: str = "cli") -> dict[str, Any]:
    """One-time admin bootstrap. Refuses when any admin exists unless force is set."""
    user_id = (user_id or "").strip()
    if not user_id:
        raise ValueError("user_id is required")
    normalized = normalize_email(email) if email else None
    if user_repo.has_admin() and not force:
        logger.warning("roles.provision_admin_refused", user_id=user_id)
        raise AdminAlreadyProvisionedError("An admin already exists; pass force to provision another")
    record = user_repo.set_role(user_id, "admin", email=normalized, granted_by=granted_by)
    logger.warning("roles.admin_provisioned", user_id=user_id, email=normalized, granted_by=granted_by, forced=force)
    return record


GRANTABLE_ROLES: tuple[str, ...] = ("moderator", "user")


def assign_role(user_id: str, role: str, granted_by: str, email: Optional[str] = None) -> dict[str, Any]:
    """Promote a user to moderator or demote back to user.

    Admins are only created by provision_admin and are never changed here.
    Raises ValueError for an unknown or non-grantable role, or an admin target.
    """
    user_id = (user_id or "").strip()
    if not user_id:
        raise ValueError("user_id is required")
    if role not in ROLE_RANK:
        raise ValueError(f"role must be one of: {', '.join(ROLE_RANK)}")
    if role not in GRANTABLE_ROLES:
        raise ValueError("admin is granted only through provision-admin")
    if user_repo.get_role(user_id) == "admin":
        raise ValueError(f"{user_id} is an admin; admin roles are not changed here")
    normalized = normalize_email(email) if email else None
    record = user_repo.set_role(user_id, role, email=normalized, granted_by=granted_by)
    logger.info("roles.assigned", user_id=user_id, role=role, granted_by=granted_by)
    return record
