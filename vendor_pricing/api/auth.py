"""Caller identity and role checks.

The upstream auth layer verifies the user and forwards the id as X-User-Id;
roles are looked up in the user_roles table and are never granted here.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException

from vendor_pricing.db.repositories import user_repo
from vendor_pricing.models.tiers import ROLE_RANK


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str

    def has_role(self, minimum: str) -> bool:
        return ROLE_RANK.get(self.role, 0) >= ROLE_RANK[minimum]


def current_actor(x_user_id: Optional[str] = Header(None)) -> Actor:
    """Resolve the caller from X-User-Id; 401 when absent."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return Actor(user_id=user_id, role=user_repo.get_role(user_id))


def require_role(minimum: str):
    """Dependency factory: 403 unless the caller's role is at least `minimum`."""
    if minimum not in ROLE_RANK:
        raise ValueError(f"Unknown role {minimum!r}")

    def _check(actor: Actor = Depends(current_actor)) -> Actor:
        if not actor.has_role(minimum):
            raise HTTPException(status_code=403, detail=f"Requires {minimum} role")
        return actor

    return _check
