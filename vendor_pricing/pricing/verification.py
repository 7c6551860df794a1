"""Verification status state machine for offers.

Admin actions may only move a pending offer to verified or rejected. The way
back to pending is an upsert overwrite, which always resets the status.
"""

from vendor_pricing.pricing.errors import InvalidTransitionError

PENDING = "pending"
VERIFIED = "verified"
REJECTED = "rejected"

ADMIN_TRANSITIONS: frozenset[tuple[str, str]] = frozenset(
    {
        (PENDING, VERIFIED),
        (PENDING, REJECTED),
    }
)


def check_transition(current: str, target: str) -> None:
    """Raise InvalidTransitionError unless an admin may move current -> target."""
    if (current, target) not in ADMIN_TRANSITIONS:
        raise InvalidTransitionError(current, target)


def can_transition(current: str, target: str) -> bool:
    return (current, target) in ADMIN_TRANSITIONS


def status_after_overwrite() -> str:
    """Any overwrite of an existing offer sends it back to review."""
    return PENDING
