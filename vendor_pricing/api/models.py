"""Request bodies for the admin API (accept camelCase or snake_case keys)."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from vendor_pricing.models.tiers import UserRole, VendorTier, VerificationStatus


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VendorCreate(_Body):
    name: str = Field(min_length=1)
    website_url: Optional[str] = None
    tier_support: list[VendorTier] = Field(default_factory=list)
    verified: bool = False


class VendorUpdate(_Body):
    name: Optional[str] = Field(default=None, min_length=1)
    website_url: Optional[str] = None
    tier_support: Optional[list[VendorTier]] = None
    verified: Optional[bool] = None


class BulkCriteria(_Body):
    """At least one field must be set."""

    upload_batch_id: Optional[str] = None
    vendor_id: Optional[str] = None
    tier: Optional[VendorTier] = None
    verification_status: Optional[VerificationStatus] = None


class RejectBody(_Body):
    reason: Optional[str] = None


class RoleAssignment(_Body):
    role: UserRole
    email: Optional[str] = None


class ReferencePriceBody(_Body):
    """Brand reference price. brand_pricing keys may use either casing."""

    vendor_id: str = Field(min_length=1)
    product_name: Optional[str] = None
    product_url: Optional[str] = None
    glp_type: Optional[str] = None
    brand_pricing: dict[str, Any] = Field(default_factory=dict)
    pricing_source: Optional[str] = None
    notes: Optional[str] = None
