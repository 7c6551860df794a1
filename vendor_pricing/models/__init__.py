"""Pydantic models for vendor tier pricing."""

from vendor_pricing.models.pricing import (
    BrandPricing,
    PricingPayload,
    ResearchPricing,
    TelehealthPricing,
    pricing_from_document,
)
from vendor_pricing.models.records import (
    BulkResult,
    FieldError,
    IngestionResult,
    ParsedRow,
    PersistenceResult,
    RowError,
    UploadOutcome,
    UploadSummary,
    ValidationResult,
    ValidRow,
)
from vendor_pricing.models.tiers import (
    TIERS,
    FieldRule,
    TierDefinition,
    UserRole,
    VendorTier,
    VerificationStatus,
)

__all__ = [
    "TIERS",
    "VendorTier",
    "VerificationStatus",
    "UserRole",
    "FieldRule",
    "TierDefinition",
    "ResearchPricing",
    "TelehealthPricing",
    "BrandPricing",
    "PricingPayload",
    "pricing_from_document",
    "ParsedRow",
    "FieldError",
    "ValidationResult",
    "ValidRow",
    "RowError",
    "UploadSummary",
    "IngestionResult",
    "UploadOutcome",
    "BulkResult",
    "PersistenceResult",
]
