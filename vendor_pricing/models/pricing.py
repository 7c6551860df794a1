"""Tier-specific pricing payloads.

Stored documents may carry either snake_case or camelCase keys (two backends
wrote them); these models accept both and always dump snake_case, so code past
the store boundary sees one canonical shape.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _PricingBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ResearchPricing(_PricingBase):
    """Research tier: spot price per vial, compared by $/mg."""

    price_usd: float
    size_mg: float
    shipping_usd: Optional[float] = None
    price_per_mg: float
    lab_test_url: Optional[str] = None


class TelehealthPricing(_PricingBase):
    """Telehealth tier: subscription pricing with dose transparency."""

    subscription_price_monthly: float
    subscription_includes_medication: bool = False
    medication_separate_cost: Optional[float] = None
    consultation_included: bool = False
    glp_type: str
    mg_per_visit: float
    visit_count: float
    total_mg: float


class BrandPricing(_PricingBase):
    """Brand tier: originator medication priced per dose."""

    dose_strength: str
    price_per_dose: float
    dose_count: float
    total_price: float
    brand_name: Optional[str] = None


PricingPayload = Union[ResearchPricing, TelehealthPricing, BrandPricing]

PRICING_MODELS: dict[str, type[_PricingBase]] = {
    "research": ResearchPricing,
    "telehealth": TelehealthPricing,
    "brand": BrandPricing,
}

# Column/document key holding each tier's payload
PAYLOAD_KEYS: dict[str, str] = {
    "research": "research_pricing",
    "telehealth": "telehealth_pricing",
    "brand": "brand_pricing",
}

# Metric each tier is compared and sorted by, and the raw inputs whose change counts as a price change
COMPARISON_METRIC: dict[str, str] = {
    "research": "price_per_mg",
    "telehealth": "subscription_price_monthly",
    "brand": "price_per_dose",
}
PRICE_FIELDS: dict[str, tuple[str, ...]] = {
    "research": ("price_usd", "size_mg", "shipping_usd"),
    "telehealth": ("subscription_price_monthly", "medication_separate_cost", "mg_per_visit", "visit_count"),
    "brand": ("price_per_dose", "dose_count", "dose_strength"),
}


def pricing_from_document(tier: str, data: dict) -> PricingPayload:
    """Adapt a stored (either casing) payload dict into the tier's canonical model."""
    model = PRICING_MODELS[tier]
    return model.model_validate(data)
