"""Tier, status and rule-table models."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

VendorTier = Literal["research", "telehealth", "brand"]
VerificationStatus = Literal["pending", "verified", "rejected"]
UserRole = Literal["admin", "moderator", "user"]
FieldType = Literal["number", "boolean", "string", "url"]

TIERS: tuple[str, ...] = ("research", "telehealth", "brand")
ROLE_RANK: dict[str, int] = {"user": 1, "moderator": 2, "admin": 3}


class FieldRule(BaseModel):
    """One declarative field rule of a tier's rule table."""

    field: str
    type: FieldType
    required: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    exclusive_min: bool = False
    choices: Optional[list[str]] = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "FieldRule":
        if (self.min is not None or self.max is not None) and self.type != "number":
            raise ValueError(f"{self.field}: min/max only apply to number fields")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"{self.field}: min ({self.min}) is greater than max ({self.max})")
        return self


class TierDefinition(BaseModel):
    """Rule table and header aliases for one tier."""

    tier: VendorTier
    rules: list[FieldRule]
    aliases: dict[str, list[str]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_aliases(self) -> "TierDefinition":
        fields = {r.field for r in self.rules}
        if len(fields) != len(self.rules):
            raise ValueError(f"Tier {self.tier!r} declares a field more than once")
        unknown = set(self.aliases) - fields
        if unknown:
            raise ValueError(f"Tier {self.tier!r} has aliases for undeclared fields: {sorted(unknown)}")
        return self

    def rule_for(self, field: str) -> Optional[FieldRule]:
        for rule in self.rules:
            if rule.field == field:
                return rule
        return None

    @property
    def required_fields(self) -> list[str]:
        return [r.field for r in self.rules if r.required]
