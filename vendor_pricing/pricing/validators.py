"""Tier validators: table-driven field checks plus each tier's computed metrics.

Each tier has exactly one validator, registered under the tier name. A
validator only ever reads its own tier's fields; there is no cross-tier math.
"""

import re
from collections.abc import Callable
from typing import Any

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from vendor_pricing.models.records import FieldError, ParsedRow, ValidationResult
from vendor_pricing.models.tiers import FieldRule, TierDefinition
from vendor_pricing.pricing.rules import get_tier_definition

Validator = Callable[[ParsedRow], ValidationResult]

_VALIDATOR_REGISTRY: dict[str, Validator] = {}
_URL_ADAPTER = TypeAdapter(HttpUrl)
_BARE_DOMAIN = re.compile(r"^[\w-]+(\.[\w-]+)+(/|$)")


def register_validator(tier: str):
    """Decorator to register the validator for a tier."""

    def decorator(fn: Validator) -> Validator:
        _VALIDATOR_REGISTRY[tier] = fn
        return fn

    return decorator


def get_validator(tier: str) -> Validator:
    """Return the validator for the tier. Raises ValueError if unknown."""
    if tier not in _VALIDATOR_REGISTRY:
        raise ValueError(f"No validator for tier {tier!r}. Registered: {list(_VALIDATOR_REGISTRY)}")
    return _VALIDATOR_REGISTRY[tier]


def validate_record(tier: str, record: ParsedRow) -> ValidationResult:
    return get_validator(tier)(record)


def can_compare_tiers(tier_a: str, tier_b: str) -> bool:
    """Offers are only comparable within one tier."""
    return tier_a == tier_b


def _fmt(value: float) -> str:
    return f"{value:g}"


def is_valid_url(value: str) -> bool:
    try:
        _URL_ADAPTER.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def normalize_url(value: str) -> str | None:
    """Return the URL, with https:// added to a bare domain like www.vendor.com/x, or None if invalid."""
    value = value.strip()
    if is_valid_url(value):
        return value
    if "://" not in value and _BARE_DOMAIN.match(value):
        candidate = f"https://{value}"
        if is_valid_url(candidate):
            return candidate
    return None


def check_field(rule: FieldRule, value: Any) -> tuple[str | None, Any]:
    """Check one value against its rule. Returns (error message or None, normalized value)."""
    if value is None:
        if rule.required:
            return f"{rule.field} is required", value
        return None, value
    if rule.type == "number":
        if rule.min is not None:
            if rule.exclusive_min and value <= rule.min:
                return f"{rule.field} must be > {_fmt(rule.min)}", value
            if not rule.exclusive_min and value < rule.min:
                return f"{rule.field} must be >= {_fmt(rule.min)}", value
        if rule.max is not None and value > rule.max:
            return f"{rule.field} must be <= {_fmt(rule.max)}", value
    elif rule.type == "url":
        url = normalize_url(value)
        if url is None:
            return f"{rule.field} must be a valid URL", value
        return None, url
    elif rule.type == "string" and rule.choices:
        for choice in rule.choices:
            if value.strip().lower() == choice.lower():
                return None, choice
        return f"{rule.field} must be one of: {', '.join(rule.choices)}", value
    return None, value


def check_rules(record: ParsedRow, definition: TierDefinition) -> tuple[list[FieldError], dict[str, Any]]:
    """Run the generic rule table. Returns field errors and the normalized values."""
    errors: list[FieldError] = []
    normalized: dict[str, Any] = {}
    for rule in definition.rules:
        message, value = check_field(rule, record.get(rule.field))
        if message:
            errors.append(FieldError(field=rule.field, message=message))
        normalized[rule.field] = value
    return errors, normalized


def _result(errors: list[FieldError], normalized: dict[str, Any], computed: dict[str, float]) -> ValidationResult:
    if errors:
        return ValidationResult(valid=False, errors=errors, normalized=normalized)
    return ValidationResult(valid=True, computed=computed, normalized=normalized)


@register_validator("research")
def validate_research(record: ParsedRow) -> ValidationResult:
    """price_per_mg = price_usd / size_mg, only once size_mg > 0 has been enforced."""
    errors, values = check_rules(record, get_tier_definition("research"))
    if errors:
        return _result(errors, values, {})
    return _result(errors, values, {"price_per_mg": values["price_usd"] / values["size_mg"]})


@register_validator("telehealth")
def validate_telehealth(record: ParsedRow) -> ValidationResult:
    """total_mg = mg_per_visit * visit_count; separate medication cost iff medication not included."""
    errors, values = check_rules(record, get_tier_definition("telehealth"))
    includes = bool(values.get("subscription_includes_medication"))
    separate = values.get("medication_separate_cost")
    if not includes and (separate is None or separate <= 0):
        errors.append(
            FieldError(
                field="medication_separate_cost",
                message="medication_separate_cost is required when medication is not included in subscription",
            )
        )
    if includes and separate is not None:
        errors.append(
            FieldError(
                field="medication_separate_cost",
                message="medication_separate_cost should not be provided when medication is included in subscription",
            )
        )
    if errors:
        return _result(errors, values, {})
    return _result(errors, values, {"total_mg": values["mg_per_visit"] * values["visit_count"]})


@register_validator("brand")
def validate_brand(record: ParsedRow) -> ValidationResult:
    """total_price = price_per_dose * dose_count."""
    errors, values = check_rules(record, get_tier_definition("brand"))
    if errors:
        return _result(errors, values, {})
    return _result(errors, values, {"total_price": values["price_per_dose"] * values["dose_count"]})
