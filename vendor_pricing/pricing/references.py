"""Brand reference pricing: admin-maintained list prices for brand GLP products.

A reference is checked against the brand tier's rule table the same way an
uploaded row is. Its package total is rounded to cents, and a total supplied
by the admin must agree with price_per_dose * dose_count within a cent.
"""

from typing import Any, Optional

from pydantic.alias_generators import to_snake

from vendor_pricing.db.repositories import reference_repo
from vendor_pricing.pricing.errors import HeaderMappingError, InvalidOfferError, ReferencePriceNotFoundError
from vendor_pricing.pricing.offers import require_tier_support
from vendor_pricing.pricing.orchestrator import ingest_rows
from vendor_pricing.pricing.row_parser import parse_number
from vendor_pricing.pricing.rules import get_tier_definition
from vendor_pricing.pricing.validators import check_field
from vendor_pricing.utils.logger import get_logger

logger = get_logger("vendor_pricing.pricing.references")

TOTAL_KEYS = ("total_price", "total_package_price")
TOTAL_TOLERANCE = 0.01


def brand_total_price(price_per_dose: float, dose_count: float) -> float:
    """Package price rounded to cents. Raises ValueError when dose_count < 1."""
    if dose_count < 1:
        raise ValueError("dose_count must be at least 1")
    return round(price_per_dose * dose_count, 2)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def canonical_glp_type(value: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """(error message or None, canonical spelling) using the telehealth tier's glp_type choices."""
    rule = get_tier_definition("telehealth").rule_for("glp_type")
    return check_field(rule, (value or "").strip() or None)


def _supplied_total(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return parse_number(str(value))


def validate_reference(
    product_name: Optional[str],
    glp_type: Optional[str],
    brand_pricing: Optional[dict[str, Any]],
    pricing_source: Optional[str],
    product_url: Optional[str] = None,
) -> dict[str, Any]:
    """Return the validated, canonical reference fields.

    brand_pricing keys may be camelCase or snake_case and may use the brand
    column aliases (doses_per_package, ...). Raises InvalidOfferError listing
    every problem found.
    """
    errors: list[str] = []
    name = (product_name or "").strip()
    if not name:
        errors.append("product_name is required")
    glp_error, glp = canonical_glp_type(glp_type)
    if glp_error:
        errors.append(glp_error)
    source = (pricing_source or "").strip()
    if not source:
        errors.append("pricing_source is required")

    pricing = {to_snake(str(k)): v for k, v in (brand_pricing or {}).items()}
    supplied = None
    for key in TOTAL_KEYS:
        value = pricing.pop(key, None)
        if value not in (None, ""):
            supplied = value

    # a placeholder name keeps a blank product_name from being reported twice
    fields = {"peptide_name": name or "-", "product_url": product_url, **pricing}
    row = None
    try:
        result = ingest_rows(list(fields), [[_cell(v) for v in fields.values()]], "brand")
    except HeaderMappingError as e:
        errors.append(f"brand_pricing is missing: {', '.join(e.missing)}")
    else:
        errors.extend(err.message for err in result.summary.errors)
        row = result.valid_rows[0] if result.valid_rows else None

    payload: Optional[dict[str, Any]] = None
    if row is not None:
        payload = row.pricing.model_dump()
        calculated = payload["price_per_dose"] * payload["dose_count"]
        payload["total_price"] = brand_total_price(payload["price_per_dose"], payload["dose_count"])
        if supplied is not None:
            total = _supplied_total(supplied)
            if total is None:
                errors.append(f"total_price: could not parse {str(supplied)!r} as a number")
            elif abs(total - calculated) > TOTAL_TOLERANCE:
                errors.append(f"total_price ({total:g}) doesn't match calculated value ({calculated:.2f})")

    if errors:
        raise InvalidOfferError(errors)
    return {
        "product_name": name,
        "product_url": row.product_url,
        "glp_type": glp,
        "brand_pricing": payload,
        "pricing_source": source,
    }


def create_reference(
    vendor_id: str,
    product_name: Optional[str],
    glp_type: Optional[str],
    brand_pricing: Optional[dict[str, Any]],
    pricing_source: Optional[str],
    actor: Optional[str],
    product_url: Optional[str] = None,
    notes: Optional[str] = None,
) -> dict[str, Any]:
    """Validate and store a new reference; it is verified by the admin who enters it."""
    require_tier_support(vendor_id, "brand")
    fields = validate_reference(product_name, glp_type, brand_pricing, pricing_source, product_url)
    ref = reference_repo.create_reference(actor, vendor_id=vendor_id, notes=(notes or "").strip() or None, **fields)
    logger.info("references.created", reference_id=ref["id"], product_name=ref["product_name"], actor=actor)
    return ref


def get_reference(reference_id: str) -> dict[str, Any]:
    ref = reference_repo.get_reference(reference_id)
    if ref is None:
        raise ReferencePriceNotFoundError(reference_id)
    return ref


def list_references(glp_type: Optional[str] = None, vendor_id: Optional[str] = None) -> list[dict[str, Any]]:
    """References ordered by product name; glp_type matches case-insensitively."""
    if glp_type:
        message, glp_type = canonical_glp_type(glp_type)
        if message:
            raise ValueError(message)
    return reference_repo.list_references(glp_type=glp_type, vendor_id=vendor_id)


def update_reference(
    reference_id: str,
    vendor_id: str,
    product_name: Optional[str],
    glp_type: Optional[str],
    brand_pricing: Optional[dict[str, Any]],
    pricing_source: Optional[str],
    actor: Optional[str],
    product_url: Optional[str] = None,
    notes: Optional[str] = None,
) -> dict[str, Any]:
    """Replace a reference's fields after the same validation as create."""
    get_reference(reference_id)
    require_tier_support(vendor_id, "brand")
    fields = validate_reference(product_name, glp_type, brand_pricing, pricing_source, product_url)
    ref = reference_repo.update_reference(
        reference_id, actor, vendor_id=vendor_id, notes=(notes or "").strip() or None, **fields
    )
    logger.info("references.updated", reference_id=reference_id, actor=actor)
    return ref


def mark_price_checked(reference_id: str, actor: Optional[str]) -> dict[str, Any]:
    ref = reference_repo.touch_price_check(reference_id, actor)
    logger.info("references.price_checked", reference_id=reference_id, actor=actor)
    return ref


def delete_reference(reference_id: str, actor: Optional[str]) -> None:
    if not reference_repo.delete_reference(reference_id):
        raise ReferencePriceNotFoundError(reference_id)
    logger.info("references.deleted", reference_id=reference_id, actor=actor)
