"""Downloadable CSV templates, one per tier, built from the tier's rule table."""

import csv
import io

from vendor_pricing.pricing.rules import get_tier_definition

TEMPLATE_FILE_NAMES = {
    "research": "vendor_pricing_research_peptides_template.csv",
    "telehealth": "vendor_pricing_telehealth_glp_template.csv",
    "brand": "vendor_pricing_brand_glp_template.csv",
}

EXAMPLE_ROWS: dict[str, list[dict[str, str]]] = {
    "research": [
        {
            "peptide_name": "BPC-157",
            "vendor_name": "Peptide Sciences",
            "size_mg": "5",
            "price_usd": "45.00",
            "shipping_usd": "12.00",
            "lab_test_url": "https://example.com/lab-test",
        },
        {"peptide_name": "TB-500", "vendor_name": "Core Peptides", "size_mg": "10", "price_usd": "42.00"},
    ],
    "telehealth": [
        {
            "peptide_name": "Semaglutide",
            "vendor_name": "Ro",
            "subscription_price_monthly": "399.00",
            "subscription_includes_medication": "true",
            "consultation_included": "true",
            "glp_type": "Semaglutide",
            "mg_per_visit": "2.5",
            "visit_count": "4",
        },
        {
            "peptide_name": "Tirzepatide",
            "vendor_name": "Hims",
            "subscription_price_monthly": "199.00",
            "subscription_includes_medication": "false",
            "medication_separate_cost": "70.00",
            "consultation_included": "true",
            "glp_type": "Tirzepatide",
            "mg_per_visit": "5",
            "visit_count": "4",
        },
    ],
    "brand": [
        {
            "peptide_name": "Wegovy",
            "brand_name": "Novo Nordisk",
            "dose_strength": "0.25mg",
            "price_per_dose": "185.00",
            "dose_count": "4",
        },
        {
            "peptide_name": "Ozempic",
            "brand_name": "Novo Nordisk",
            "dose_strength": "0.5mg",
            "price_per_dose": "225.00",
            "dose_count": "4",
        },
    ],
}


def template_columns(tier: str) -> list[str]:
    """Required columns first, then optional ones, each group in rule-table order."""
    rules = get_tier_definition(tier).rules
    return [r.field for r in rules if r.required] + [r.field for r in rules if not r.required]


def generate_csv_template(tier: str, with_examples: bool = True) -> str:
    """Header row plus example rows that pass validation for the tier."""
    columns = template_columns(tier)
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    if with_examples:
        writer.writerows(EXAMPLE_ROWS[tier])
    return buf.getvalue()


def template_file_name(tier: str) -> str:
    get_tier_definition(tier)
    return TEMPLATE_FILE_NAMES[tier]
