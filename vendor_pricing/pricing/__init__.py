"""Ingestion pipeline: header mapping, row parsing, tier validation, persistence."""

from vendor_pricing.pricing.errors import (
    HeaderMappingError,
    InvalidTransitionError,
    MalformedCsvError,
    PersistenceError,
    PricingError,
    RowParseError,
    RowValidationError,
)
from vendor_pricing.pricing.header_mapper import map_headers
from vendor_pricing.pricing.orchestrator import ingest_csv_text, ingest_rows
from vendor_pricing.pricing.row_parser import parse_row
from vendor_pricing.pricing.validators import can_compare_tiers, validate_record

__all__ = [
    "PricingError",
    "HeaderMappingError",
    "MalformedCsvError",
    "RowParseError",
    "RowValidationError",
    "PersistenceError",
    "InvalidTransitionError",
    "map_headers",
    "parse_row",
    "validate_record",
    "can_compare_tiers",
    "ingest_rows",
    "ingest_csv_text",
]
