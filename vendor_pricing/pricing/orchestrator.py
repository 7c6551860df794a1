"""Ingestion orchestrator: header mapping once, then parse + validate every row in order."""

import csv
from time import perf_counter
from typing import Sequence

from vendor_pricing.models.pricing import PRICING_MODELS
from vendor_pricing.models.records import (
    IngestionResult,
    ParsedRow,
    RowError,
    UploadSummary,
    ValidationResult,
    ValidRow,
)
from vendor_pricing.pricing.errors import MalformedCsvError, RowParseError, RowValidationError
from vendor_pricing.pricing.header_mapper import map_headers
from vendor_pricing.pricing.row_parser import parse_row
from vendor_pricing.pricing.validators import validate_record
from vendor_pricing.utils.csv_loader import split_csv_text
from vendor_pricing.utils.logger import get_logger
from vendor_pricing.utils.tracing import get_tracer

logger = get_logger("vendor_pricing.pricing.orchestrator")


def build_valid_row(tier: str, record: ParsedRow, result: ValidationResult) -> ValidRow:
    """Assemble the tier payload from validated inputs and freshly computed metrics."""
    values = {**record.values, **result.normalized}
    pricing = PRICING_MODELS[tier].model_validate({**values, **result.computed})
    return ValidRow(
        line=record.line,
        tier=tier,
        peptide_name=values["peptide_name"],
        pricing=pricing,
        product_url=values.get("product_url"),
        discount_code=values.get("discount_code"),
        notes=values.get("notes"),
        vendor_name=values.get("vendor_name"),
    )


def _check_row(tier: str, record: ParsedRow) -> ValidRow:
    result = validate_record(tier, record)
    if not result.valid:
        raise RowValidationError(record.line, result.errors)
    return build_valid_row(tier, record, result)


def ingest_rows(header: Sequence[str], rows: Sequence[Sequence[str]], tier: str) -> IngestionResult:
    """Validate a parsed CSV for one tier.

    Raises HeaderMappingError before touching any row when a required column is
    missing. Otherwise always returns a summary: bad rows are recorded in
    summary.errors with their 1-based line number and never stop the batch.
    """
    tracer = get_tracer()
    start = perf_counter()
    log = logger.bind(tier=tier)

    with tracer.start_as_current_span("map_headers", attributes={"ingest.tier": tier}):
        mapping = map_headers(header, tier)
    if mapping.ignored_columns:
        log.info("ingest.ignored_columns", columns=mapping.ignored_columns)

    valid_rows: list[ValidRow] = []
    errors: list[RowError] = []
    for line, cells in enumerate(rows, start=1):
        try:
            record = parse_row(cells, mapping, line)
            valid_rows.append(_check_row(tier, record))
        except RowParseError as e:
            errors.append(RowError(line=line, message=str(e), kind="parse", fields=[e.field]))
            log.debug("ingest.row_rejected", line=line, kind="parse", reason=str(e))
        except RowValidationError as e:
            errors.append(
                RowError(line=line, message=str(e), kind="validation", fields=[fe.field for fe in e.errors])
            )
            log.debug("ingest.row_rejected", line=line, kind="validation", reason=str(e))

    summary = UploadSummary(
        total_rows=len(rows),
        success_count=len(valid_rows),
        failure_count=len(errors),
        errors=errors,
    )
    log.info(
        "ingest.complete",
        total_rows=summary.total_rows,
        success_count=summary.success_count,
        failure_count=summary.failure_count,
        duration_ms=round((perf_counter() - start) * 1000, 2),
    )
    return IngestionResult(
        tier=tier,
        summary=summary,
        valid_rows=valid_rows,
        ignored_columns=mapping.ignored_columns,
    )


def ingest_csv_text(text: str, tier: str) -> IngestionResult:
    """Split CSV text (header row first) and run ingest_rows. Raises MalformedCsvError for unreadable CSV."""
    try:
        header, rows = split_csv_text(text)
    except csv.Error as e:
        logger.warning("ingest.malformed_csv", tier=tier, error=str(e))
        raise MalformedCsvError(str(e)) from e
    return ingest_rows(header, rows, tier)
