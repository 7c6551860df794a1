"""Intermediate and result records of the ingestion pipeline."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from vendor_pricing.models.pricing import PricingPayload

RowErrorKind = Literal["parse", "validation", "persistence"]


class ParsedRow(BaseModel):
    """Typed intermediate record for one CSV data row (values keyed by canonical field)."""

    line: int
    values: dict[str, Any] = Field(default_factory=dict)

    def get(self, field: str) -> Any:
        return self.values.get(field)


class FieldError(BaseModel):
    field: str
    message: str


class ValidationResult(BaseModel):
    """Outcome of one tier validator run."""

    valid: bool
    errors: list[FieldError] = Field(default_factory=list)
    computed: dict[str, float] = Field(default_factory=dict)
    # choice fields rewritten to their canonical spelling (e.g. "semaglutide" -> "Semaglutide")
    normalized: dict[str, Any] = Field(default_factory=dict)


class ValidRow(BaseModel):
    """A row that passed parsing and validation, ready for persistence."""

    line: int
    tier: str
    peptide_name: str
    pricing: PricingPayload
    product_url: Optional[str] = None
    discount_code: Optional[str] = None
    notes: Optional[str] = None
    vendor_name: Optional[str] = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RowError(_CamelModel):
    """One failing line with a human-readable reason."""

    line: int
    message: str
    kind: RowErrorKind = "validation"
    fields: list[str] = Field(default_factory=list)


class UploadSummary(_CamelModel):
    """Summary returned to the caller; dumps as totalRows/successCount/... with by_alias=True."""

    total_rows: int = 0
    success_count: int = 0
    failure_count: int = 0
    errors: list[RowError] = Field(default_factory=list)


class IngestionResult(BaseModel):
    """Orchestrator output: summary plus the valid rows to persist."""

    tier: str
    summary: UploadSummary
    valid_rows: list[ValidRow] = Field(default_factory=list)
    ignored_columns: list[str] = Field(default_factory=list)


class PersistenceResult(_CamelModel):
    created: int = 0
    updated: int = 0
    history_created: int = 0
    errors: list[RowError] = Field(default_factory=list)

    @property
    def persisted(self) -> int:
        return self.created + self.updated


class UploadOutcome(_CamelModel):
    """Response of one upload: summary plus what was actually written."""

    upload_id: Optional[str] = None
    status: Optional[str] = None
    dry_run: bool = False
    summary: UploadSummary
    persisted: int = 0
    persistence_errors: list[RowError] = Field(default_factory=list)
    ignored_columns: list[str] = Field(default_factory=list)


class BulkResult(_CamelModel):
    """Per-document outcome counts of a bulk admin operation."""

    matched: int = 0
    succeeded: int = 0
    # not pending, so the transition does not apply
    skipped: int = 0
    failed: int = 0
    failed_ids: list[str] = Field(default_factory=list)
