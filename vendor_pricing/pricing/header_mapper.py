"""Header mapper: resolve CSV header cells to canonical field names for a tier."""

from dataclasses import dataclass, field
from typing import Sequence

from vendor_pricing.pricing.errors import HeaderMappingError
from vendor_pricing.pricing.rules import get_tier_definition, normalize_header


@dataclass
class HeaderMapping:
    """Canonical field -> column index, plus the header cells nothing matched."""

    tier: str
    columns: dict[str, int]
    ignored_columns: list[str] = field(default_factory=list)

    def index_of(self, field_name: str) -> int | None:
        return self.columns.get(field_name)


def _alias_index(tier: str) -> dict[str, str]:
    definition = get_tier_definition(tier)
    index: dict[str, str] = {}
    for rule in definition.rules:
        index[normalize_header(rule.field)] = rule.field
        for alias in definition.aliases.get(rule.field, []):
            index[normalize_header(alias)] = rule.field
    return index


def map_headers(header: Sequence[str], tier: str) -> HeaderMapping:
    """Map header cells to canonical fields; raise HeaderMappingError if a required field is missing.

    Unknown headers are kept in ignored_columns. When two columns resolve to the
    same field, the leftmost one wins and the other is ignored.
    """
    aliases = _alias_index(tier)
    columns: dict[str, int] = {}
    ignored: list[str] = []
    for idx, cell in enumerate(header):
        canonical = aliases.get(normalize_header(cell))
        if canonical is None or canonical in columns:
            if (cell or "").strip():
                ignored.append(cell.strip())
            continue
        columns[canonical] = idx

    missing = [f for f in get_tier_definition(tier).required_fields if f not in columns]
    if missing:
        raise HeaderMappingError(tier, missing)
    return HeaderMapping(tier=tier, columns=columns, ignored_columns=ignored)
