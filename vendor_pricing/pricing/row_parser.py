"""CSV row parser: one data row + header mapping -> typed ParsedRow."""

import math
import re
from typing import Any, Sequence

from vendor_pricing.models.records import ParsedRow
from vendor_pricing.models.tiers import FieldRule
from vendor_pricing.pricing.errors import RowParseError
from vendor_pricing.pricing.header_mapper import HeaderMapping
from vendor_pricing.pricing.rules import get_tier_definition

TRUE_VALUES = frozenset({"true", "yes", "1"})
FALSE_VALUES = frozenset({"false", "no", "0", ""})
_THOUSANDS = re.compile(r"^-?\d{1,3}(,\d{3})+(\.\d+)?$")


def parse_number(raw: str) -> float | None:
    """Parse a numeric cell; tolerates a leading '$' and thousands separators. None if not a finite number.

    Commas are only accepted as 3-digit grouping, so "2,5" or "1,2,3" do not parse.
    """
    s = raw.strip()
    if s.startswith("$"):
        s = s[1:].strip()
    if "," in s:
        if not _THOUSANDS.match(s):
            return None
        s = s.replace(",", "")
    if not s:
        return None
    try:
        value = float(s)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_bool(raw: str) -> bool | None:
    """true/yes/1 -> True, false/no/0/blank -> False, anything else None."""
    s = raw.strip().lower()
    if s in TRUE_VALUES:
        return True
    if s in FALSE_VALUES:
        return False
    return None


def _coerce(rule: FieldRule, raw: str, line: int) -> Any:
    if rule.type == "number":
        if not raw.strip():
            return None
        value = parse_number(raw)
        if value is None and rule.required:
            raise RowParseError(line, rule.field, raw, "a number")
        return value
    if rule.type == "boolean":
        value = parse_bool(raw)
        if value is None:
            raise RowParseError(line, rule.field, raw, "true/false")
        return value
    s = raw.strip()
    return s or None


def parse_row(cells: Sequence[str], mapping: HeaderMapping, line: int) -> ParsedRow:
    """Coerce each mapped cell per its declared type. Unmapped or missing cells are absent (None).

    Raises RowParseError on the first cell that cannot be coerced.
    """
    definition = get_tier_definition(mapping.tier)
    values: dict[str, Any] = {}
    for rule in definition.rules:
        idx = mapping.index_of(rule.field)
        if idx is None or idx >= len(cells):
            values[rule.field] = False if rule.type == "boolean" else None
            continue
        values[rule.field] = _coerce(rule, cells[idx] or "", line)
    return ParsedRow(line=line, values=values)
