"""Tier rules registry: loads rule tables and header aliases from YAML, validates and caches them."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from vendor_pricing.config import TIER_RULES_PATH
from vendor_pricing.models.tiers import TIERS, TierDefinition
from vendor_pricing.utils.logger import get_logger

logger = get_logger("vendor_pricing.pricing.rules")

_definitions: dict[str, TierDefinition] | None = None


def normalize_header(header: str) -> str:
    """Fold a header cell to its matching key: lower-case, punctuation/whitespace to '_'."""
    s = (header or "").strip().lower()
    s = re.sub(r"[^a-z0-9]+", "_", s)
    return s.strip("_")


def _get_rules_path() -> Path:
    raw = os.environ.get("TIER_RULES_PATH", "").strip()
    if raw:
        return Path(raw)
    return Path(TIER_RULES_PATH)


def _build_definitions(raw: dict[str, Any]) -> dict[str, TierDefinition]:
    common = raw.get("common") or {}
    tiers = raw.get("tiers") or {}
    missing = [t for t in TIERS if t not in tiers]
    if missing:
        raise ValueError(f"Tier rules missing tier(s): {missing}")
    unknown = [t for t in tiers if t not in TIERS]
    if unknown:
        raise ValueError(f"Tier rules declare unknown tier(s): {unknown}")

    definitions: dict[str, TierDefinition] = {}
    for tier in TIERS:
        tier_cfg = tiers[tier] or {}
        rules = list(common.get("rules") or []) + list(tier_cfg.get("rules") or [])
        aliases = {**(common.get("aliases") or {}), **(tier_cfg.get("aliases") or {})}
        try:
            definition = TierDefinition(tier=tier, rules=rules, aliases=aliases)
        except ValidationError as e:
            raise ValueError(f"Invalid rules for tier {tier!r}: {e}") from e
        _check_unambiguous(definition)
        definitions[tier] = definition
    return definitions


def _check_unambiguous(definition: TierDefinition) -> None:
    """Every normalized header key must resolve to exactly one field within a tier."""
    seen: dict[str, str] = {}
    for rule in definition.rules:
        keys = [rule.field, *definition.aliases.get(rule.field, [])]
        for key in keys:
            norm = normalize_header(key)
            owner = seen.get(norm)
            if owner is not None and owner != rule.field:
                raise ValueError(
                    f"Tier {definition.tier!r}: header {key!r} maps to both {owner!r} and {rule.field!r}"
                )
            seen[norm] = rule.field


def _load_definitions() -> dict[str, TierDefinition]:
    global _definitions
    if _definitions is not None:
        return _definitions
    path = _get_rules_path()
    if not path.exists():
        raise FileNotFoundError(
            f"Tier rules not found: {path}. Set TIER_RULES_PATH or restore vendor_pricing/tiers.yaml."
        )
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in tier rules {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"Tier rules must be a YAML object (dict), got {type(raw)}")
    _definitions = _build_definitions(raw)
    logger.info(
        "tier_rules.loaded",
        path=str(path),
        tiers={t: len(d.rules) for t, d in _definitions.items()},
    )
    return _definitions


def reload_rules() -> dict[str, TierDefinition]:
    """Force-reload rule tables from disk."""
    global _definitions
    _definitions = None
    return _load_definitions()


def get_tier_definition(tier: str) -> TierDefinition:
    """Return the rule table for a tier. Raises ValueError for an unknown tier."""
    definitions = _load_definitions()
    if tier not in definitions:
        raise ValueError(f"Unknown tier {tier!r}. Known: {list(definitions)}")
    return definitions[tier]


def required_fields(tier: str) -> list[str]:
    return get_tier_definition(tier).required_fields
