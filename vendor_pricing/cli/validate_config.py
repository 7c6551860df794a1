"""Validate tier rules config: load YAML, check validators exist, print summary table."""

from rich.table import Table

from vendor_pricing.pricing.rules import _get_rules_path, reload_rules
from vendor_pricing.pricing.templates import template_columns
from vendor_pricing.pricing.validators import get_validator

from .shared import console, logger


def validate_config() -> None:
    """Load the tier rules YAML, validate every tier definition, print summary table."""
    log = logger.bind(command="validate-config")
    log.info("validate_config.start", path=str(_get_rules_path()))

    try:
        definitions = reload_rules()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Config error: {e}[/red]")
        log.error("validate_config.fail", error=str(e))
        raise SystemExit(1) from e

    errors = []
    for tier in definitions:
        try:
            get_validator(tier)
        except ValueError as e:
            errors.append(str(e))
    if errors:
        for msg in errors:
            console.print(f"[red]{msg}[/red]")
        log.error("validate_config.validation_failed", errors=errors)
        raise SystemExit(1)

    table = Table(title="Tier rules")
    table.add_column("Tier", style="cyan")
    table.add_column("Required columns", style="green")
    table.add_column("Fields", justify="right")
    table.add_column("Aliases", justify="right")
    table.add_column("Template columns")

    for tier, definition in definitions.items():
        alias_count = sum(len(v) for v in definition.aliases.values())
        table.add_row(
            tier,
            ", ".join(definition.required_fields),
            str(len(definition.rules)),
            str(alias_count),
            str(len(template_columns(tier))),
        )

    console.print(table)
    console.print(f"[green]Config valid. {len(definitions)} tiers.[/green]")
    log.info("validate_config.ok", tiers=len(definitions))
