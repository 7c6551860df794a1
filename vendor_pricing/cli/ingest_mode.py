"""Ingest mode: validate (and optionally persist) a CSV price list from disk; print tier templates."""

from pathlib import Path
from typing import Optional

import typer

from vendor_pricing.config import OUTPUT_DIR
from vendor_pricing.pricing.errors import PricingError
from vendor_pricing.pricing.templates import generate_csv_template, template_file_name
from vendor_pricing.pricing.uploads import process_upload
from vendor_pricing.utils.logger import bind_context, clear_context

from .shared import console, logger, print_outcome, write_json_result


def ingest(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="CSV file to ingest"),
    vendor_id: str = typer.Option(..., "--vendor-id", "-v", help="Vendor id the offers belong to"),
    tier: str = typer.Option(..., "--tier", "-t", help="research | telehealth | brand"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Validate only; write nothing"),
    uploaded_by: str = typer.Option("cli", "--uploaded-by", help="Recorded as submitted_by / uploaded_by"),
    strict: bool = typer.Option(False, "--strict", help="Exit with code 2 when any row is rejected"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON result here"),
) -> None:
    """Validate FILE for one vendor and tier, persist the valid rows and print the summary."""
    log = logger.bind(command="ingest", file=str(file), vendor_id=vendor_id, tier=tier, dry_run=dry_run)
    log.info("ingest.start")
    bind_context(command="ingest")
    try:
        text = file.read_text(encoding="utf-8-sig")
        outcome = process_upload(text, vendor_id, tier, uploaded_by=uploaded_by, file_name=file.name, dry_run=dry_run)
    except UnicodeDecodeError as e:
        console.print("[red]CSV must be UTF-8 encoded[/red]")
        log.error("ingest.decode_failed", error=str(e))
        raise typer.Exit(1) from e
    except (PricingError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        log.error("ingest.failed", error=str(e))
        raise typer.Exit(1) from e
    finally:
        clear_context()

    print_outcome(outcome)
    name = f"upload_{outcome.upload_id}.json" if outcome.upload_id else "upload_dry_run.json"
    path = write_json_result(outcome.model_dump(by_alias=True), output or OUTPUT_DIR / "uploads" / name)
    console.print(f"[dim]Result written to {path}[/dim]")
    if strict and (outcome.summary.failure_count or outcome.persistence_errors):
        raise typer.Exit(2)


def template(
    tier: str = typer.Argument(..., help="research | telehealth | brand"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the template to this file"),
    no_examples: bool = typer.Option(False, "--no-examples", help="Header row only"),
) -> None:
    """Print (or write) the CSV template for TIER."""
    try:
        text = generate_csv_template(tier, with_examples=not no_examples)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    if output is None:
        typer.echo(text, nl=False)
        return
    if output.is_dir():
        output = output / template_file_name(tier)
    output.write_text(text, encoding="utf-8")
    console.print(f"[green]Template written to {output}[/green]")
