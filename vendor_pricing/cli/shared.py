"""Shared CLI helpers: console, logger, output paths, result tables."""

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from vendor_pricing.config import OUTPUT_DIR
from vendor_pricing.models.records import UploadOutcome
from vendor_pricing.utils.logger import get_logger

console = Console()
logger = get_logger("vendor_pricing.cli")


def ensure_output_dirs() -> None:
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    logger.debug("filesystem.ensure_output_dirs", output_dir=str(OUTPUT_DIR))


def write_json_result(result_dict: dict, path: Path | None = None) -> Path:
    ensure_output_dirs()
    path = path or OUTPUT_DIR / "upload_result.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(result_dict, f, indent=2, default=str)
    logger.info("results.write_json", path=str(path))
    return path


def print_outcome(outcome: UploadOutcome, max_errors: int = 50) -> None:
    """Summary line plus a table of rejected rows."""
    s = outcome.summary
    label = "[yellow]dry run[/yellow]" if outcome.dry_run else f"upload [cyan]{outcome.upload_id}[/cyan] ({outcome.status})"
    console.print(
        f"{label}: {s.total_rows} rows, [green]{s.success_count} valid[/green], "
        f"[red]{s.failure_count} rejected[/red], {outcome.persisted} persisted"
    )
    if outcome.ignored_columns:
        console.print(f"[dim]Ignored columns: {', '.join(outcome.ignored_columns)}[/dim]")
    errors = list(s.errors) + list(outcome.persistence_errors)
    if not errors:
        return
    table = Table(title="Rejected rows")
    table.add_column("Line", justify="right", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Reason", style="red")
    for err in errors[:max_errors]:
        table.add_row(str(err.line), err.kind, err.message)
    console.print(table)
    if len(errors) > max_errors:
        console.print(f"[dim]... and {len(errors) - max_errors} more[/dim]")
