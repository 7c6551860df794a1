"""Read CSV input: uploaded price lists and the optional vendor seed file."""

import csv
import io
from pathlib import Path
from typing import Any

from vendor_pricing.config import MAX_UPLOAD_BYTES, VENDOR_SEED_PATH

# A single cell may be as large as the whole upload
csv.field_size_limit(max(csv.field_size_limit(), MAX_UPLOAD_BYTES))


def split_csv_text(text: str) -> tuple[list[str], list[list[str]]]:
    """Split UTF-8 CSV text into (header, data rows). A leading BOM is dropped; fully blank rows are skipped.

    Raises csv.Error when the text is not well-formed CSV.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.reader(io.StringIO(text))
    header: list[str] | None = None
    rows: list[list[str]] = []
    for row in reader:
        if not any((cell or "").strip() for cell in row):
            continue
        if header is None:
            header = row
            continue
        rows.append(row)
    return header or [], rows


def decode_upload(payload: bytes) -> str:
    """Decode an uploaded file body as UTF-8 (with or without BOM)."""
    return payload.decode("utf-8-sig")


def _read_csv(path: Path) -> list[dict[str, Any]]:
    """Read a CSV file and return list of row dicts."""
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        return list(reader)


def load_vendors(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load vendor directory seed rows from vendors.csv (name, website_url, tier_support, verified)."""
    path = csv_path or VENDOR_SEED_PATH
    return _read_csv(path)
