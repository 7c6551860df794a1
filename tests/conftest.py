"""Test setup: a shared temporary SQLite file and a scratch output dir, set before any package import."""

import os
import sys
import tempfile
from pathlib import Path

# File DB, not :memory:, so TestClient worker threads see the same data.
_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
os.environ.setdefault("OUTPUT_DIR", tempfile.mkdtemp(prefix="vendor_pricing_out_"))
os.environ["TRACING_ENABLED"] = "false"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
