"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent
DATA_DIR = Path(os.getenv("DATA_DIR", str(PROJECT_ROOT / "data")))
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(PROJECT_ROOT / "output")))
VENDOR_SEED_PATH = DATA_DIR / "vendors.csv"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Database (any SQLAlchemy URL; SQLite file by default)
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'vendor_pricing.db'}")

# Tier rule tables and header aliases
TIER_RULES_PATH = os.getenv("TIER_RULES_PATH", "").strip() or str(PACKAGE_DIR / "tiers.yaml")

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"
# Longer string values (raw CSV cells in rejection reasons) are clipped in log output
LOG_VALUE_MAX_CHARS = int(os.getenv("LOG_VALUE_MAX_CHARS", "500"))

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# OpenTelemetry (OTLP/HTTP export only when enabled)
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
SERVICE_NAME = os.getenv("SERVICE_NAME", "vendor-pricing")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")

# API server
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# Request metrics ring buffer (bounded; drained on an interval by the API lifespan)
METRICS_BUFFER_SIZE = int(os.getenv("METRICS_BUFFER_SIZE", "1000"))
METRICS_DRAIN_INTERVAL_SECONDS = float(os.getenv("METRICS_DRAIN_INTERVAL_SECONDS", "300"))

# Upload limits
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
