"""HTTP API (FastAPI)."""

from vendor_pricing.api.server import create_app

__all__ = ["create_app"]
