"""Utility modules."""

from vendor_pricing.utils.csv_loader import decode_upload, load_vendors, split_csv_text
from vendor_pricing.utils.logger import bind_context, clear_context, get_logger
from vendor_pricing.utils.metrics import MetricsBuffer
from vendor_pricing.utils.tracing import get_tracer, init_tracing, shutdown_tracing

__all__ = [
    "split_csv_text",
    "decode_upload",
    "load_vendors",
    "get_logger",
    "bind_context",
    "clear_context",
    "MetricsBuffer",
    "init_tracing",
    "get_tracer",
    "shutdown_tracing",
]
