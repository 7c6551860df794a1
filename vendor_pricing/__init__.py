"""Vendor tier pricing: CSV ingestion, validation and offer management."""

__version__ = "0.1.0"
