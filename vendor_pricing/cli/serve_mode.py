"""Serve mode: run the HTTP API with uvicorn."""

import sys

import typer
import uvicorn

from vendor_pricing.api.server import create_app
from vendor_pricing.config import API_HOST, API_PORT
from vendor_pricing.db import init_db

from .shared import console, logger


def serve(
    port: int = typer.Option(API_PORT, "--port", "-p", help="Port for the API server"),
    host: str = typer.Option(API_HOST, "--host", "-h", help="Bind host"),
) -> None:
    """Start the upload and admin API."""
    init_db()
    log = logger.bind(command="serve", port=port)
    log.info("serve.start")
    app = create_app()

    console.print(f"[green]Starting API server on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: /uploads, /vendors, /offers, /metrics, GET /health[/dim]")
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="info",
            timeout_graceful_shutdown=15,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
