"""CLI commands: one module per mode (serve, ingest, admin)."""

from typer import Typer

from vendor_pricing.cli import admin_mode, ingest_mode, serve_mode, validate_config as validate_config_module
from vendor_pricing.utils.tracing import init_tracing

init_tracing()

app = Typer(help="Vendor tier pricing: CSV ingestion and offer administration")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_mode.serve)
    app.command()(ingest_mode.ingest)
    app.command()(ingest_mode.template)
    app.command(name="validate-config")(validate_config_module.validate_config)
    app.command(name="provision-admin")(admin_mode.provision_admin)
    app.command(name="assign-role")(admin_mode.assign_role)
    app.command(name="init-db")(admin_mode.init_db)


register_commands()
