"""Admin commands: database initialization, the one-time admin bootstrap and role grants."""

from typing import Optional

import typer

from vendor_pricing.config import DATABASE_URL
from vendor_pricing.db import init_db as _init_db
from vendor_pricing.pricing.roles import AdminAlreadyProvisionedError, assign_role as _assign_role, provision_admin as _provision_admin

from .shared import console, logger


def init_db(
    no_seed: bool = typer.Option(False, "--no-seed", help="Do not seed vendors from data/vendors.csv"),
) -> None:
    """Create tables (and seed the vendor directory when the vendors table is new)."""
    _init_db(seed=not no_seed)
    logger.info("init_db.done", seed=not no_seed)
    console.print(f"[green]Database ready:[/green] {DATABASE_URL}")


def provision_admin(
    user_id: str = typer.Option(..., "--user-id", "-u", help="Identity provider user id"),
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Contact email (validated)"),
    force: bool = typer.Option(False, "--force", help="Provision even if an admin already exists"),
) -> None:
    """Grant the admin role to USER_ID. Refuses when an admin exists unless --force."""
    log = logger.bind(command="provision-admin", user_id=user_id)
    try:
        record = _provision_admin(user_id, email=email, force=force)
    except AdminAlreadyProvisionedError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    except ValueError as e:
        console.print(f"[red]Invalid input: {e}[/red]")
        log.error("provision_admin.invalid", error=str(e))
        raise typer.Exit(1) from e
    console.print(f"[green]{record['user_id']} is now admin[/green]")


def assign_role(
    user_id: str = typer.Option(..., "--user-id", "-u", help="Identity provider user id"),
    role: str = typer.Option(..., "--role", "-r", help="moderator | user"),
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Contact email (validated)"),
    granted_by: str = typer.Option("cli", "--granted-by", help="Recorded as granted_by"),
) -> None:
    """Grant USER_ID the moderator role, or reset it to user. Admins are not changed."""
    try:
        record = _assign_role(user_id, role, granted_by=granted_by, email=email)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        logger.error("assign_role.refused", user_id=user_id, role=role, error=str(e))
        raise typer.Exit(1) from e
    console.print(f"[green]{record['user_id']} is now {record['role']}[/green]")
