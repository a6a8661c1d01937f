"""Management commands for the laundry booking backend."""

from __future__ import annotations

import logging
from typing import Optional

import click

from laundry.core.config import get_admin_credentials
from laundry.db.seed import ensure_admin_user
from laundry.db.session import create_tables as create_all_tables
from laundry.db.session import drop_tables

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("create_tables")
@click.option("--reset", is_flag=True, help="Drop every table before creating them.")
def create_tables(reset: bool) -> None:
    """Create the database tables (idempotent)."""
    if reset:
        click.confirm("Drop all tables and their data?", abort=True)
        drop_tables()
        logging.info("All tables dropped.")
    create_all_tables()
    logging.info("Tables created.")


@cli.command("ensure_admin")
@click.option(
    "--user-id",
    "user_id_override",
    default=None,
    help="Admin login id. Overrides the ADMIN_USER_ID environment variable.",
)
@click.option(
    "--password",
    "password_override",
    default=None,
    help="Admin password. Overrides the ADMIN_PASSWORD environment variable.",
)
def ensure_admin(
    user_id_override: Optional[str], password_override: Optional[str]
) -> None:
    """Create the admin account, or promote and reactivate it if it exists."""
    credentials = get_admin_credentials() or (None, None)
    user_id = user_id_override or credentials[0]
    password = password_override or credentials[1]
    if not user_id or not password:
        raise click.ClickException(
            "ADMIN_USER_ID/ADMIN_PASSWORD are not set and no --user-id/--password given."
        )

    create_all_tables()
    admin = ensure_admin_user(user_id, password)
    logging.info("Admin %s is ready (type=%s).", admin.user_id, admin.user_type)


if __name__ == "__main__":
    cli()
