"""Management commands for the salon backend application."""

from __future__ import annotations

import logging

import click

from salon.core.logging_config import get_logger
from salon.db.session import SessionLocal, create_tables, drop_tables
from salon.main import create_app

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
logger = get_logger("salon.manage")


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("create-tables")
@click.option("--drop", is_flag=True, help="Drop every table before creating it.")
def create_tables_command(drop: bool) -> None:
    """Create the database schema (idempotent)."""
    if drop:
        click.confirm("This deletes all salon data. Continue?", abort=True)
        drop_tables()
        logger.info("Tables dropped")
    create_tables()
    logger.info("Tables created")


@cli.command("seed-demo")
def seed_demo() -> None:
    """Load demo services, employees and customers into an empty database."""
    from salon.db.seed import seed_demo_data

    app = create_app()
    with app.app_context():
        session = SessionLocal()
        try:
            counts = seed_demo_data(session)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    click.echo(
        "Created {services} services, {employees} employees, "
        "{customers} customers.".format(**counts)
    )


if __name__ == "__main__":
    cli()
