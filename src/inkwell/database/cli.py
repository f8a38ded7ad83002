#!/usr/bin/env python3
"""
CLI entry point for Inkwell database migrations.
"""

import os
import sys
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from inkwell import __version__
from inkwell.logging import configure_logging, get_logger

logger = get_logger(__name__)

ALEMBIC_INI_ENV = "INKWELL_ALEMBIC_INI"


def get_alembic_config() -> Config:
    """Get Alembic configuration.

    ``INKWELL_ALEMBIC_INI`` wins; otherwise ``alembic.ini`` is looked up in
    the working directory and then at the project root of a source checkout.
    """
    candidates = []
    if os.getenv(ALEMBIC_INI_ENV):
        candidates.append(Path(os.environ[ALEMBIC_INI_ENV]))
    candidates.append(Path.cwd() / "alembic.ini")
    candidates.append(Path(__file__).resolve().parents[3] / "alembic.ini")

    for alembic_ini in candidates:
        if alembic_ini.exists():
            return Config(str(alembic_ini))

    searched = ", ".join(str(c) for c in candidates)
    raise FileNotFoundError(f"alembic.ini not found (searched: {searched})")


def run_alembic(action: str, func, *args, **kwargs) -> None:
    """Run an Alembic command, exiting non-zero on failure."""
    try:
        config = get_alembic_config()
        func(config, *args, **kwargs)
    except Exception as e:
        logger.error(f"Database {action} failed", error=str(e))
        sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.version_option(version=__version__, prog_name="inkwell-migrate")
def main(log_level: str) -> None:
    """Inkwell database migration management."""
    configure_logging(debug=(log_level == "debug"), level=log_level)


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade database to a revision (default: head)."""
    logger.info("Upgrading database", revision=revision)
    run_alembic("upgrade", command.upgrade, revision)
    logger.info("Database upgrade completed successfully")


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade database to a revision (default: -1)."""
    logger.info("Downgrading database", revision=revision)
    run_alembic("downgrade", command.downgrade, revision)
    logger.info("Database downgrade completed successfully")


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Auto-generate migration")
def revision(message: str, autogenerate: bool) -> None:
    """Create a new migration revision."""
    logger.info("Creating new migration", message=message, autogenerate=autogenerate)
    run_alembic("revision", command.revision, message=message, autogenerate=autogenerate)


@main.command()
def current() -> None:
    """Show current database revision."""
    run_alembic("current", command.current)


@main.command()
def history() -> None:
    """Show migration history."""
    run_alembic("history", command.history)


if __name__ == "__main__":
    main()
