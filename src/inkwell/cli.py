#!/usr/bin/env python3
"""
Main CLI entry point for the Inkwell server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from inkwell import __version__
from inkwell.config import settings
from inkwell.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="inkwell")
def cli() -> None:
    """Inkwell CLI - run the server, seed data and export the schema."""
    pass


@cli.command()
@click.option(
    "--host",
    default=settings.api_host,
    help=f"Host to bind to (default: {settings.api_host})",
)
@click.option(
    "--port",
    default=settings.api_port,
    type=int,
    help=f"Port to bind to (default: {settings.api_port})",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the Inkwell API server."""
    # Configure logging
    configure_logging(debug=(log_level == "debug"), level=log_level)

    logger.info("Starting Inkwell API server", host=host, port=port, reload=reload)

    # The app is imported by uvicorn, so settings travel through the environment
    if log_level == "debug":
        os.environ["INKWELL_DEBUG"] = "true"
    os.environ.setdefault("INKWELL_LOG_LEVEL", log_level.upper())

    try:
        uvicorn.run(
            "inkwell.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command()
@click.option(
    "--sample-data/--no-sample-data",
    default=True,
    help="Insert demo users, posts and comments (default: on)",
)
@click.option(
    "--database-url",
    default=None,
    help="Connection string (default: INKWELL_DATABASE_URL)",
)
def seed(sample_data: bool, database_url: str | None) -> None:
    """Prepare a development database.

    Tables are created directly on SQLite; other backends are expected to be
    migrated with ``inkwell-migrate upgrade`` first.
    """
    from inkwell.database import ConfigurationError, Database
    from inkwell.database.seed_data import seed_sample_data

    # Configure logging
    configure_logging()

    async def do_seed() -> dict[str, int] | None:
        database = Database.from_url(database_url)
        try:
            # SQLite has no migration step, so create the tables directly
            if database.engine.url.get_backend_name() == "sqlite":
                await database.create_all()
                logger.info("Created tables", backend="sqlite")
            if not sample_data:
                return None
            async with database.session() as session:
                return await seed_sample_data(session)
        finally:
            await database.dispose()

    try:
        counts = asyncio.run(do_seed())
    except ConfigurationError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(2)
    except Exception as e:
        logger.error("Failed to seed database", error=str(e))
        click.echo(f"✗ Error seeding database: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Database ready")
    if counts:
        for table, count in counts.items():
            click.echo(f"  {table}: {count}")


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the SDL to a file instead of stdout",
)
def schema(output: str | None) -> None:
    """Print the GraphQL schema in SDL form."""
    from inkwell.graphql.schema import schema as graphql_schema

    # Print to stdout unless an output file was given
    sdl = graphql_schema.as_str()
    if output is None:
        click.echo(sdl)
        return

    with open(output, "w", encoding="utf-8") as f:
        f.write(sdl + "\n")
    click.echo(f"✓ Schema written to {output}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
