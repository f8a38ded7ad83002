"""
Database connection management

A single ``Database`` owns the async engine and session factory for the
process. It is created once at startup, handed to the request layer by
reference (FastAPI ``app.state`` and the GraphQL context) and disposed on
shutdown. Tests build their own ``Database`` against an isolated URL.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import get_database_url, settings
from ..logging import get_logger

logger = get_logger(__name__)

# Async driver used when the URL names a backend without an async one
ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "postgres": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}
ASYNC_DRIVER_NAMES = {"asyncpg", "psycopg", "aiosqlite"}


class ConfigurationError(Exception):
    """Raised when the storage backend cannot be configured from settings."""


def to_async_url(database_url: str | None) -> URL:
    """Parse a connection string and select the async driver for its backend.

    Raises:
        ConfigurationError: If the URL is missing, unparsable or names an
            unsupported backend.
    """
    if not database_url:
        raise ConfigurationError(
            "No database URL configured; set INKWELL_DATABASE_URL (or DATABASE_URL)"
        )

    try:
        url = make_url(database_url)
    except ArgumentError as e:
        raise ConfigurationError(f"Invalid database URL: {e}") from e

    backend, _, driver = url.drivername.partition("+")
    if backend not in ASYNC_DRIVERS:
        raise ConfigurationError(f"Unsupported database backend: {backend}")
    if driver not in ASYNC_DRIVER_NAMES:
        url = url.set(drivername=ASYNC_DRIVERS[backend])

    return url


def enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """Turn on foreign key enforcement (and ON DELETE CASCADE) for a new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Process-wide storage handle: one async engine plus its session factory."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, database_url: str | None = None, **engine_kwargs: Any) -> "Database":
        """Create a database handle, falling back to the configured URL."""
        url = to_async_url(database_url or get_database_url())

        kwargs: dict[str, Any] = {"echo": settings.sql_echo}
        if url.get_backend_name() == "postgresql":
            kwargs["pool_size"] = settings.database_pool_size
            kwargs["max_overflow"] = settings.database_max_overflow
        kwargs.update(engine_kwargs)

        engine = create_async_engine(url, **kwargs)
        if url.get_backend_name() == "sqlite":
            event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)
        logger.info(
            "Database initialized",
            database_url=url.render_as_string(hide_password=True),
        )
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session; commit on success, roll back on any error."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> tuple[bool, str | None]:
        """Run a trivial query and report (success, error_message)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True, None
        except Exception as e:
            error_str = str(e)
            if "Connection refused" in error_str or "could not connect" in error_str:
                return False, (
                    f"Cannot connect to database server: {error_str}\n"
                    f"The database server appears to be down or unreachable."
                )
            if "password authentication failed" in error_str:
                return False, f"Database authentication failed: {error_str}"
            return False, f"Database connection error ({type(e).__name__}): {error_str}"

    async def create_all(self) -> None:
        """Create every table in the schema registry (SQLite development and tests)."""
        from ..dbmodels import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")
