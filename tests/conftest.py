"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event

from inkwell.database import Database
from inkwell.dbmodels import Comments, Posts, Users

# users: 1 owns posts 10 and 11 (same title), 2 owns post 12, 3 owns nothing
SEED_USERS = [
    {"id": 1, "name": "Ada", "age": 36, "email": "ada@example.com"},
    {"id": 2, "name": "Alan", "age": 41, "email": "alan@example.com"},
    {"id": 3, "name": "Grace", "age": 85, "email": "grace@example.com"},
]
SEED_POSTS = [
    {"id": 10, "title": "Hello", "content": "First post", "user_id": 1},
    {"id": 11, "title": "Hello", "content": "Second post", "user_id": 1},
    {"id": 12, "title": "Machines", "content": "On computable numbers", "user_id": 2},
]
SEED_COMMENTS = [
    {"id": 100, "content": "Nice", "post_id": 10, "owner_id": 2},
    {"id": 101, "content": "Thanks", "post_id": 10, "owner_id": 1},
    {"id": 102, "content": "Agreed", "post_id": 12, "owner_id": 3},
]


class StatementRecorder:
    """Collects SQL statements sent to the driver."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany) -> None:
        _ = conn, cursor, parameters, context, executemany
        self.statements.append(statement)

    def clear(self) -> None:
        self.statements.clear()

    def touching(self, table: str) -> list[str]:
        """Statements reading from ``table``."""
        return [s for s in self.statements if f"FROM {table}" in s]


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """Connection string for a throwaway file-backed SQLite database."""
    return f"sqlite:///{tmp_path / 'inkwell.db'}"


@pytest_asyncio.fixture(scope="function")
async def database(database_url: str) -> AsyncGenerator[Database, None]:
    """A schema-initialized database seeded with users, posts and comments."""
    db = Database.from_url(database_url)
    await db.create_all()
    async with db.session() as session:
        session.add_all(Users(**values) for values in SEED_USERS)
        await session.flush()
        session.add_all(Posts(**values) for values in SEED_POSTS)
        await session.flush()
        session.add_all(Comments(**values) for values in SEED_COMMENTS)
    yield db
    await db.dispose()


@pytest.fixture
def statements(database: Database) -> Generator[StatementRecorder, None, None]:
    """Record statements issued by the database after seeding."""
    recorder = StatementRecorder()
    event.listen(database.engine.sync_engine, "before_cursor_execute", recorder)
    yield recorder
    event.remove(database.engine.sync_engine, "before_cursor_execute", recorder)


@pytest.fixture
def execute(database: Database):
    """Execute a GraphQL document against the schema with a database context."""
    from inkwell.graphql.context import build_context
    from inkwell.graphql.schema import schema

    async def run(query: str, variables: dict[str, Any] | None = None):
        return await schema.execute(
            query,
            variable_values=variables,
            context_value=build_context(None, database),
        )

    return run


@pytest_asyncio.fixture(scope="function")
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app serving the test database."""
    from inkwell.api.app import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(  # type: ignore[reportUnknownMemberType]
        "markers", "requires_db: mark test as requiring database connection"
    )
    config.addinivalue_line(  # type: ignore[reportUnknownMemberType]
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]
