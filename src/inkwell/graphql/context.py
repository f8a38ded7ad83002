"""
Request context shared by GraphQL resolvers
"""

from typing import TYPE_CHECKING, Any

import strawberry

from ..logging import get_logger, get_request_id

if TYPE_CHECKING:
    from fastapi import Request

    from ..database import Database

logger = get_logger(__name__)


def build_context(request: "Request | None", database: "Database") -> dict[str, Any]:
    """Build the per-request context handed to every resolver.

    The request ID is the one set by the logging middleware, if any.
    """
    return {"request": request, "database": database, "request_id": get_request_id()}


def get_database(info: strawberry.Info) -> "Database":
    """Return the storage handle bound to the current request.

    Raises:
        RuntimeError: If the schema is executed without a database in its context.
    """
    database = info.context.get("database")
    if database is None:
        logger.error("Database not found in GraphQL context")
        raise RuntimeError("Database not available in GraphQL context")
    return database


class ConstraintViolationError(Exception):
    """Raised when the storage layer rejects a write (unique, foreign key, not-null)."""
