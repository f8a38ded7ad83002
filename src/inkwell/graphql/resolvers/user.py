"""
Top-level user resolvers
"""

import strawberry
from sqlalchemy import select

from ...dbmodels import Users
from ...logging import get_logger
from ..derive import fetch_rows
from ..extend import where_clauses
from ..inputs import WhereUsersInput
from ..types.user import User

logger = get_logger(__name__)


async def resolve_users(
    info: strawberry.Info,
    where: WhereUsersInput | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> list[User]:
    """
    Resolve users, optionally filtered by their own columns and related rows.

    ``where: {posts: {id: 10}}`` compiles to ``EXISTS (SELECT ... FROM posts
    WHERE posts.user_id = users.id AND posts.id = 10)``, so each qualifying
    user is returned once no matter how many of its posts match.
    """
    logger.debug("Resolving users", where=where, limit=limit, offset=offset)
    statement = select(Users).where(*where_clauses(Users, where))
    return await fetch_rows(info, User, statement, limit=limit, offset=offset)
