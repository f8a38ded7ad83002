"""
Top-level post resolvers
"""

import strawberry
from sqlalchemy import select

from ...dbmodels import Posts
from ...logging import get_logger
from ..derive import fetch_rows
from ..extend import where_clauses
from ..inputs import WherePostsInput
from ..types.post import Post

logger = get_logger(__name__)


async def resolve_posts(
    info: strawberry.Info,
    where: WherePostsInput | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> list[Post]:
    """Resolve posts with the same filter shape used under ``User.posts``."""
    logger.debug("Resolving posts", where=where, limit=limit, offset=offset)
    statement = select(Posts).where(*where_clauses(Posts, where))
    return await fetch_rows(info, Post, statement, limit=limit, offset=offset)
