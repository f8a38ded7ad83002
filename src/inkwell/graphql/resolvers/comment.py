"""
Top-level comment resolvers
"""

import strawberry
from sqlalchemy import select

from ...dbmodels import Comments
from ...logging import get_logger
from ..derive import fetch_rows
from ..extend import where_clauses
from ..inputs import WhereCommentsInput
from ..types.comment import Comment

logger = get_logger(__name__)


async def resolve_comments(
    info: strawberry.Info,
    where: WhereCommentsInput | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> list[Comment]:
    """Resolve comments with the same filter shape used under ``Post.comments``."""
    logger.debug("Resolving comments", where=where, limit=limit, offset=offset)
    statement = select(Comments).where(*where_clauses(Comments, where))
    return await fetch_rows(info, Comment, statement, limit=limit, offset=offset)
