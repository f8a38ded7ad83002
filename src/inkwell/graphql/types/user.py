"""
User GraphQL type definitions
"""

from ...dbmodels import Users
from ..extend import relation_field
from ..inputs import WhereCommentsInput, WherePostsInput
from ..registry import registry
from .comment import Comment
from .post import Post

User = registry.extend(
    "users",
    "User",
    {
        "posts": relation_field(
            Users,
            "posts",
            Post,
            where=WherePostsInput,
            description="Posts owned by this user, fetched only when requested.",
        ),
        "comments": relation_field(
            Users,
            "comments",
            Comment,
            where=WhereCommentsInput,
            description="Comments written by this user.",
        ),
    },
    description="User type for GraphQL API.",
)
