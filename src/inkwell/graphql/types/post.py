"""
Post GraphQL type definitions
"""

from ...dbmodels import Posts
from ..extend import relation_field
from ..inputs import WhereCommentsInput
from ..registry import registry
from .comment import Comment

Post = registry.extend(
    "posts",
    "Post",
    {
        "comments": relation_field(
            Posts,
            "comments",
            Comment,
            where=WhereCommentsInput,
            description="Comments on this post, fetched only when requested.",
        ),
        "author": relation_field(
            Posts, "author", registry.base("users").object_type, description="Author of this post."
        ),
    },
    description="Post type for GraphQL API.",
)
