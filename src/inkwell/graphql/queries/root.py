"""
Root GraphQL query definitions
"""

from ..derive import GraphField, compose_type
from ..registry import registry
from ..resolvers.comment import resolve_comments
from ..resolvers.post import resolve_posts
from ..resolvers.user import resolve_users
from ..types import Comment, Post, User

# Shadow the derived list queries for extended entities
QUERY_OVERRIDES: dict[str, GraphField] = {
    "users": GraphField(
        list[User],
        resolve_users,
        description="Get users, optionally only those with related rows matching a filter.",
    ),
    "posts": GraphField(list[Post], resolve_posts, description="Get posts matching a filter."),
    "comments": GraphField(
        list[Comment], resolve_comments, description="Get comments matching a filter."
    ),
}

Query = compose_type(
    "Query",
    {**registry.queries(), **QUERY_OVERRIDES},
    description="Root GraphQL query type.",
)
