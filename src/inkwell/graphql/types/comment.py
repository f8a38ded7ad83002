"""
Comment GraphQL type definitions
"""

from ...dbmodels import Comments
from ..extend import relation_field
from ..registry import registry

Comment = registry.extend(
    "comments",
    "Comment",
    {
        "post": relation_field(
            Comments, "post", registry.base("posts").object_type, description="Post commented on."
        ),
        "owner": relation_field(
            Comments, "owner", registry.base("users").object_type, description="Comment author."
        ),
    },
    description="Comment type for GraphQL API.",
)
