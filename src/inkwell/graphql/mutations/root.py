"""
Root GraphQL mutation definitions
"""

from ..derive import compose_type
from ..registry import registry
from ..types import Comment, Post, User  # noqa: F401  (extend registry before deriving mutations)

# Derived create/update/delete operations pass through unchanged
Mutation = compose_type(
    "Mutation",
    registry.mutations(),
    description="Root GraphQL mutation type.",
)
