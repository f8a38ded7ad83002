"""
Extended GraphQL object types; importing this package registers them
"""

from .comment import Comment
from .post import Post
from .user import User

__all__ = ["Comment", "Post", "User"]
