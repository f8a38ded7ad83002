"""
Filter shapes shared by every traversal path.

Each shape is declared once per target entity and reused wherever that
entity is queried, at the top level or nested under a parent, so filtering
semantics are identical on every path. Scalar keys match by equality; keys
named after a relationship match parents having at least one related row
that satisfies the nested shape.
"""

import strawberry


@strawberry.input(description="Filter for comments; all given keys must match.")
class WhereCommentsInput:
    id: int | None = None
    owner_id: int | None = None
    post_id: int | None = None


@strawberry.input(description="Filter for posts; all given keys must match.")
class WherePostsInput:
    id: int | None = None
    title: str | None = None
    comments: WhereCommentsInput | None = strawberry.field(
        default=None, description="Match posts having at least one such comment."
    )


@strawberry.input(description="Filter for users; all given keys must match.")
class WhereUsersInput:
    id: int | None = None
    email: str | None = None
    posts: WherePostsInput | None = strawberry.field(
        default=None, description="Match users owning at least one such post."
    )
    comments: WhereCommentsInput | None = strawberry.field(
        default=None, description="Match users who wrote at least one such comment."
    )
