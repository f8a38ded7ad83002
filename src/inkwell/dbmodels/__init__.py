"""
Database models for Inkwell (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.

Relationships are declared with ``lazy="raise"``: the GraphQL layer never
traverses them by attribute access, only through explicit queries issued by
field resolvers or through ``any()``/``has()`` existential predicates.
"""

from sqlalchemy import (
    ForeignKeyConstraint,
    Identity,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("email", name="users_email_key"),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(always=True))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    posts: Mapped[list["Posts"]] = relationship(
        "Posts", uselist=True, back_populates="author", lazy="raise", passive_deletes=True
    )
    comments: Mapped[list["Comments"]] = relationship(
        "Comments", uselist=True, back_populates="owner", lazy="raise", passive_deletes=True
    )


class Posts(Base):
    __tablename__ = "posts"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="posts_user_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="posts_pkey"),
        Index("idx_posts_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(always=True))
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    author: Mapped["Users"] = relationship("Users", back_populates="posts", lazy="raise")
    comments: Mapped[list["Comments"]] = relationship(
        "Comments", uselist=True, back_populates="post", lazy="raise", passive_deletes=True
    )


class Comments(Base):
    __tablename__ = "comments"
    __table_args__ = (
        ForeignKeyConstraint(
            ["post_id"], ["posts.id"], ondelete="CASCADE", name="comments_post_id_fkey"
        ),
        ForeignKeyConstraint(
            ["owner_id"], ["users.id"], ondelete="CASCADE", name="comments_owner_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="comments_pkey"),
        Index("idx_comments_post", "post_id"),
        Index("idx_comments_owner", "owner_id"),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(always=True))
    content: Mapped[str] = mapped_column(String(255), nullable=False)
    post_id: Mapped[int] = mapped_column(Integer, nullable=False)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)

    post: Mapped["Posts"] = relationship("Posts", back_populates="comments", lazy="raise")
    owner: Mapped["Users"] = relationship("Users", back_populates="comments", lazy="raise")


# Entities exposed through the GraphQL API, in declaration order
ENTITY_MODELS: tuple[type[Base], ...] = (Users, Posts, Comments)

# Expose for Alembic
target_metadata = Base.metadata
