"""
Reusable seed data functions for database initialization.

Inserts a small, deterministic set of users, posts and comments so a fresh
development database has something to query. Seeding is idempotent: rows are
matched by their natural key and only missing ones are created.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Comments, Posts, Users
from ..logging import get_logger

logger = get_logger(__name__)

SAMPLE_USERS = [
    {"name": "Ada Lovelace", "age": 36, "email": "ada@example.com"},
    {"name": "Alan Turing", "age": 41, "email": "alan@example.com"},
    {"name": "Grace Hopper", "age": 85, "email": "grace@example.com"},
]

# (author email, title, content)
SAMPLE_POSTS = [
    ("ada@example.com", "Notes on the Analytical Engine", "On the engine's first program."),
    ("ada@example.com", "Poetical science", "Imagination in mathematics."),
    ("alan@example.com", "Computable numbers", "An application to the decision problem."),
]

# (post title, commenter email, content)
SAMPLE_COMMENTS = [
    ("Notes on the Analytical Engine", "alan@example.com", "Remarkable foresight."),
    ("Notes on the Analytical Engine", "grace@example.com", "Still relevant."),
    ("Computable numbers", "ada@example.com", "A fine machine."),
]


async def ensure_user(db: AsyncSession, *, name: str, age: int, email: str) -> Users:
    """Return the user with ``email``, creating it if needed."""
    result = await db.execute(select(Users).where(Users.email == email))
    user = result.scalar_one_or_none()
    if user is not None:
        logger.debug("User already exists", user_id=user.id, email=email)
        return user

    user = Users(name=name, age=age, email=email)
    db.add(user)
    await db.flush()
    logger.info("Created user", user_id=user.id, email=email)
    return user


async def ensure_post(db: AsyncSession, *, author: Users, title: str, content: str) -> Posts:
    """Return the author's post titled ``title``, creating it if needed."""
    result = await db.execute(
        select(Posts).where(Posts.user_id == author.id, Posts.title == title)
    )
    post = result.scalar_one_or_none()
    if post is not None:
        return post

    post = Posts(title=title, content=content, user_id=author.id)
    db.add(post)
    await db.flush()
    logger.info("Created post", post_id=post.id, user_id=author.id)
    return post


async def seed_sample_data(db: AsyncSession) -> dict[str, int]:
    """Seed demo users, posts and comments.

    Args:
        db: Database session; the caller owns the transaction

    Returns:
        Number of sample rows ensured per table; existing rows are reused
    """
    users = {}
    for values in SAMPLE_USERS:
        users[values["email"]] = await ensure_user(db, **values)

    posts = {}
    for email, title, content in SAMPLE_POSTS:
        posts[title] = await ensure_post(db, author=users[email], title=title, content=content)

    comment_count = 0
    for title, email, content in SAMPLE_COMMENTS:
        post, owner = posts[title], users[email]
        result = await db.execute(
            select(Comments).where(
                Comments.post_id == post.id,
                Comments.owner_id == owner.id,
                Comments.content == content,
            )
        )
        if result.scalar_one_or_none() is None:
            db.add(Comments(content=content, post_id=post.id, owner_id=owner.id))
        comment_count += 1
    await db.flush()

    counts = {"users": len(users), "posts": len(posts), "comments": comment_count}
    logger.info("Sample data seeded", **counts)
    return counts
