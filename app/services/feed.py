"""Feed assembly: posts by the user and everyone they follow, newest first."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.post import Comment, Like, Post
from app.models.user import Follow, User
from app.models.workout import Workout


def post_query():
    """Select Post with every relation the API renders, loaded eagerly."""
    return select(Post).options(
        selectinload(Post.author),
        selectinload(Post.workouts).selectinload(Workout.exercises),
        selectinload(Post.images),
        selectinload(Post.comments).selectinload(Comment.author),
        selectinload(Post.likes).selectinload(Like.author),
    )


async def followee_ids(db: AsyncSession, user_id: int) -> list[int]:
    result = await db.execute(select(Follow.following_id).where(Follow.follower_id == user_id))
    return list(result.scalars().all())


async def visible_author_ids(db: AsyncSession, user: User) -> set[int]:
    """{self} ∪ {followees}."""
    return {user.id, *await followee_ids(db, user.id)}


async def assemble_feed(db: AsyncSession, user: User) -> list[Post]:
    """All posts by visible authors, ordered by timestamp descending (id breaks ties)."""
    author_ids = await visible_author_ids(db, user)
    result = await db.execute(
        post_query()
        .where(Post.author_id.in_(author_ids))
        .order_by(Post.timestamp.desc(), Post.id.desc())
    )
    return list(result.scalars().all())


async def load_post(db: AsyncSession, post_id: int) -> Post | None:
    """One post with all relations, refreshed even if already in the session."""
    result = await db.execute(
        post_query().where(Post.id == post_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
