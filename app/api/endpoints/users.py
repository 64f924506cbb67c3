"""User accounts, profiles, follow lists and per-user activity."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_user_by_username
from app.core.security import hash_password
from app.db.session import get_db
from app.models.post import Post
from app.models.user import Follow, User
from app.schemas.post import PostRead
from app.schemas.stats import HeatmapBucket, WorkoutStat
from app.schemas.user import UserCreate, UserProfile, UserRead, UserRename
from app.services.activity import post_heatmap, workout_stats
from app.services.feed import post_query

logger = logging.getLogger(__name__)
router = APIRouter()


async def _following_usernames(db: AsyncSession, user_id: int) -> list[str]:
    result = await db.execute(
        select(User.username)
        .join(Follow, Follow.following_id == User.id)
        .where(Follow.follower_id == user_id)
        .order_by(User.username)
    )
    return list(result.scalars().all())


async def _follower_usernames(db: AsyncSession, user_id: int) -> list[str]:
    result = await db.execute(
        select(User.username)
        .join(Follow, Follow.follower_id == User.id)
        .where(Follow.following_id == user_id)
        .order_by(User.username)
    )
    return list(result.scalars().all())


@router.post("", response_model=UserRead, status_code=201)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a user. Email and username must both be unused."""
    result = await db.execute(
        select(User).where(or_(User.email == payload.email, User.username == payload.username))
    )
    existing = result.scalars().first()
    if existing:
        field = "Email" if existing.email == payload.email else "Username"
        raise HTTPException(status_code=400, detail=f"{field} is already taken.")

    data = payload.model_dump(exclude={"password"})
    user = User(**data, password_hash=hash_password(payload.password))
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        logger.info("Duplicate user rejected at flush: %s", e.orig)
        raise HTTPException(status_code=400, detail="Email or username is already taken.")
    await db.refresh(user)
    return user


@router.get("", response_model=list[UserRead])
async def list_users(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


@router.get("/{username}", response_model=UserProfile, dependencies=[Depends(get_current_user)])
async def get_profile(
    username: str,
    db: AsyncSession = Depends(get_db),
):
    """Profile page: user fields, posts (newest first), following and followers."""
    user = await require_user_by_username(db, username)
    posts = await db.execute(
        post_query().where(Post.author_id == user.id).order_by(Post.timestamp.desc(), Post.id.desc())
    )
    return UserProfile(
        **UserRead.model_validate(user).model_dump(),
        posts=[PostRead.model_validate(p) for p in posts.scalars().all()],
        following=await _following_usernames(db, user.id),
        followers=await _follower_usernames(db, user.id),
    )


@router.patch("/{username}", response_model=UserRead)
async def rename_user(
    username: str,
    payload: UserRename,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change a username. Only the account owner may do it."""
    user = await require_user_by_username(db, username)
    if user.id != current_user.id:
        raise HTTPException(status_code=401, detail="You can only rename your own account.")
    new_username = (payload.username or "").strip()
    if not new_username:
        raise HTTPException(status_code=400, detail="New username is required.")
    if new_username == user.username:
        return user

    taken = await db.execute(select(User.id).where(User.username == new_username))
    if taken.scalar_one_or_none() is not None:
        raise HTTPException(status_code=400, detail="Username is already taken.")
    user.username = new_username
    try:
        await db.flush()
    except IntegrityError as e:
        logger.info("Username conflict at flush: %s", e.orig)
        raise HTTPException(status_code=400, detail="Username is already taken.")
    await db.refresh(user)
    return user


@router.get("/{username}/following", response_model=list[str], dependencies=[Depends(get_current_user)])
async def list_following(
    username: str,
    db: AsyncSession = Depends(get_db),
):
    """Usernames this user follows."""
    user = await require_user_by_username(db, username)
    return await _following_usernames(db, user.id)


@router.get("/{username}/followers", response_model=list[str], dependencies=[Depends(get_current_user)])
async def list_followers(
    username: str,
    db: AsyncSession = Depends(get_db),
):
    """Usernames following this user."""
    user = await require_user_by_username(db, username)
    return await _follower_usernames(db, user.id)


@router.get("/{username}/posts", response_model=list[HeatmapBucket])
async def post_activity(
    username: str,
    year: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Heatmap data: number of posts per day within `year`."""
    if not year:
        raise HTTPException(status_code=400, detail="Query parameter 'year' is required.")
    try:
        year_value = int(year)
    except ValueError:
        raise HTTPException(status_code=400, detail="Year must be a number, e.g. 2024.")
    if not 1 <= year_value <= 9998:
        raise HTTPException(status_code=400, detail="Year is out of range.")
    user = await require_user_by_username(db, username)
    return await post_heatmap(db, user.id, year_value)


@router.get("/{username}/workout-stats", response_model=list[WorkoutStat])
async def get_workout_stats(username: str, db: AsyncSession = Depends(get_db)):
    """Workout counts grouped by type and subtype."""
    user = await require_user_by_username(db, username)
    return await workout_stats(db, user.id)
