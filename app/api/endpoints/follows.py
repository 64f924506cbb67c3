"""Follow / unfollow another user."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_user_by_username
from app.db.session import get_db
from app.models.user import Follow, User
from app.schemas.post import MessageRead
from app.schemas.user import FollowRead

logger = logging.getLogger(__name__)
router = APIRouter()


async def _find_edge(db: AsyncSession, follower_id: int, following_id: int) -> Follow | None:
    result = await db.execute(
        select(Follow).where(Follow.follower_id == follower_id, Follow.following_id == following_id)
    )
    return result.scalar_one_or_none()


@router.post("/{username}", response_model=FollowRead, status_code=201)
async def follow_user(
    username: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Start following `username`; their posts appear in the caller's feed."""
    target = await require_user_by_username(db, username)
    if target.id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot follow yourself.")
    if await _find_edge(db, current_user.id, target.id):
        raise HTTPException(status_code=400, detail="You are already following this user.")
    edge = Follow(follower=current_user, followee=target)
    db.add(edge)
    try:
        await db.flush()
    except IntegrityError as e:
        logger.info("Duplicate follow rejected at flush: %s", e.orig)
        raise HTTPException(status_code=400, detail="You are already following this user.")
    return edge


@router.delete("/{username}", response_model=MessageRead)
async def unfollow_user(
    username: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    target = await require_user_by_username(db, username)
    edge = await _find_edge(db, current_user.id, target.id)
    if not edge:
        raise HTTPException(status_code=404, detail="You are not following this user.")
    await db.delete(edge)
    return MessageRead(message="Unfollowed successfully.")
