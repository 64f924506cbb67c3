"""Shared route dependencies: authenticated user and path lookups."""

from fastapi import Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import BEARER_SCHEME
from app.core.security import decode_access_token
from app.db.session import get_db
from app.models.user import User


async def get_current_user(
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve `Authorization: Bearer <token>` to a User, else 401."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header is required.")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != BEARER_SCHEME or not token:
        raise HTTPException(status_code=401, detail="Invalid authorization header.")
    user_id = decode_access_token(token.strip())
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found.")
    return user


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def require_user_by_username(db: AsyncSession, username: str) -> User:
    user = await get_user_by_username(db, username)
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    return user
