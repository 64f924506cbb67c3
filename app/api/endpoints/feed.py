"""Home feed: the caller's own posts plus those of everyone they follow."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.post import PostRead
from app.services.feed import assemble_feed

router = APIRouter()


@router.get("", response_model=list[PostRead])
async def get_feed(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Newest first, no pagination. An empty feed is reported as 404."""
    posts = await assemble_feed(db, current_user)
    if not posts:
        raise HTTPException(status_code=404, detail="No posts found.")
    return posts
