"""Sign-in: check credentials and issue an access token."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_user_by_username
from app.core.security import create_access_token, verify_password
from app.db.session import get_db
from app.schemas.user import SignIn, TokenRead, UserRead

router = APIRouter()


@router.post("/signin", response_model=TokenRead)
async def signin(payload: SignIn, db: AsyncSession = Depends(get_db)):
    """Exchange username + password for a bearer token."""
    if not payload.username or not payload.password:
        raise HTTPException(status_code=400, detail="Username and password are required.")
    user = await get_user_by_username(db, payload.username)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid username or password.")
    return TokenRead(
        access_token=create_access_token(user.id),
        user=UserRead.model_validate(user),
    )
