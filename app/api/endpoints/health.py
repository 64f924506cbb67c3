"""Liveness and readiness checks for the API process."""

import logging
import os
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.session import get_db
from app.models.user import User

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health():
    payload: dict = {"status": "ok"}
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """
    Ready when the schema is queryable (users table answers) and the upload
    directory accepts new files. Reports each check; 503 if any fails.
    """
    checks: dict[str, str] = {}
    try:
        await db.execute(select(func.count(User.id)))
        checks["database"] = "ok"
    except SQLAlchemyError as e:
        logger.exception("Readiness: database check failed: %s", e)
        await db.rollback()
        checks["database"] = "unavailable"

    upload_dir = Path(get_settings().upload_dir)
    if upload_dir.is_dir() and os.access(upload_dir, os.W_OK):
        checks["uploads"] = "ok"
    else:
        logger.error("Readiness: upload directory %s is not writable", upload_dir)
        checks["uploads"] = "not writable"

    ready = all(v == "ok" for v in checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ok" if ready else "error", "checks": checks},
    )
