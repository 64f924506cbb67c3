"""Test setup: a throwaway SQLite database and upload directory per session, tables reset per test."""

import asyncio
import json
import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="fitness-feed-tests-"))
os.environ["DATABASE_URI"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'test.db'}"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["UPLOAD_DIR"] = str(_TMP_DIR / "uploads")
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["ENVIRONMENT"] = "test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import func, select  # noqa: E402

from app.db.base import Base  # noqa: E402
from app.db.session import async_session_maker, engine  # noqa: E402
from app.main import app  # noqa: E402

UPLOAD_DIR = Path(os.environ["UPLOAD_DIR"])


async def _drop_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    asyncio.run(_drop_tables())
    for path in UPLOAD_DIR.glob("*"):
        path.unlink()


@pytest.fixture
def make_user(client):
    """Create a user and sign in. Returns (user json, auth headers)."""

    def _make(username: str, password: str = "secret", **extra):
        body = {"email": f"{username}@example.com", "username": username, "password": password, **extra}
        r = client.post("/api/users", json=body)
        assert r.status_code == 201, r.text
        r = client.post("/api/signin", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        return r.json()["user"], {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _make


@pytest.fixture
def make_post(client):
    """Create a post as the given user; workouts is a list of dicts."""

    def _make(headers: dict, content: str = "Morning session", workouts=None, files=None, **form):
        data = {"content": content, **form}
        if workouts is not None:
            data["workouts"] = json.dumps(workouts)
        r = client.post("/api/posts", data=data, files=files, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture
def count_rows(client):
    """Count rows of a model through the app's own event loop."""

    async def _count(model) -> int:
        async with async_session_maker() as session:
            return (await session.execute(select(func.count()).select_from(model))).scalar_one()

    return lambda model: client.portal.call(_count, model)
