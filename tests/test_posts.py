import json
from pathlib import Path

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models import Exercise, Image, Post, Workout
from app.services import uploads

UPLOAD_DIR = Path(get_settings().upload_dir)

WORKOUTS = [
    {
        "type": "run",
        "subtype": "interval",
        "exercises": [{"name": "400m repeats", "distance": 4.0, "pace": 4.5, "duration": 18}],
    },
    {
        "type": "lift",
        "subtype": "bench",
        "exercises": [
            {"name": "Bench press", "sets": 5, "reps": 5, "weight": 80},
            {"name": "Dips", "sets": 3, "reps": 12},
        ],
    },
]


def _strip_ids(workouts):
    return [
        {
            "type": w["type"],
            "subtype": w["subtype"],
            "exercises": [{k: v for k, v in e.items() if k != "id" and v is not None} for e in w["exercises"]],
        }
        for w in workouts
    ]


def test_create_then_get_returns_everything_submitted(client, make_user, make_post):
    ana_user, ana = make_user("ana")
    created = make_post(
        ana,
        content="Track + gym",
        location="City park",
        workouts=WORKOUTS,
        files=[
            ("images", ("track.PNG", b"png-bytes", "image/png")),
            ("images", ("noext", b"raw-bytes", "application/octet-stream")),
        ],
    )

    r = client.get(f"/api/posts/{created['id']}")
    assert r.status_code == 200
    post = r.json()
    assert post["content"] == "Track + gym"
    assert post["location"] == "City park"
    assert post["author"] == {"id": ana_user["id"], "username": "ana"}
    assert _strip_ids(post["workouts"]) == WORKOUTS
    assert post["comments"] == [] and post["likes"] == []

    paths = [img["path"] for img in post["images"]]
    assert len(paths) == 2
    assert paths[0].startswith("/uploads/") and paths[0].endswith(".png")
    assert paths[1].endswith(".jpg")
    served = client.get(paths[0])
    assert served.status_code == 200
    assert served.content == b"png-bytes"


def test_create_post_validation(client, make_user):
    _, ana = make_user("ana")
    assert client.post("/api/posts", data={"content": "hi"}).status_code == 401
    assert client.post("/api/posts", data={"content": "  "}, headers=ana).status_code == 400
    r = client.post("/api/posts", data={"content": "hi", "workouts": "{not json"}, headers=ana)
    assert r.status_code == 400
    r = client.post("/api/posts", data={"content": "hi", "workouts": json.dumps([{"subtype": "x"}])}, headers=ana)
    assert r.status_code == 400
    # nothing was written by the rejected requests
    assert client.get("/api/users/ana", headers=ana).json()["posts"] == []


def test_get_missing_post(client):
    assert client.get("/api/posts/999").status_code == 404


def test_delete_post(client, make_user, make_post):
    _, ana = make_user("ana")
    _, bob = make_user("bob")
    post = make_post(ana, files=[("images", ("a.jpg", b"jpg", "image/jpeg"))])
    stored = UPLOAD_DIR / post["images"][0]["path"].rsplit("/", 1)[-1]
    assert stored.exists()
    client.post("/api/comments", json={"post_id": post["id"], "content": "nice"}, headers=bob)
    client.post(f"/api/posts/{post['id']}/likes", headers=bob)

    assert client.delete(f"/api/posts/{post['id']}", headers=bob).status_code == 401
    r = client.delete(f"/api/posts/{post['id']}", headers=ana)
    assert r.status_code == 200
    assert r.json()["message"]
    assert client.get(f"/api/posts/{post['id']}").status_code == 404
    assert client.delete(f"/api/posts/{post['id']}", headers=ana).status_code == 404
    assert not stored.exists()


def test_comments(client, make_user, make_post):
    _, ana = make_user("ana")
    _, bob = make_user("bob")
    post = make_post(ana)

    r = client.post("/api/comments", json={"post_id": post["id"], "content": "Great pace!"}, headers=bob)
    assert r.status_code == 201
    comment = r.json()
    assert comment["author"]["username"] == "bob"
    assert comment["content"] == "Great pace!"

    listed = client.get(f"/api/posts/{post['id']}/comments").json()
    assert [c["id"] for c in listed] == [comment["id"]]
    assert client.get(f"/api/posts/{post['id']}").json()["comments"][0]["author"]["username"] == "bob"

    assert client.post("/api/comments", json={"post_id": 999, "content": "x"}, headers=bob).status_code == 404
    assert client.post("/api/comments", json={"post_id": post["id"]}, headers=bob).status_code == 400
    assert client.post("/api/comments", json={"post_id": post["id"], "content": "x"}).status_code == 401

    assert client.delete(f"/api/comments/{comment['id']}", headers=ana).status_code == 401
    assert client.delete(f"/api/comments/{comment['id']}", headers=bob).status_code == 200
    assert client.delete(f"/api/comments/{comment['id']}", headers=bob).status_code == 404
    assert client.get(f"/api/posts/{post['id']}/comments").json() == []


def test_like_is_unique_per_user(client, make_user, make_post):
    _, ana = make_user("ana")
    _, bob = make_user("bob")
    post = make_post(ana)
    url = f"/api/posts/{post['id']}/likes"

    r = client.post(url, headers=bob)
    assert r.status_code == 201
    assert r.json()["author"]["username"] == "bob"
    assert client.post(url, headers=bob).status_code == 400
    assert client.post(url, headers=ana).status_code == 201

    likes = client.get(url).json()
    assert sorted(like["author"]["username"] for like in likes) == ["ana", "bob"]


def test_unlike(client, make_user, make_post):
    _, ana = make_user("ana")
    post = make_post(ana)
    url = f"/api/posts/{post['id']}/likes"

    assert client.delete(url, headers=ana).status_code == 404
    client.post(url, headers=ana)
    assert client.delete(url, headers=ana).status_code == 200
    assert client.delete(url, headers=ana).status_code == 404
    assert client.get(url).json() == []

    assert client.post("/api/posts/999/likes", headers=ana).status_code == 404
    assert client.get("/api/posts/999/likes").status_code == 404


def test_too_many_images(client, make_user):
    _, ana = make_user("ana")
    limit = get_settings().max_images_per_post
    files = [("images", (f"{i}.jpg", b"x", "image/jpeg")) for i in range(limit + 1)]
    r = client.post("/api/posts", data={"content": "album"}, files=files, headers=ana)
    assert r.status_code == 400
    assert list(UPLOAD_DIR.iterdir()) == []


def test_storage_failure_is_server_error(client, make_user, count_rows, monkeypatch):
    _, ana = make_user("ana")

    def broken_write(source, destination):
        raise OSError("disk full")

    monkeypatch.setattr(uploads, "_write_file", broken_write)
    files = [("images", ("a.jpg", b"x", "image/jpeg"))]
    r = client.post("/api/posts", data={"content": "hi"}, files=files, headers=ana)
    assert r.status_code == 500
    assert r.json() == {"detail": "Could not store uploaded images."}
    assert count_rows(Post) == 0


def test_failed_commit_rolls_back_rows_and_files(client, make_user, count_rows, monkeypatch):
    _, ana = make_user("ana")

    async def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(AsyncSession, "commit", failing_commit)
    r = client.post(
        "/api/posts",
        data={"content": "hi", "workouts": json.dumps(WORKOUTS)},
        files=[("images", ("a.jpg", b"x", "image/jpeg"))],
        headers=ana,
    )
    monkeypatch.undo()

    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error."}
    assert count_rows(Post) == 0
    assert count_rows(Workout) == 0
    assert count_rows(Exercise) == 0
    assert count_rows(Image) == 0
    assert list(UPLOAD_DIR.iterdir()) == []


def test_malformed_fields_are_bad_requests(client, make_user):
    _, ana = make_user("ana")
    r = client.post("/api/comments", json={"post_id": "abc", "content": "x"}, headers=ana)
    assert r.status_code == 400
    assert "post_id" in r.json()["detail"]
    assert client.get("/api/posts/abc").status_code == 400
