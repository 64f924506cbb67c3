from app.core.security import create_access_token


def test_create_user_hides_password(client):
    r = client.post(
        "/api/users",
        json={"email": "ana@example.com", "username": "ana", "password": "pw", "height": 170, "body_fat": 18.5},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["username"] == "ana"
    assert body["height"] == 170
    assert body["body_fat"] == 18.5
    assert "password" not in body and "password_hash" not in body


def test_duplicate_username_or_email_is_rejected(client, make_user):
    make_user("ana")
    r = client.post("/api/users", json={"email": "other@example.com", "username": "ana", "password": "pw"})
    assert r.status_code == 400
    r = client.post("/api/users", json={"email": "ana@example.com", "username": "ana2", "password": "pw"})
    assert r.status_code == 400

    users = client.get("/api/users").json()
    assert [u["username"] for u in users] == ["ana"]


def test_signin(client, make_user):
    make_user("ana", password="hunter2")
    r = client.post("/api/signin", json={"username": "ana", "password": "hunter2"})
    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"
    assert r.json()["user"]["username"] == "ana"

    assert client.post("/api/signin", json={"username": "ana", "password": "nope"}).status_code == 401
    assert client.post("/api/signin", json={"username": "ghost", "password": "x"}).status_code == 401
    assert client.post("/api/signin", json={"username": "ana"}).status_code == 400


def test_profile_requires_valid_token(client, make_user):
    user, _ = make_user("ana")
    assert client.get("/api/users/ana").status_code == 401
    assert client.get("/api/users/ana", headers={"Authorization": "Bearer garbage"}).status_code == 401
    assert client.get("/api/users/ana", headers={"Authorization": "Token abc"}).status_code == 401

    expired = create_access_token(user["id"], expires_minutes=-1)
    r = client.get("/api/users/ana", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401


def test_profile_contents(client, make_user, make_post):
    _, ana = make_user("ana")
    make_user("bob")
    make_post(ana, content="first")
    make_post(ana, content="second")
    client.post("/api/follow/bob", headers=ana)

    r = client.get("/api/users/ana", headers=ana)
    assert r.status_code == 200
    body = r.json()
    assert [p["content"] for p in body["posts"]] == ["second", "first"]
    assert body["following"] == ["bob"]
    assert body["followers"] == []

    assert client.get("/api/users/ghost", headers=ana).status_code == 404


def test_rename_user(client, make_user):
    _, ana = make_user("ana")
    make_user("bob")

    r = client.patch("/api/users/ana", json={"username": "anna"}, headers=ana)
    assert r.status_code == 200
    assert r.json()["username"] == "anna"
    # the token identifies the user by id, so it survives the rename
    assert client.get("/api/users/anna", headers=ana).status_code == 200
    assert client.get("/api/users/ana", headers=ana).status_code == 404


def test_rename_user_errors(client, make_user):
    _, ana = make_user("ana")
    _, bob = make_user("bob")

    assert client.patch("/api/users/ana", json={"username": "bob"}, headers=ana).status_code == 400
    assert client.patch("/api/users/ana", json={}, headers=ana).status_code == 400
    assert client.patch("/api/users/ana", json={"username": "x"}, headers=bob).status_code == 401
    assert client.patch("/api/users/ghost", json={"username": "x"}, headers=ana).status_code == 404
    assert client.patch("/api/users/ana", json={"username": "x"}).status_code == 401


def test_create_user_with_missing_or_malformed_field(client):
    r = client.post("/api/users", json={"email": "ana@example.com", "password": "pw"})
    assert r.status_code == 400
    assert "username" in r.json()["detail"]

    r = client.post("/api/users", json={"email": "ana@example.com", "username": "ana", "password": "pw", "height": "tall"})
    assert r.status_code == 400
    assert client.get("/api/users").json() == []
