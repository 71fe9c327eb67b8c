from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from todo_api.core.config import Settings
from todo_api.core.security import issue_access_token


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _register(client: TestClient, username: str, email: str, password: str = "secret1") -> dict:
    resp = client.post("/api/auth/register", json={"username": username, "email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def _create(client: TestClient, token: str, title: str, **extra) -> dict:
    resp = client.post("/api/todo", json={"title": title, **extra}, headers=_auth(token))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def _assert_error(resp, status_code: int, code: str) -> dict:
    assert resp.status_code == status_code, resp.text
    body = resp.json()
    assert body["request_id"]
    assert body["error"]["code"] == code
    return body["error"]


def test_health_probes(client: TestClient):
    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["data"]["status"] == "ok"
    assert live.headers["X-Request-Id"] == live.json()["request_id"]

    ready = client.get("/api/health/ready").json()["data"]
    assert ready == {"status": "ready", "tables": ["todo_items", "users"]}


def test_register_login_scenario(client: TestClient):
    registered = _register(client, "alice", "a@x.com")
    assert registered["username"] == "alice"
    assert registered["email"] == "a@x.com"
    assert registered["token_type"] == "bearer"
    assert registered["token"]
    assert registered["expires_at"]

    wrong = client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})
    _assert_error(wrong, 401, "INVALID_CREDENTIALS")

    login = client.post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    assert login.status_code == 200
    data = login.json()["data"]
    assert data["token"] != registered["token"]
    assert data["username"] == "alice"

    me = client.get("/api/auth/me", headers=_auth(data["token"]))
    assert me.status_code == 200
    assert me.json()["data"]["username"] == "alice"
    assert me.json()["data"]["email"] == "a@x.com"


def test_login_errors_do_not_reveal_user_existence(client: TestClient):
    _register(client, "alice", "a@x.com")

    wrong_password = client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})
    unknown_user = client.post("/api/auth/login", json={"username": "nobody", "password": "secret1"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json()["error"]["code"] == unknown_user.json()["error"]["code"]
    assert wrong_password.json()["error"]["message"] == unknown_user.json()["error"]["message"]


@pytest.mark.parametrize(
    ("username", "email"),
    [("alice", "other@x.com"), ("alice2", "a@x.com")],
)
def test_register_duplicate_is_conflict(client: TestClient, username: str, email: str):
    _register(client, "alice", "a@x.com")
    resp = client.post("/api/auth/register", json={"username": username, "email": email, "password": "secret1"})
    error = _assert_error(resp, 409, "USER_ALREADY_EXISTS")
    assert error["message"] == "user already exists"


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "", "email": "a@x.com", "password": "secret1"},
        {"username": "u" * 101, "email": "a@x.com", "password": "secret1"},
        {"username": "alice", "email": "not-an-email", "password": "secret1"},
        {"username": "alice", "email": "a@x.com", "password": ""},
        {"username": "alice", "email": "a@x.com"},
    ],
)
def test_register_validates_payload(client: TestClient, payload: dict):
    error = _assert_error(client.post("/api/auth/register", json=payload), 422, "VALIDATION_ERROR")
    assert error["details"]["errors"]


def test_protected_routes_require_token(client: TestClient):
    for method, path in [
        ("get", "/api/todo"),
        ("get", "/api/todo/summary"),
        ("get", "/api/todo/1"),
        ("patch", "/api/todo/1/toggle"),
        ("delete", "/api/todo/1"),
        ("get", "/api/auth/me"),
        ("post", "/api/auth/logout"),
    ]:
        resp = getattr(client, method)(path)
        _assert_error(resp, 401, "UNAUTHENTICATED")
        assert resp.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_tokens_yield_identical_response(client: TestClient, settings: Settings):
    user = _register(client, "alice", "a@x.com")
    me = client.get("/api/auth/me", headers=_auth(user["token"])).json()["data"]

    class _Subject:
        id = me["id"]
        username = "alice"
        email = "a@x.com"

    expired = issue_access_token(_Subject, settings, now=datetime.now(timezone.utc) - timedelta(days=8)).token
    foreign = issue_access_token(
        _Subject, settings.model_copy(update={"auth_jwt_secret": "another-secret-0123456789abcdef0123456789"})
    ).token

    errors = []
    for headers in ({}, _auth("garbage"), _auth(expired), _auth(foreign), {"Authorization": "Basic abc"}):
        resp = client.get("/api/todo", headers=headers)
        assert resp.status_code == 401
        error = resp.json()["error"]
        errors.append((error["code"], error["message"]))
    assert len(set(errors)) == 1


def test_token_of_deleted_user_is_rejected_by_me(client: TestClient, settings: Settings):
    class _Ghost:
        id = 999
        username = "ghost"
        email = "g@x.com"

    token = issue_access_token(_Ghost, settings).token
    _assert_error(client.get("/api/auth/me", headers=_auth(token)), 401, "UNAUTHENTICATED")


def test_logout_is_client_side_only(client: TestClient):
    token = _register(client, "alice", "a@x.com")["token"]
    resp = client.post("/api/auth/logout", headers=_auth(token))
    assert resp.json()["data"] == {"logged_out": True}
    assert client.get("/api/todo", headers=_auth(token)).status_code == 200


def test_todo_crud_flow(client: TestClient):
    token = _register(client, "alice", "a@x.com")["token"]

    first = _create(client, token, "  Buy milk  ")
    assert first["title"] == "Buy milk"
    assert first["is_completed"] is False
    assert first["due_date"] is None
    second = _create(client, token, "File taxes", due_date="2030-04-15T00:00:00Z")
    assert second["due_date"].startswith("2030-04-15")

    listed = client.get("/api/todo", headers=_auth(token)).json()
    assert [item["id"] for item in listed["data"]] == [second["id"], first["id"]]
    assert listed["meta"]["total"] == 2

    fetched = client.get(f"/api/todo/{first['id']}", headers=_auth(token)).json()["data"]
    assert fetched["title"] == "Buy milk"

    toggled = client.patch(f"/api/todo/{first['id']}/toggle", headers=_auth(token)).json()["data"]
    assert toggled["is_completed"] is True

    summary = client.get("/api/todo/summary", headers=_auth(token)).json()["data"]
    assert summary == {"total": 2, "completed": 1, "pending": 1}

    updated = client.put(
        f"/api/todo/{second['id']}",
        json={"id": second["id"], "title": "File taxes early", "due_date": None, "is_completed": True},
        headers=_auth(token),
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["title"] == "File taxes early"
    assert updated.json()["data"]["due_date"] is None

    deleted = client.delete(f"/api/todo/{first['id']}", headers=_auth(token))
    assert deleted.json()["data"] == {"deleted": True}
    _assert_error(client.get(f"/api/todo/{first['id']}", headers=_auth(token)), 404, "NOT_FOUND")
    assert client.get("/api/todo/summary", headers=_auth(token)).json()["data"] == {
        "total": 1,
        "completed": 1,
        "pending": 0,
    }


def test_todo_update_rejects_id_mismatch(client: TestClient):
    token = _register(client, "alice", "a@x.com")["token"]
    item = _create(client, token, "Buy milk")
    resp = client.put(
        f"/api/todo/{item['id']}",
        json={"id": item["id"] + 1, "title": "x", "is_completed": False},
        headers=_auth(token),
    )
    _assert_error(resp, 400, "BAD_REQUEST")


@pytest.mark.parametrize("title", ["", "   ", "x" * 501])
def test_todo_create_validates_title(client: TestClient, title: str):
    token = _register(client, "alice", "a@x.com")["token"]
    resp = client.post("/api/todo", json={"title": title}, headers=_auth(token))
    _assert_error(resp, 422, "VALIDATION_ERROR")


def test_todos_are_isolated_between_users(client: TestClient):
    alice = _register(client, "alice", "a@x.com")["token"]
    bob = _register(client, "bob", "b@x.com")["token"]

    alice_item = _create(client, alice, "alice private")
    _create(client, bob, "bob private")

    listed = client.get("/api/todo", headers=_auth(alice)).json()["data"]
    assert [item["title"] for item in listed] == ["alice private"]
    assert client.get("/api/todo/summary", headers=_auth(alice)).json()["data"]["total"] == 1

    # 访问他人事项与访问不存在的事项返回完全相同的错误。
    missing = client.get("/api/todo/999999", headers=_auth(bob)).json()["error"]
    path = f"/api/todo/{alice_item['id']}"
    for resp in (
        client.get(path, headers=_auth(bob)),
        client.patch(f"{path}/toggle", headers=_auth(bob)),
        client.put(path, json={"id": alice_item["id"], "title": "hijack", "is_completed": True}, headers=_auth(bob)),
        client.delete(path, headers=_auth(bob)),
    ):
        error = _assert_error(resp, 404, "NOT_FOUND")
        assert error["message"] == missing["message"]

    untouched = client.get(path, headers=_auth(alice)).json()["data"]
    assert untouched["title"] == "alice private"
    assert untouched["is_completed"] is False


def test_token_of_deleted_user_cannot_create_todos(client: TestClient, settings: Settings):
    class _Ghost:
        id = 999
        username = "ghost"
        email = "g@x.com"

    token = issue_access_token(_Ghost, settings).token
    resp = client.post("/api/todo", json={"title": "orphan"}, headers=_auth(token))
    _assert_error(resp, 401, "UNAUTHENTICATED")
    assert resp.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize("todo_id", ["0", "-1", "2147483648", "99999999999999999999"])
def test_todo_id_out_of_range_is_validation_error(client: TestClient, todo_id: str):
    token = _register(client, "alice", "a@x.com")["token"]
    path = f"/api/todo/{todo_id}"
    for resp in (
        client.get(path, headers=_auth(token)),
        client.patch(f"{path}/toggle", headers=_auth(token)),
        client.delete(path, headers=_auth(token)),
    ):
        _assert_error(resp, 422, "VALIDATION_ERROR")
