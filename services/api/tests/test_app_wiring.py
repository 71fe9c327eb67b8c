import os
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect

from todo_api.core.config import Settings
from todo_api.main import create_app


def _settings(database_url: str, *, auto_create: bool = True) -> Settings:
    return Settings(
        _env_file=None,
        database_url=database_url,
        database_auto_create=auto_create,
        auth_jwt_secret=os.environ["TODO_AUTH_JWT_SECRET"],
        auth_jwt_issuer=os.environ["TODO_AUTH_JWT_ISSUER"],
        auth_jwt_audience=os.environ["TODO_AUTH_JWT_AUDIENCE"],
    )


def test_injected_settings_choose_the_database(tmp_path: Path):
    database_url = f"sqlite:///{tmp_path / 'injected.db'}"
    app = create_app(_settings(database_url))

    with TestClient(app, raise_server_exceptions=False) as client:
        resp = client.post("/api/auth/register", json={"username": "alice", "email": "a@x.com", "password": "secret1"})
        assert resp.status_code == 200, resp.text
        ready = client.get("/api/health/ready")
        assert ready.status_code == 200
        assert ready.json()["data"]["tables"] == ["todo_items", "users"]

    engine = create_engine(database_url)
    try:
        assert {"todo_items", "users"} <= set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_ready_reports_missing_tables(tmp_path: Path):
    app = create_app(_settings(f"sqlite:///{tmp_path / 'empty.db'}", auto_create=False))

    with TestClient(app, raise_server_exceptions=False) as client:
        resp = client.get("/api/health/ready")

    assert resp.status_code == 503
    error = resp.json()["error"]
    assert error["code"] == "SCHEMA_NOT_READY"
    assert error["details"]["missing_tables"] == ["todo_items", "users"]
