import os

# 应用模块在导入时读取配置，需在导入前准备好测试环境变量。
os.environ.setdefault("TODO_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("TODO_AUTH_JWT_SECRET", "unit-test-secret-0123456789abcdef0123456789")
os.environ.setdefault("TODO_AUTH_JWT_ISSUER", "todo-api-test")
os.environ.setdefault("TODO_AUTH_JWT_AUDIENCE", "todo-web-test")
os.environ.setdefault("TODO_DATABASE_AUTO_CREATE", "false")

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import todo_api.models  # noqa: F401
from todo_api.core.config import Settings
from todo_api.db.session import get_db
from todo_api.models.base import Base

TEST_SECRET = os.environ["TODO_AUTH_JWT_SECRET"]
TEST_ISSUER = os.environ["TODO_AUTH_JWT_ISSUER"]
TEST_AUDIENCE = os.environ["TODO_AUTH_JWT_AUDIENCE"]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        auth_jwt_secret=TEST_SECRET,
        auth_jwt_issuer=TEST_ISSUER,
        auth_jwt_audience=TEST_AUDIENCE,
    )


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)
    finally:
        engine.dispose()


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    from todo_api.main import app

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
