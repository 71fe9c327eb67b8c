"""数据库会话管理。

引擎与会话工厂由 `create_app()` 按注入的配置创建并挂在 `app.state` 上，
不在模块导入时读取全局配置。
"""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

import todo_api.models  # noqa: F401
from todo_api.db.base import Base


def build_engine(database_url: str) -> Engine:
    """创建数据库引擎，开启连接预检查以减少僵尸连接影响。"""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, future=True, pool_pre_ping=True, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """统一会话工厂，路由层通过依赖注入获取短生命周期会话。"""
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)


def get_db(request: Request) -> Generator[Session, None, None]:
    """为每个请求提供独立数据库会话。"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def create_schema(bind: Engine) -> None:
    """按模型定义创建缺失的表。"""
    Base.metadata.create_all(bind)
