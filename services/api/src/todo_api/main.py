"""FastAPI 应用入口点。"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from todo_api.api.router import api_router
from todo_api.core.config import Settings, get_settings
from todo_api.core.logging import setup_logging
from todo_api.db.session import build_engine, build_session_factory, create_schema
from todo_api.exceptions import register_exception_handlers
from todo_api.middlewares import register_middlewares

logger = logging.getLogger("todo_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.database_auto_create:
        create_schema(app.state.engine)
    logger.info("service started env=%s", settings.app_env)
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """创建并配置 FastAPI 应用实例。

    配置不完整时 get_settings() 抛出 MisconfiguredError，服务无法启动。
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        debug=settings.app_debug,
        description=(
            "个人待办事项接口。\n\n"
            "所有业务接口统一返回：`{request_id, data, meta}`。\n"
            "通过 `/auth/login` 或 `/auth/register` 获取 Bearer 访问令牌，数据按用户隔离。"
        ),
        openapi_tags=[
            {"name": "health", "description": "服务存活与就绪探针。"},
            {"name": "auth", "description": "注册、登录与当前身份。"},
            {"name": "todo", "description": "当前用户的待办事项。"},
        ],
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url)
    app.state.session_factory = build_session_factory(app.state.engine)

    register_middlewares(app, settings)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
