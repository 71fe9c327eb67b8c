"""路由模块导出集合。"""

from . import auth, health, todos

__all__ = [
    "auth",
    "health",
    "todos",
]
