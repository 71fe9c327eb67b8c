"""ORM 模型导出集合。"""

from todo_api.models.todo import TodoItem
from todo_api.models.user import User

__all__ = [
    "TodoItem",
    "User",
]
