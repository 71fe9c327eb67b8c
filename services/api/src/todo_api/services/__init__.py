"""服务层能力导出集合。"""

from todo_api.services.local_auth import AuthSession, login_account, register_account
from todo_api.services.todos import (
    create_todo,
    delete_todo,
    get_todo,
    list_todos,
    summarize_todos,
    toggle_todo,
    update_todo,
)
from todo_api.services.users import find_user_by_username, get_user_by_id, insert_user, user_exists

__all__ = [
    "AuthSession",
    "login_account",
    "register_account",
    "find_user_by_username",
    "get_user_by_id",
    "insert_user",
    "user_exists",
    "create_todo",
    "delete_todo",
    "get_todo",
    "list_todos",
    "summarize_todos",
    "toggle_todo",
    "update_todo",
]
