"""待办事项读写，所有操作都按所属用户过滤。

其他用户的数据与不存在的数据表现一致，均返回 None。
"""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from todo_api.models.todo import TodoItem


def _owned(user_id: int):
    return select(TodoItem).where(TodoItem.user_id == user_id)


def list_todos(db: Session, *, user_id: int) -> list[TodoItem]:
    """按创建时间倒序返回当前用户的全部事项。"""
    stmt = _owned(user_id).order_by(TodoItem.created_at.desc(), TodoItem.id.desc())
    return list(db.execute(stmt).scalars().all())


def get_todo(db: Session, *, user_id: int, todo_id: int) -> TodoItem | None:
    return db.execute(_owned(user_id).where(TodoItem.id == todo_id)).scalar_one_or_none()


def summarize_todos(db: Session, *, user_id: int) -> dict[str, int]:
    """统计总数、已完成与未完成数量。"""
    total = db.execute(select(func.count(TodoItem.id)).where(TodoItem.user_id == user_id)).scalar_one()
    completed = db.execute(
        select(func.count(TodoItem.id)).where(TodoItem.user_id == user_id).where(TodoItem.is_completed.is_(True))
    ).scalar_one()
    return {"total": total, "completed": completed, "pending": total - completed}


def create_todo(db: Session, *, user_id: int, title: str, due_date: datetime | None) -> TodoItem:
    item = TodoItem(user_id=user_id, title=title.strip(), due_date=due_date, is_completed=False)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_todo(
    db: Session,
    *,
    user_id: int,
    todo_id: int,
    title: str,
    due_date: datetime | None,
    is_completed: bool,
) -> TodoItem | None:
    """整体更新事项。"""
    item = get_todo(db, user_id=user_id, todo_id=todo_id)
    if item is None:
        return None
    item.title = title.strip()
    item.due_date = due_date
    item.is_completed = is_completed
    db.commit()
    db.refresh(item)
    return item


def toggle_todo(db: Session, *, user_id: int, todo_id: int) -> TodoItem | None:
    """切换完成状态。"""
    item = get_todo(db, user_id=user_id, todo_id=todo_id)
    if item is None:
        return None
    item.is_completed = not item.is_completed
    db.commit()
    db.refresh(item)
    return item


def delete_todo(db: Session, *, user_id: int, todo_id: int) -> bool:
    item = get_todo(db, user_id=user_id, todo_id=todo_id)
    if item is None:
        return False
    db.delete(item)
    db.commit()
    return True
