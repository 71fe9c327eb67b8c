"""待办事项模型。"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, false
from sqlalchemy.orm import Mapped, mapped_column

from todo_api.models.base import Base, CreatedAtMixin, IntegerPrimaryKeyMixin


class TodoItem(Base, IntegerPrimaryKeyMixin, CreatedAtMixin):
    """用户私有的待办事项。"""

    __tablename__ = "todo_items"

    # 标题。
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    # 是否已完成。
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    # 可选截止时间。
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    # 所属用户 ID（逻辑关联 users.id，不声明数据库外键）。
    user_id: Mapped[int] = mapped_column(nullable=False, index=True)
