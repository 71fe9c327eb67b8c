"""用户与凭据模型。"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from todo_api.models.base import Base, CreatedAtMixin, IntegerPrimaryKeyMixin


class User(Base, IntegerPrimaryKeyMixin, CreatedAtMixin):
    """本地账号。用户名与邮箱全局唯一。"""

    __tablename__ = "users"

    # 登录名。
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # 邮箱。
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # 口令校验值 base64(salt ‖ key)，不存明文。
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
