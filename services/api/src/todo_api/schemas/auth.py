"""注册、登录与当前身份结构。"""

from datetime import datetime

from pydantic import BaseModel, Field

from todo_api.schemas.common import BaseSchema


class AuthRegisterRequest(BaseModel):
    """本地账号注册请求。"""

    username: str = Field(min_length=1, max_length=100, description="登录名。", examples=["alice"])
    email: str = Field(
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="邮箱。",
        examples=["alice@example.com"],
    )
    password: str = Field(min_length=6, max_length=128, description="登录密码。", examples=["secret1"])


class AuthLoginRequest(BaseModel):
    """本地账号登录请求。"""

    username: str = Field(min_length=1, max_length=100, description="登录名。", examples=["alice"])
    password: str = Field(min_length=1, max_length=128, description="登录密码。", examples=["secret1"])


class AuthSessionData(BaseSchema):
    """登录/注册结果结构。"""

    token: str = Field(description="访问令牌。")
    token_type: str = Field(default="bearer", description="令牌类型。")
    username: str = Field(description="登录名。")
    email: str = Field(description="邮箱。")
    expires_at: datetime = Field(description="令牌过期时间（UTC）。")


class AuthMeData(BaseSchema):
    """当前用户资料。"""

    id: int = Field(description="用户 ID。")
    username: str = Field(description="登录名。")
    email: str = Field(description="邮箱。")
    created_at: datetime = Field(description="注册时间。")


class AuthLogoutData(BaseSchema):
    """登出结果结构。"""

    logged_out: bool = Field(description="是否已完成登出。")
