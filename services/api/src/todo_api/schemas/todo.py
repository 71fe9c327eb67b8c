"""待办事项请求与响应结构。"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from todo_api.schemas.common import BaseSchema


def _clean_title(value: str) -> str:
    """去掉首尾空白，空白标题视为非法。"""
    value = value.strip()
    if not value:
        raise ValueError("title must not be blank")
    return value


class TodoCreateRequest(BaseModel):
    """创建待办事项请求。"""

    title: str = Field(min_length=1, max_length=500, description="标题。", examples=["Buy milk"])
    due_date: datetime | None = Field(default=None, description="可选截止时间。")

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        return _clean_title(value)


class TodoUpdateRequest(BaseModel):
    """更新待办事项请求。"""

    id: int = Field(description="事项 ID，需与路径参数一致。")
    title: str = Field(min_length=1, max_length=500, description="标题。")
    due_date: datetime | None = Field(default=None, description="可选截止时间。")
    is_completed: bool = Field(default=False, description="是否已完成。")

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        return _clean_title(value)


class TodoData(BaseSchema):
    """待办事项。"""

    id: int = Field(description="事项 ID。")
    title: str = Field(description="标题。")
    is_completed: bool = Field(description="是否已完成。")
    due_date: datetime | None = Field(description="截止时间。")
    created_at: datetime = Field(description="创建时间。")


class TodoSummaryData(BaseSchema):
    """事项统计。"""

    total: int = Field(description="总数。")
    completed: int = Field(description="已完成数量。")
    pending: int = Field(description="未完成数量。")


class TodoDeleteData(BaseSchema):
    deleted: bool = Field(description="是否已删除。")
