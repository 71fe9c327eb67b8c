"""待办事项接口。

所有接口都要求登录，读写范围限定为当前用户；访问他人事项与访问不存在的事项同样返回 404。
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from sqlalchemy.orm import Session

from todo_api.db.session import get_db
from todo_api.core.results import UNAUTHENTICATED
from todo_api.dependencies import RequestContext, get_request_context
from todo_api.exceptions import auth_failure_exception
from todo_api.models.todo import TodoItem
from todo_api.schemas.common import ErrorResponse, SuccessResponse
from todo_api.schemas.todo import (
    TodoCreateRequest,
    TodoData,
    TodoDeleteData,
    TodoSummaryData,
    TodoUpdateRequest,
)
from todo_api.services import (
    create_todo,
    delete_todo,
    get_todo,
    get_user_by_id,
    list_todos,
    summarize_todos,
    toggle_todo,
    update_todo,
)
from todo_api.utils.response import success

router = APIRouter(prefix="/todo", tags=["todo"])

_AUTH_RESPONSES = {401: {"model": ErrorResponse}}
_ITEM_RESPONSES = {401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}

# 整数主键上限，超出范围直接按参数校验失败处理。
MAX_TODO_ID = 2**31 - 1
TodoId = Annotated[int, Path(ge=1, le=MAX_TODO_ID, description="事项 ID。")]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="todo not found")


def _todo_payload(item: TodoItem) -> dict:
    return TodoData.model_validate(item).model_dump()


@router.get(
    "",
    summary="查询待办列表",
    description="按创建时间倒序返回当前用户的全部事项。",
    response_model=SuccessResponse[list[TodoData]],
    responses=_AUTH_RESPONSES,
)
def list_items(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    items = list_todos(db, user_id=ctx.user_id)
    return success(request, [_todo_payload(item) for item in items])


@router.get(
    "/summary",
    summary="待办统计",
    response_model=SuccessResponse[TodoSummaryData],
    responses=_AUTH_RESPONSES,
)
def summary(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return success(request, summarize_todos(db, user_id=ctx.user_id))


@router.get(
    "/{todo_id}",
    summary="查询单个待办",
    response_model=SuccessResponse[TodoData],
    responses=_ITEM_RESPONSES,
)
def get_item(
    request: Request,
    todo_id: TodoId,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    item = get_todo(db, user_id=ctx.user_id, todo_id=todo_id)
    if item is None:
        raise _not_found()
    return success(request, _todo_payload(item))


@router.post(
    "",
    summary="创建待办",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessResponse[TodoData],
    responses={**_AUTH_RESPONSES, 422: {"model": ErrorResponse}},
)
def create_item(
    payload: TodoCreateRequest,
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    # 令牌仍有效但账号已被删除时，不允许再写入新数据。
    if get_user_by_id(db, ctx.user_id) is None:
        raise auth_failure_exception(UNAUTHENTICATED)
    item = create_todo(db, user_id=ctx.user_id, title=payload.title, due_date=payload.due_date)
    return success(request, _todo_payload(item))


@router.put(
    "/{todo_id}",
    summary="更新待办",
    description="请求体中的 id 必须与路径参数一致。",
    response_model=SuccessResponse[TodoData],
    responses={**_ITEM_RESPONSES, 400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def update_item(
    payload: TodoUpdateRequest,
    request: Request,
    todo_id: TodoId,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    if payload.id != todo_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="id mismatch")
    item = update_todo(
        db,
        user_id=ctx.user_id,
        todo_id=todo_id,
        title=payload.title,
        due_date=payload.due_date,
        is_completed=payload.is_completed,
    )
    if item is None:
        raise _not_found()
    return success(request, _todo_payload(item))


@router.patch(
    "/{todo_id}/toggle",
    summary="切换完成状态",
    response_model=SuccessResponse[TodoData],
    responses=_ITEM_RESPONSES,
)
def toggle_item(
    request: Request,
    todo_id: TodoId,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    item = toggle_todo(db, user_id=ctx.user_id, todo_id=todo_id)
    if item is None:
        raise _not_found()
    return success(request, _todo_payload(item))


@router.delete(
    "/{todo_id}",
    summary="删除待办",
    response_model=SuccessResponse[TodoDeleteData],
    responses=_ITEM_RESPONSES,
)
def delete_item(
    request: Request,
    todo_id: TodoId,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    if not delete_todo(db, user_id=ctx.user_id, todo_id=todo_id):
        raise _not_found()
    return success(request, {"deleted": True})
