"""注册、登录与身份接口。"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from todo_api.core.config import Settings
from todo_api.core.results import UNAUTHENTICATED, AuthFailure
from todo_api.db.session import get_db
from todo_api.dependencies import RequestContext, get_app_settings, get_request_context
from todo_api.exceptions import auth_failure_exception
from todo_api.schemas.auth import (
    AuthLoginRequest,
    AuthLogoutData,
    AuthMeData,
    AuthRegisterRequest,
    AuthSessionData,
)
from todo_api.schemas.common import ErrorResponse, SuccessResponse
from todo_api.services import AuthSession, get_user_by_id, login_account, register_account
from todo_api.utils.response import success

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_payload(session: AuthSession) -> dict:
    return {
        "token": session.token,
        "token_type": "bearer",
        "username": session.username,
        "email": session.email,
        "expires_at": session.expires_at,
    }


@router.post(
    "/register",
    summary="注册本地账号",
    description="创建账号并直接返回访问令牌。用户名或邮箱已占用时返回 409。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[AuthSessionData],
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def register(
    payload: AuthRegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """注册本地账号。"""
    result = register_account(
        db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        settings=settings,
    )
    if isinstance(result, AuthFailure):
        raise auth_failure_exception(result)
    return success(request, _session_payload(result))


@router.post(
    "/login",
    summary="本地账号登录",
    description="使用用户名密码登录，返回 Bearer 访问令牌。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[AuthSessionData],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def login(
    payload: AuthLoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """本地账号登录并签发访问令牌。"""
    result = login_account(db, username=payload.username, password=payload.password, settings=settings)
    if isinstance(result, AuthFailure):
        raise auth_failure_exception(result)
    return success(request, _session_payload(result))


@router.post(
    "/logout",
    summary="登出",
    description="服务端不维护令牌黑名单，客户端丢弃令牌即完成登出。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[AuthLogoutData],
    responses={401: {"model": ErrorResponse}},
)
def logout(request: Request, ctx: RequestContext = Depends(get_request_context)):
    return success(request, {"logged_out": True})


@router.get(
    "/me",
    summary="获取当前身份",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[AuthMeData],
    responses={401: {"model": ErrorResponse}},
)
def me(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """返回当前登录用户资料；令牌对应用户已不存在时视为未认证。"""
    user = get_user_by_id(db, ctx.user_id)
    if user is None:
        raise auth_failure_exception(UNAUTHENTICATED)
    return success(
        request,
        {"id": user.id, "username": user.username, "email": user.email, "created_at": user.created_at},
    )
