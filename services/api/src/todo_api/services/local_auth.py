"""本地账号注册与登录。

对外只返回显式结果值：成功时为 AuthSession，失败时为 AuthFailure。
存储异常在此处记录日志并归一为 SERVER_ERROR，不向调用方泄露用户是否存在。
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from todo_api.core.config import Settings
from todo_api.core.results import INVALID_CREDENTIALS, SERVER_ERROR, USER_ALREADY_EXISTS, AuthFailure
from todo_api.core.security import hash_password, issue_access_token, verify_password
from todo_api.models.user import User
from todo_api.services.users import find_user_by_username, insert_user, user_exists

logger = logging.getLogger("todo_api.auth")


@dataclass(frozen=True)
class AuthSession:
    """登录/注册成功后返回给客户端的会话信息。"""

    token: str
    user_id: int
    username: str
    email: str
    expires_at: datetime


@lru_cache
def _dummy_password_hash() -> str:
    # 用户不存在时也执行一次摘要计算，使两种失败耗时一致。
    return hash_password(secrets.token_urlsafe(16))


def _open_session(user: User, settings: Settings) -> AuthSession:
    issued = issue_access_token(user, settings)
    return AuthSession(
        token=issued.token,
        user_id=user.id,
        username=user.username,
        email=user.email,
        expires_at=issued.expires_at,
    )


def register_account(
    db: Session,
    *,
    username: str,
    email: str,
    password: str,
    settings: Settings,
) -> AuthSession | AuthFailure:
    """注册本地账号并签发访问令牌。"""
    try:
        if user_exists(db, username, email):
            logger.info("registration rejected, identity taken username=%s", username)
            return USER_ALREADY_EXISTS

        user = insert_user(db, username=username, email=email, password_hash=hash_password(password))
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # 并发注册由唯一约束兜底。
        db.rollback()
        logger.info("registration lost uniqueness race username=%s", username)
        return USER_ALREADY_EXISTS
    except SQLAlchemyError:
        db.rollback()
        logger.exception("registration failed username=%s", username)
        return SERVER_ERROR

    logger.info("user registered user_id=%s", user.id)
    return _open_session(user, settings)


def login_account(
    db: Session,
    *,
    username: str,
    password: str,
    settings: Settings,
) -> AuthSession | AuthFailure:
    """校验用户名口令并签发访问令牌。"""
    try:
        user = find_user_by_username(db, username)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("login lookup failed username=%s", username)
        return SERVER_ERROR

    if user is None:
        verify_password(password, _dummy_password_hash())
        logger.info("login failed username=%s", username)
        return INVALID_CREDENTIALS

    if not verify_password(password, user.password_hash):
        logger.info("login failed username=%s", username)
        return INVALID_CREDENTIALS

    return _open_session(user, settings)
