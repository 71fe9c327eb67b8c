"""口令校验、令牌签发与令牌校验。

三者都是纯计算：不做 I/O，不持有跨请求状态，配置通过参数注入。
"""

import base64
import binascii
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol
from uuid import uuid4

import jwt
from jwt import InvalidTokenError

from todo_api.core.config import MisconfiguredError, Settings
from todo_api.core.results import UNAUTHENTICATED, AuthFailure

# 口令摘要参数固定，存储格式中不记录迭代次数。
PASSWORD_SALT_BYTES = 32
PASSWORD_KEY_BYTES = 32
PASSWORD_HASH_ITERATIONS = 100_000
PASSWORD_HASH_NAME = "sha256"

TOKEN_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "exp", "iat", "iss", "aud", "jti"]


class TokenSubject(Protocol):
    """签发令牌所需的用户字段。"""

    id: int
    username: str
    email: str


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """已通过校验的调用方身份。"""

    # 本地用户 ID（sub）。
    user_id: int
    username: str
    email: str
    # 令牌唯一标识（jti）。
    token_id: str
    expires_at: datetime


@dataclass(frozen=True)
class IssuedToken:
    """签发结果。"""

    token: str
    expires_at: datetime
    token_id: str


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8", "surrogatepass")


def _derive_key(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac(
        PASSWORD_HASH_NAME,
        _password_bytes(password),
        salt,
        PASSWORD_HASH_ITERATIONS,
        dklen=PASSWORD_KEY_BYTES,
    )


def hash_password(password: str) -> str:
    """使用 PBKDF2-SHA256 生成口令校验值：base64(salt ‖ key)。"""
    salt = secrets.token_bytes(PASSWORD_SALT_BYTES)
    return base64.b64encode(salt + _derive_key(password, salt)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """校验口令是否匹配；校验值格式异常时返回 False。"""
    try:
        raw = base64.b64decode(password_hash, validate=True)
    except (ValueError, TypeError, binascii.Error):
        return False
    if len(raw) != PASSWORD_SALT_BYTES + PASSWORD_KEY_BYTES:
        return False

    salt, expected_key = raw[:PASSWORD_SALT_BYTES], raw[PASSWORD_SALT_BYTES:]
    return hmac.compare_digest(_derive_key(password, salt), expected_key)


def _ensure_signing_material(settings: Settings) -> None:
    for name in ("auth_jwt_secret", "auth_jwt_issuer", "auth_jwt_audience"):
        value = getattr(settings, name, None)
        if not isinstance(value, str) or not value.strip():
            raise MisconfiguredError(f"{name} is not configured")


def issue_access_token(user: TokenSubject, settings: Settings, *, now: datetime | None = None) -> IssuedToken:
    """签发访问令牌。"""
    _ensure_signing_material(settings)
    # exp 声明按整秒记录，对外返回的过期时间与之保持一致。
    issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    expires_at = issued_at + timedelta(seconds=settings.auth_access_token_ttl_seconds)
    jti = str(uuid4())

    claims: dict[str, Any] = {
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
        "jti": jti,
        "iat": int(issued_at.timestamp()),
        "nbf": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "iss": settings.auth_jwt_issuer,
        "aud": settings.auth_jwt_audience,
    }
    token = jwt.encode(claims, settings.auth_jwt_secret, algorithm=TOKEN_ALGORITHM)
    return IssuedToken(token=token, expires_at=expires_at, token_id=jti)


def _parse_subject(value: Any) -> int | None:
    if not isinstance(value, str) or not value.isdigit():
        return None
    subject = int(value)
    return subject if subject > 0 else None


def authenticate_token(token: str | None, settings: Settings) -> AuthenticatedPrincipal | AuthFailure:
    """校验令牌并解析调用方身份。

    签名、签发方、受众与过期时间任一不满足都返回同一个 UNAUTHENTICATED，
    过期判断不留时钟容错。
    """
    if not token:
        return UNAUTHENTICATED

    try:
        claims = jwt.decode(
            token,
            key=settings.auth_jwt_secret,
            algorithms=[TOKEN_ALGORITHM],
            issuer=settings.auth_jwt_issuer,
            audience=settings.auth_jwt_audience,
            leeway=0,
            options={"require": _REQUIRED_CLAIMS},
        )
    except InvalidTokenError:
        return UNAUTHENTICATED

    user_id = _parse_subject(claims.get("sub"))
    username = claims.get("username")
    email = claims.get("email")
    jti = claims.get("jti")
    if user_id is None or not isinstance(username, str) or not isinstance(email, str) or not isinstance(jti, str):
        return UNAUTHENTICATED

    return AuthenticatedPrincipal(
        user_id=user_id,
        username=username,
        email=email,
        token_id=jti,
        expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )

