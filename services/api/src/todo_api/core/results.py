"""认证相关操作的显式结果值。"""

from dataclasses import dataclass
from enum import StrEnum


class AuthErrorKind(StrEnum):
    """认证失败类别。"""

    INVALID_CREDENTIALS = "invalid_credentials"  # 登录失败，不区分用户不存在与口令错误。
    USER_ALREADY_EXISTS = "user_already_exists"  # 注册时用户名或邮箱已占用。
    UNAUTHENTICATED = "unauthenticated"  # 令牌缺失、签名非法或已过期。
    SERVER_ERROR = "server_error"  # 存储不可用等内部故障。


_PUBLIC_MESSAGES = {
    AuthErrorKind.INVALID_CREDENTIALS: "invalid credentials",
    AuthErrorKind.USER_ALREADY_EXISTS: "user already exists",
    AuthErrorKind.UNAUTHENTICATED: "authentication required",
    AuthErrorKind.SERVER_ERROR: "internal server error",
}


@dataclass(frozen=True)
class AuthFailure:
    """认证失败结果，只携带对外可见的类别与简短说明。"""

    kind: AuthErrorKind

    @property
    def message(self) -> str:
        return _PUBLIC_MESSAGES[self.kind]


INVALID_CREDENTIALS = AuthFailure(AuthErrorKind.INVALID_CREDENTIALS)
USER_ALREADY_EXISTS = AuthFailure(AuthErrorKind.USER_ALREADY_EXISTS)
UNAUTHENTICATED = AuthFailure(AuthErrorKind.UNAUTHENTICATED)
SERVER_ERROR = AuthFailure(AuthErrorKind.SERVER_ERROR)
