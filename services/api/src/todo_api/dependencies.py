"""请求上下文依赖。

职责:
1. 提供应用启动时构造的不可变配置。
2. 解析并校验访问令牌，失败统一返回 401。
3. 生成后续路由统一使用的 RequestContext，路由显式把 user_id 传入数据访问。
"""

from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from todo_api.core.config import Settings
from todo_api.core.results import UNAUTHENTICATED, AuthFailure
from todo_api.core.security import AuthenticatedPrincipal, authenticate_token
from todo_api.exceptions import auth_failure_exception

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """请求上下文。

    该对象在路由层作为统一输入，所有数据读写都以 user_id 过滤。
    """

    # 当前请求用户 ID。
    user_id: int
    # 认证主体（来自令牌声明）。
    principal: AuthenticatedPrincipal


def get_app_settings(request: Request) -> Settings:
    """返回应用启动时注入的配置。"""
    return request.app.state.settings


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> AuthenticatedPrincipal:
    """提取并校验当前请求认证主体。"""
    if credentials is None or not credentials.credentials:
        raise auth_failure_exception(UNAUTHENTICATED)

    result = authenticate_token(credentials.credentials, settings)
    if isinstance(result, AuthFailure):
        raise auth_failure_exception(result)
    return result


def get_request_context(principal: AuthenticatedPrincipal = Depends(get_current_principal)) -> RequestContext:
    """完成认证并构造请求上下文。"""
    return RequestContext(user_id=principal.user_id, principal=principal)
