"""健康检查接口。"""

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from fastapi import APIRouter, Depends, HTTPException, Request, status

from todo_api.db.session import get_db
from todo_api.db.base import Base
from todo_api.utils.response import success
from todo_api.schemas.common import ErrorResponse, HealthStatusData, SuccessResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "/live",
    summary="存活探针",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[HealthStatusData],
    responses={500: {"model": ErrorResponse}},
)
def live(request: Request):
    """仅表示进程存活，不校验外部依赖。"""
    return success(request, {"status": "ok"})


@router.get(
    "/ready",
    summary="就绪探针",
    description="检查数据库可连通且账号表与事项表均已建好。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[HealthStatusData],
    responses={503: {"model": ErrorResponse}},
)
def ready(request: Request, db: Session = Depends(get_db)):
    """缺表时返回 503，并在错误详情中列出缺失的表。"""
    existing = set(inspect(db.get_bind()).get_table_names())
    expected = sorted(Base.metadata.tables)
    missing = [name for name in expected if name not in existing]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "SCHEMA_NOT_READY", "message": "database schema is incomplete", "details": {"missing_tables": missing}},
        )
    return success(request, {"status": "ready", "tables": expected})
