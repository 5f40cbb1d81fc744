from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import require_permission
from stockroom.core.config import settings
from stockroom.core.permissions import Permission
from stockroom.db.session_async import get_async_db
from stockroom.schemas.common import DataResponse
from stockroom.schemas.report import DashboardRead, KpisRead
from stockroom.services import report_service

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[Depends(require_permission(Permission.read))],
)


@router.get("/dashboard", response_model=DataResponse[DashboardRead])
async def dashboard(
    period: int = Query(settings.REPORTS_DEFAULT_PERIOD_DAYS, ge=1, le=365, description="Period in days"),
    db: AsyncSession = Depends(get_async_db),
):
    return {"data": await report_service.dashboard(db, period)}


@router.get("/kpis", response_model=DataResponse[KpisRead])
async def kpis(
    period: int = Query(settings.REPORTS_DEFAULT_PERIOD_DAYS, ge=1, le=365, description="Period in days"),
    db: AsyncSession = Depends(get_async_db),
):
    return {"data": await report_service.kpis(db, period)}
