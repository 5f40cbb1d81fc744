from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import require_permission, require_roles
from stockroom.core.permissions import Permission
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import UserRole
from stockroom.schemas.common import DataResponse, Page, PageParams, build_page
from stockroom.schemas.customer import CustomerCreate, CustomerRead
from stockroom.services import customer_service

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get(
    "",
    response_model=Page[CustomerRead],
    dependencies=[Depends(require_permission(Permission.read))],
)
async def list_customers(
    params: PageParams = Depends(),
    search: str | None = Query(None, description="Matches name or CPF/CNPJ"),
    active: bool = Query(True),
    db: AsyncSession = Depends(get_async_db),
):
    items, total = await customer_service.list_customers(db, params, search=search, active=active)
    return build_page(items, total, params)


@router.post(
    "",
    response_model=DataResponse[CustomerRead],
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_roles(UserRole.admin, UserRole.manager)),
        Depends(require_permission(Permission.write)),
    ],
)
async def create_customer(
    payload: CustomerCreate,
    db: AsyncSession = Depends(get_async_db),
):
    customer = await customer_service.create_customer(db, payload)
    await commit_async(db)
    return {"message": "Customer created successfully", "data": customer}
