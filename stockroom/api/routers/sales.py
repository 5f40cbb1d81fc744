from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import authorize_resource, require_permission, require_roles
from stockroom.core.permissions import Permission
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import PaymentStatus, ResourceType, UserRole
from stockroom.models.user import User
from stockroom.schemas.common import DataResponse, Page, PageParams, build_page
from stockroom.schemas.sale import SaleCreate, SaleRead
from stockroom.services import sale_service

router = APIRouter(prefix="/sales", tags=["sales"])


@router.get("", response_model=Page[SaleRead])
async def list_sales(
    params: PageParams = Depends(),
    customer: UUID | None = Query(None),
    date_from: date | None = Query(None, alias="dateFrom"),
    date_to: date | None = Query(None, alias="dateTo"),
    payment_status: PaymentStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_permission(Permission.read)),
):
    items, total = await sale_service.list_sales(
        db,
        params,
        customer_id=customer,
        date_from=date_from,
        date_to=date_to,
        status=payment_status,
    )
    return build_page(items, total, params)


@router.get("/{sale_id}", response_model=DataResponse[SaleRead])
async def get_sale(
    sale_id: UUID = Path(...),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(authorize_resource(ResourceType.sale, "sale_id")),
):
    return {"data": await sale_service.get_sale(db, sale_id)}


@router.post("", response_model=DataResponse[SaleRead], status_code=status.HTTP_201_CREATED)
async def create_sale(
    payload: SaleCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_roles(UserRole.admin, UserRole.manager)),
    _: User = Depends(require_permission(Permission.write)),
    __: User = Depends(require_permission(Permission.manage_sales)),
):
    sale = await sale_service.create_sale(db, payload, current_user.id)
    await commit_async(db)
    return {"message": "Sale created successfully", "data": sale}
