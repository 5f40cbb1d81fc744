from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import require_permission, require_roles
from stockroom.core.permissions import Permission
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import MovementType, UserRole
from stockroom.models.user import User
from stockroom.schemas.common import DataResponse, Page, PageParams, build_page
from stockroom.schemas.inventory import MovementCreate, MovementRead
from stockroom.services import inventory_service

router = APIRouter(prefix="/stock-movements", tags=["stock-movements"])


@router.get("", response_model=Page[MovementRead])
async def list_movements(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    product: UUID | None = Query(None),
    location: UUID | None = Query(None),
    movement_type: MovementType | None = Query(None, alias="type"),
    date_from: date | None = Query(None, alias="dateFrom"),
    date_to: date | None = Query(None, alias="dateTo"),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_permission(Permission.read)),
):
    params = PageParams(page=page, limit=limit)
    items, total = await inventory_service.list_movements(
        db,
        params,
        product_id=product,
        location_id=location,
        movement_type=movement_type,
        date_from=date_from,
        date_to=date_to,
    )
    return build_page(items, total, params)


@router.post("", response_model=DataResponse[MovementRead], status_code=status.HTTP_201_CREATED)
async def create_movement(
    payload: MovementCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_roles(UserRole.admin, UserRole.manager)),
    _: User = Depends(require_permission(Permission.write)),
):
    movement = await inventory_service.record_movement(db, payload, current_user.id)
    await commit_async(db)
    return {"message": "Stock movement recorded", "data": movement}
