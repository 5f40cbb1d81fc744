from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import authorize_resource, require_permission, require_roles
from stockroom.core.permissions import Permission
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import ResourceType, UserRole
from stockroom.models.user import User
from stockroom.schemas.common import DataResponse, Page, PageParams, build_page
from stockroom.schemas.inventory import (
    InventoryAdjust,
    InventoryCreate,
    InventoryDetail,
    InventoryRead,
    StockEntryCreate,
)
from stockroom.services import inventory_service

router = APIRouter(prefix="/inventory", tags=["inventory"])

_managers = require_roles(UserRole.admin, UserRole.manager)


@router.get("", response_model=Page[InventoryDetail])
async def list_inventory(
    params: PageParams = Depends(),
    location: UUID | None = Query(None),
    product: UUID | None = Query(None),
    low_stock: bool = Query(False),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_permission(Permission.read)),
):
    items, total = await inventory_service.list_inventory(
        db,
        params,
        location_id=location,
        product_id=product,
        low_stock=low_stock,
    )
    return build_page(items, total, params)


@router.post("/entry", response_model=DataResponse[InventoryRead], status_code=status.HTTP_201_CREATED)
async def stock_entry(
    payload: StockEntryCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(_managers),
    _: User = Depends(require_permission(Permission.write)),
):
    record, _movement = await inventory_service.receive_stock(db, payload, current_user.id)
    await commit_async(db)
    return {"message": "Stock entry recorded", "data": record}


@router.post("", response_model=DataResponse[InventoryRead], status_code=status.HTTP_201_CREATED)
async def register_inventory(
    payload: InventoryCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(_managers),
    _: User = Depends(require_permission(Permission.write)),
):
    record = await inventory_service.register_inventory(db, payload, current_user.id)
    await commit_async(db)
    return {"message": "Inventory record created", "data": record}


@router.get("/{inventory_id}", response_model=DataResponse[InventoryDetail])
async def get_inventory(
    inventory_id: UUID = Path(...),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(authorize_resource(ResourceType.inventory, "inventory_id")),
):
    record = await inventory_service.get_inventory(db, inventory_id, with_relations=True)
    return {"data": record}


@router.put("/{inventory_id}", response_model=DataResponse[InventoryRead])
async def adjust_inventory(
    inventory_id: UUID = Path(...),
    payload: InventoryAdjust = ...,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(_managers),
    _: User = Depends(require_permission(Permission.update)),
    __: User = Depends(authorize_resource(ResourceType.inventory, "inventory_id")),
):
    record, movement = await inventory_service.adjust_inventory(db, inventory_id, payload, current_user.id)
    await commit_async(db)
    message = "Inventory adjusted" if movement is not None else "Inventory unchanged"
    return {"message": message, "data": record}
