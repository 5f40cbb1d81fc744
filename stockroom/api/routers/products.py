from uuid import UUID

from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import get_current_user, require_permission, require_roles
from stockroom.core.permissions import Permission
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import ProductStatus, ProductType, UserRole
from stockroom.models.user import User
from stockroom.schemas.common import DataResponse, ListResponse, Page, PageParams, build_page
from stockroom.schemas.product import (
    BulkImportRequest,
    BulkImportResult,
    LowStockRead,
    ProductCreate,
    ProductDetail,
    ProductRead,
    ProductUpdate,
    QRCodeRead,
)
from stockroom.services import product_service

router = APIRouter(prefix="/products", tags=["products"])

_managers = require_roles(UserRole.admin, UserRole.manager)


@router.get("", response_model=Page[ProductRead])
async def list_products(
    params: PageParams = Depends(),
    search: str | None = Query(None, description="Matches name, SKU or description"),
    category: UUID | None = Query(None),
    product_status: ProductStatus | None = Query(None, alias="status"),
    product_type: ProductType | None = Query(None, alias="type"),
    location: UUID | None = Query(None),
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_permission(Permission.read)),
):
    items, total = await product_service.list_products(
        db,
        params,
        search=search,
        category_id=category,
        status=product_status,
        product_type=product_type,
        location_id=location,
        include_inactive=include_inactive,
    )
    return build_page(items, total, params)


@router.get("/reports/low-stock", response_model=ListResponse[LowStockRead])
async def low_stock(
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_permission(Permission.read)),
):
    return {"data": await product_service.low_stock_report(db)}


@router.post("/bulk-import", response_model=DataResponse[BulkImportResult])
async def bulk_import(
    payload: BulkImportRequest,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(_managers),
    _: User = Depends(require_permission(Permission.write)),
):
    result = await product_service.bulk_import_products(db, payload.products, created_by=current_user.id)
    await commit_async(db)
    return {"message": f"Import finished: {result.success} created", "data": result}


@router.get("/{product_id}", response_model=DataResponse[ProductDetail])
async def get_product(
    product_id: UUID = Path(...),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_permission(Permission.read)),
):
    return {"data": await product_service.get_product_detail(db, product_id)}


@router.post("", response_model=DataResponse[ProductRead], status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(_managers),
    _: User = Depends(require_permission(Permission.write)),
):
    product = await product_service.create_product(db, payload, created_by=current_user.id)
    await commit_async(db)
    return {"message": "Product created successfully", "data": product}


@router.put("/{product_id}", response_model=DataResponse[ProductRead])
async def update_product(
    product_id: UUID = Path(...),
    payload: ProductUpdate = ...,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(_managers),
    _: User = Depends(require_permission(Permission.update)),
):
    product = await product_service.update_product(db, product_id, payload)
    await commit_async(db)
    return {"message": "Product updated successfully", "data": product}


@router.delete("/{product_id}", response_model=DataResponse[ProductRead])
async def delete_product(
    product_id: UUID = Path(...),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_roles(UserRole.admin)),
):
    product = await product_service.deactivate_product(db, product_id)
    await commit_async(db)
    return {"message": "Product deactivated successfully", "data": product}


@router.get("/{product_id}/qr-code", response_model=DataResponse[QRCodeRead])
async def product_qr_code(
    product_id: UUID = Path(...),
    size: int | None = Query(None, ge=50, le=1000),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
):
    data = await product_service.get_qr_code(db, product_id, size=size)
    await commit_async(db)
    return {"data": data}
