from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import require_permission, require_roles
from stockroom.core.permissions import Permission
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import SupplierCategory, UserRole
from stockroom.schemas.common import DataResponse, Page, PageParams, build_page
from stockroom.schemas.supplier import SupplierCreate, SupplierRead
from stockroom.services import supplier_service

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


@router.get(
    "",
    response_model=Page[SupplierRead],
    dependencies=[Depends(require_permission(Permission.read))],
)
async def list_suppliers(
    params: PageParams = Depends(),
    search: str | None = Query(None, description="Matches name or contact person"),
    category: SupplierCategory | None = Query(None),
    active: bool = Query(True),
    db: AsyncSession = Depends(get_async_db),
):
    items, total = await supplier_service.list_suppliers(
        db, params, search=search, category=category, active=active
    )
    return build_page(items, total, params)


@router.post(
    "",
    response_model=DataResponse[SupplierRead],
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_roles(UserRole.admin, UserRole.manager)),
        Depends(require_permission(Permission.write)),
    ],
)
async def create_supplier(
    payload: SupplierCreate,
    db: AsyncSession = Depends(get_async_db),
):
    supplier = await supplier_service.create_supplier(db, payload)
    await commit_async(db)
    return {"message": "Supplier created successfully", "data": supplier}
