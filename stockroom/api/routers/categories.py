from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import require_permission, require_roles
from stockroom.core.permissions import Permission
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import UserRole
from stockroom.schemas.common import DataResponse, ListResponse
from stockroom.schemas.product import CategoryCreate, CategoryRead
from stockroom.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "",
    response_model=ListResponse[CategoryRead],
    dependencies=[Depends(require_permission(Permission.read))],
)
async def list_categories(
    active: bool = Query(True),
    db: AsyncSession = Depends(get_async_db),
):
    return {"data": await category_service.list_categories(db, active=active)}


@router.post(
    "",
    response_model=DataResponse[CategoryRead],
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_roles(UserRole.admin, UserRole.manager)),
        Depends(require_permission(Permission.write)),
    ],
)
async def create_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_async_db),
):
    category = await category_service.create_category(db, payload)
    await commit_async(db)
    return {"message": "Category created successfully", "data": category}
