from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import authorize_resource, require_permission, require_roles
from stockroom.core.permissions import Permission
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import RentalStatus, ResourceType, UserRole
from stockroom.models.user import User
from stockroom.schemas.common import DataResponse, Page, PageParams, build_page
from stockroom.schemas.rental import OverdueResult, RentalCreate, RentalRead, RentalReturn
from stockroom.services import rental_service

router = APIRouter(prefix="/rentals", tags=["rentals"])


@router.get("", response_model=Page[RentalRead])
async def list_rentals(
    params: PageParams = Depends(),
    customer: UUID | None = Query(None),
    date_from: date | None = Query(None, alias="dateFrom"),
    date_to: date | None = Query(None, alias="dateTo"),
    rental_status: RentalStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_permission(Permission.read)),
):
    items, total = await rental_service.list_rentals(
        db,
        params,
        customer_id=customer,
        date_from=date_from,
        date_to=date_to,
        status=rental_status,
    )
    return build_page(items, total, params)


@router.post("/mark-overdue", response_model=DataResponse[OverdueResult])
async def mark_overdue(
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_roles(UserRole.admin, UserRole.manager)),
    _: User = Depends(require_permission(Permission.write)),
    __: User = Depends(require_permission(Permission.manage_rentals)),
):
    updated = await rental_service.mark_overdue(db)
    await commit_async(db)
    return {"message": f"{updated} rental(s) marked overdue", "data": {"updated": updated}}


@router.get("/{rental_id}", response_model=DataResponse[RentalRead])
async def get_rental(
    rental_id: UUID = Path(...),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(authorize_resource(ResourceType.rental, "rental_id")),
):
    return {"data": await rental_service.get_rental(db, rental_id)}


@router.post("", response_model=DataResponse[RentalRead], status_code=status.HTTP_201_CREATED)
async def create_rental(
    payload: RentalCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_roles(UserRole.admin, UserRole.manager)),
    _: User = Depends(require_permission(Permission.write)),
    __: User = Depends(require_permission(Permission.manage_rentals)),
):
    rental = await rental_service.create_rental(db, payload, current_user.id)
    await commit_async(db)
    return {"message": "Rental created successfully", "data": rental}


@router.post("/{rental_id}/return", response_model=DataResponse[RentalRead])
async def return_rental(
    rental_id: UUID = Path(...),
    payload: RentalReturn = ...,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_roles(UserRole.admin, UserRole.manager)),
    _: User = Depends(require_permission(Permission.write)),
    __: User = Depends(require_permission(Permission.manage_rentals)),
    ___: User = Depends(authorize_resource(ResourceType.rental, "rental_id")),
):
    rental = await rental_service.process_return(db, rental_id, payload, current_user.id)
    await commit_async(db)
    return {"message": "Return processed successfully", "data": rental}
