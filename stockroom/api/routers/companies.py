from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import get_current_admin, require_permission, require_roles
from stockroom.core.permissions import Permission
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import UserRole
from stockroom.models.user import User
from stockroom.schemas.common import DataResponse, ListResponse
from stockroom.schemas.company import CompanyCreate, CompanyRead, LocationCreate, LocationRead
from stockroom.services import company_service

router = APIRouter(tags=["companies"])


@router.get(
    "/companies",
    response_model=ListResponse[CompanyRead],
    dependencies=[Depends(require_permission(Permission.read))],
)
async def list_companies(
    active: bool = Query(True),
    db: AsyncSession = Depends(get_async_db),
):
    return {"data": await company_service.list_companies(db, active=active)}


@router.post(
    "/companies",
    response_model=DataResponse[CompanyRead],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_current_admin)],
)
async def create_company(
    payload: CompanyCreate,
    db: AsyncSession = Depends(get_async_db),
):
    company = await company_service.create_company(db, payload)
    await commit_async(db)
    return {"message": "Company created successfully", "data": company}


@router.get(
    "/locations",
    response_model=ListResponse[LocationRead],
    dependencies=[Depends(require_permission(Permission.read))],
)
async def list_locations(
    company: UUID | None = Query(None),
    active: bool = Query(True),
    db: AsyncSession = Depends(get_async_db),
):
    return {"data": await company_service.list_locations(db, company_id=company, active=active)}


@router.post("/locations", response_model=DataResponse[LocationRead], status_code=status.HTTP_201_CREATED)
async def create_location(
    payload: LocationCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(require_roles(UserRole.admin, UserRole.manager)),
    _: User = Depends(require_permission(Permission.write)),
):
    company_id = payload.company_id or current_user.company_id
    if company_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="company_id is required")
    if current_user.role is not UserRole.admin and company_id != current_user.company_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied to this company")

    location = await company_service.create_location(db, payload, company_id)
    await commit_async(db)
    return {"message": "Location created successfully", "data": location}
