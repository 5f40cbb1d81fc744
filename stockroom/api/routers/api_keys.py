from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import get_current_admin
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.models.user import User
from stockroom.schemas.api_key import ApiKeyCreate, ApiKeyCreated, ApiKeyRead
from stockroom.schemas.common import DataResponse, ListResponse
from stockroom.services import api_key_service

router = APIRouter(prefix="/api-keys", tags=["api-keys"])


@router.get("", response_model=ListResponse[ApiKeyRead], dependencies=[Depends(get_current_admin)])
async def list_api_keys(db: AsyncSession = Depends(get_async_db)):
    return {"data": await api_key_service.list_api_keys(db)}


@router.post("", response_model=DataResponse[ApiKeyCreated], status_code=status.HTTP_201_CREATED)
async def create_api_key(
    payload: ApiKeyCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_admin),
):
    api_key, raw_key = await api_key_service.create_api_key(db, payload, created_by=current_user.id)
    await commit_async(db)
    data = {**ApiKeyRead.model_validate(api_key).model_dump(), "key": raw_key}
    return {"message": "Store this key now; it will not be shown again", "data": data}


@router.delete("/{api_key_id}", response_model=DataResponse[ApiKeyRead], dependencies=[Depends(get_current_admin)])
async def deactivate_api_key(
    api_key_id: UUID = Path(...),
    db: AsyncSession = Depends(get_async_db),
):
    api_key = await api_key_service.deactivate_api_key(db, api_key_id)
    await commit_async(db)
    return {"message": "API key deactivated", "data": api_key}
