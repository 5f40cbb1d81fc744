from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import validate_api_key
from stockroom.db.session_async import get_async_db
from stockroom.models.user import ApiKey
from stockroom.schemas.api_key import StockLookupRead
from stockroom.schemas.common import DataResponse
from stockroom.services import api_key_service

router = APIRouter(prefix="/integrations", tags=["integrations"])


@router.get("/stock", response_model=DataResponse[StockLookupRead])
async def stock_lookup(
    sku: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_async_db),
    api_key: ApiKey = Depends(validate_api_key),
):
    return {"data": await api_key_service.stock_by_sku(db, sku, company_id=api_key.company_id)}
