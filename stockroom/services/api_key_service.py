from __future__ import annotations

import uuid
from datetime import timezone
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.security import generate_api_key, hash_api_key
from stockroom.db.operations import flush_async
from stockroom.db.types import utcnow
from stockroom.models.company import Company, InventoryLocation
from stockroom.models.inventory import InventoryRecord
from stockroom.models.product import Product
from stockroom.models.user import ApiKey
from stockroom.schemas.api_key import ApiKeyCreate
from stockroom.services.exceptions import AuthenticationError, DomainValidationError, ResourceNotFoundError


async def create_api_key(
    db: AsyncSession,
    payload: ApiKeyCreate,
    created_by: uuid.UUID | None = None,
) -> tuple[ApiKey, str]:
    if payload.company_id is not None and await db.get(Company, payload.company_id) is None:
        raise DomainValidationError(f"Company {payload.company_id} not found.")
    raw_key = generate_api_key()
    api_key = ApiKey(
        name=payload.name,
        key_hash=hash_api_key(raw_key),
        key_prefix=raw_key[:12],
        company_id=payload.company_id,
        expires_at=payload.expires_at,
        created_by=created_by,
        is_active=True,
    )
    db.add(api_key)
    await flush_async(db, api_key)
    return api_key, raw_key


async def list_api_keys(db: AsyncSession) -> Sequence[ApiKey]:
    result = await db.execute(select(ApiKey).order_by(ApiKey.created_at.desc()))
    return result.scalars().all()


async def deactivate_api_key(db: AsyncSession, api_key_id: uuid.UUID) -> ApiKey:
    api_key = await db.get(ApiKey, api_key_id)
    if api_key is None:
        raise ResourceNotFoundError("API key not found.")
    api_key.is_active = False
    db.add(api_key)
    await flush_async(db, api_key)
    return api_key


async def verify_api_key(db: AsyncSession, raw_key: str) -> ApiKey:
    """Resolve an active key and stamp its last use."""
    result = await db.execute(
        select(ApiKey).where(ApiKey.key_hash == hash_api_key(raw_key), ApiKey.is_active.is_(True))
    )
    api_key = result.scalar_one_or_none()
    if api_key is None:
        raise AuthenticationError("Invalid API key")

    now = utcnow()
    if api_key.expires_at is not None:
        expires_at = api_key.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= now:
            raise AuthenticationError("API key expired")

    api_key.last_used_at = now
    db.add(api_key)
    await flush_async(db, api_key)
    return api_key


async def stock_by_sku(db: AsyncSession, sku: str, company_id: uuid.UUID | None = None) -> dict:
    """Stock per location for one SKU, restricted to the key's company when it has one."""
    product = (await db.execute(select(Product).where(Product.sku == sku.strip()))).scalar_one_or_none()
    if product is None or not product.is_active:
        raise ResourceNotFoundError(f"Product with SKU {sku} not found.")

    stmt = (
        select(InventoryRecord, InventoryLocation)
        .join(InventoryLocation, InventoryLocation.id == InventoryRecord.location_id)
        .where(InventoryRecord.product_id == product.id)
        .order_by(InventoryLocation.name)
    )
    if company_id is not None:
        stmt = stmt.where(InventoryLocation.company_id == company_id)
    rows = (await db.execute(stmt)).all()

    locations = [
        {
            "sku": product.sku,
            "product_id": product.id,
            "location_id": location.id,
            "location_name": location.name,
            "quantity": record.quantity,
            "reserved_quantity": record.reserved_quantity,
            "available_quantity": record.available_quantity,
        }
        for record, location in rows
    ]
    return {
        "sku": product.sku,
        "total_quantity": sum(item["quantity"] for item in locations),
        "total_available": sum(item["available_quantity"] for item in locations),
        "locations": locations,
    }

