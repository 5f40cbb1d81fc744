from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.models.product import Category, Product
from stockroom.services.exceptions import DomainValidationError


def normalize_sku(sku: str) -> str:
    return sku.strip()


async def sku_exists(db: AsyncSession, sku: str, *, exclude_id: uuid.UUID | None = None) -> bool:
    stmt = select(Product.id).where(Product.sku == normalize_sku(sku))
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None


async def require_category(db: AsyncSession, category_id: uuid.UUID) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise DomainValidationError(f"Category {category_id} not found.")
    return category
