from __future__ import annotations

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.db.operations import flush_async
from stockroom.models.product import Category
from stockroom.schemas.product import CategoryCreate
from stockroom.services.exceptions import DomainValidationError


async def _name_exists(db: AsyncSession, name: str) -> bool:
    stmt = select(Category.id).where(func.lower(Category.name) == name.strip().lower()).limit(1)
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None


async def list_categories(db: AsyncSession, active: bool | None = None) -> Sequence[Category]:
    stmt = select(Category).order_by(Category.name)
    if active is not None:
        stmt = stmt.where(Category.is_active.is_(active))
    result = await db.execute(stmt)
    return result.scalars().all()


async def create_category(db: AsyncSession, payload: CategoryCreate) -> Category:
    if await _name_exists(db, payload.name):
        raise DomainValidationError("Category name already exists.")
    category = Category(**payload.model_dump(), is_active=True)
    db.add(category)
    await flush_async(db, category)
    return category
