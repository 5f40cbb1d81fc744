from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.db.operations import flush_async
from stockroom.domain.enums import SupplierCategory
from stockroom.models.supplier import Supplier
from stockroom.schemas.common import PageParams
from stockroom.schemas.supplier import SupplierCreate


async def list_suppliers(
    db: AsyncSession,
    params: PageParams,
    *,
    search: str | None = None,
    category: SupplierCategory | None = None,
    active: bool | None = None,
) -> tuple[list[Supplier], int]:
    stmt = select(Supplier)
    if search:
        like = f"%{search.strip()}%"
        stmt = stmt.where(or_(Supplier.name.ilike(like), Supplier.contact_person.ilike(like)))
    if category:
        stmt = stmt.where(Supplier.category == category)
    if active is not None:
        stmt = stmt.where(Supplier.is_active.is_(active))

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    rows = await db.execute(stmt.order_by(Supplier.name, Supplier.id).offset(params.offset).limit(params.limit))
    return list(rows.scalars().all()), total


async def create_supplier(db: AsyncSession, payload: SupplierCreate) -> Supplier:
    supplier = Supplier(**payload.model_dump(), is_active=True)
    db.add(supplier)
    await flush_async(db, supplier)
    return supplier
