from __future__ import annotations

import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from stockroom.domain.enums import ProductStatus, ProductType
from stockroom.models.inventory import InventoryRecord
from stockroom.models.product import Product
from stockroom.schemas.common import PageParams
from stockroom.services import inventory_service
from stockroom.services.exceptions import ResourceNotFoundError


async def list_products(
    db: AsyncSession,
    params: PageParams,
    *,
    search: str | None = None,
    category_id: uuid.UUID | None = None,
    status: ProductStatus | None = None,
    product_type: ProductType | None = None,
    location_id: uuid.UUID | None = None,
    include_inactive: bool = False,
) -> tuple[list[Product], int]:
    stmt = select(Product)
    if not include_inactive:
        stmt = stmt.where(Product.is_active.is_(True))
    if search:
        like = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(Product.name.ilike(like), Product.sku.ilike(like), Product.description.ilike(like))
        )
    if category_id:
        stmt = stmt.where(Product.category_id == category_id)
    if status:
        stmt = stmt.where(Product.status == status)
    if product_type:
        stmt = stmt.where(Product.product_type == product_type)
    if location_id:
        stocked_here = select(InventoryRecord.product_id).where(InventoryRecord.location_id == location_id)
        stmt = stmt.where(Product.id.in_(stocked_here))

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    rows = await db.execute(
        stmt.order_by(Product.name, Product.id).offset(params.offset).limit(params.limit)
    )
    return list(rows.scalars().all()), total


async def get_product(db: AsyncSession, product_id: uuid.UUID) -> Product:
    product = await db.get(Product, product_id)
    if product is None:
        raise ResourceNotFoundError("Product not found.")
    return product


async def get_product_detail(db: AsyncSession, product_id: uuid.UUID) -> dict:
    """Product with its category, stock per location and latest movements."""
    result = await db.execute(
        select(Product).options(joinedload(Product.category)).where(Product.id == product_id)
    )
    product = result.scalar_one_or_none()
    if product is None:
        raise ResourceNotFoundError("Product not found.")

    records = await db.execute(
        select(InventoryRecord).where(InventoryRecord.product_id == product_id).order_by(InventoryRecord.created_at)
    )
    movements = await inventory_service.movements_for_product(db, product_id)
    return {
        **{column.key: getattr(product, column.key) for column in Product.__table__.columns},
        "category": product.category,
        "inventory": list(records.scalars().all()),
        "movements": movements,
    }


async def low_stock_report(db: AsyncSession) -> list[dict]:
    """Inventory records whose available quantity dropped below the product minimum."""
    rows = await db.execute(
        select(InventoryRecord, Product)
        .join(Product, Product.id == InventoryRecord.product_id)
        .where(Product.is_active.is_(True))
        .where(InventoryRecord.available_quantity < Product.minimum_stock)
        .order_by(InventoryRecord.available_quantity - Product.minimum_stock, Product.name)
    )
    return [
        {
            "product_id": product.id,
            "sku": product.sku,
            "name": product.name,
            "minimum_stock": product.minimum_stock,
            "location_id": record.location_id,
            "quantity": record.quantity,
            "reserved_quantity": record.reserved_quantity,
            "available_quantity": record.available_quantity,
        }
        for record, product in rows.all()
    ]
