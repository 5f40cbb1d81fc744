from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.logging import get_logger
from stockroom.db.operations import flush_async
from stockroom.domain.enums import PaymentStatus
from stockroom.models.customer import Customer
from stockroom.models.product import Product
from stockroom.models.sale import Sale, SaleItem
from stockroom.schemas.common import PageParams
from stockroom.schemas.sale import SaleCreate
from stockroom.services import inventory_service
from stockroom.services.exceptions import DomainValidationError, ResourceNotFoundError

logger = get_logger(__name__)


async def get_sale(db: AsyncSession, sale_id: uuid.UUID) -> Sale:
    sale = await db.get(Sale, sale_id)
    if sale is None:
        raise ResourceNotFoundError("Sale not found.")
    return sale


async def list_sales(
    db: AsyncSession,
    params: PageParams,
    *,
    customer_id: uuid.UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    status: PaymentStatus | None = None,
) -> tuple[list[Sale], int]:
    stmt = select(Sale)
    if customer_id:
        stmt = stmt.where(Sale.customer_id == customer_id)
    if date_from:
        stmt = stmt.where(Sale.sale_date >= date_from)
    if date_to:
        stmt = stmt.where(Sale.sale_date <= date_to)
    if status:
        stmt = stmt.where(Sale.payment_status == status)

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    rows = await db.execute(
        stmt.order_by(Sale.sale_date.desc(), Sale.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
    )
    return list(rows.scalars().all()), total


async def create_sale(db: AsyncSession, payload: SaleCreate, created_by: uuid.UUID | None = None) -> Sale:
    """Create a sale and take every line out of stock.

    Runs inside the caller's transaction: any failed line aborts the whole sale.
    """
    if await db.get(Customer, payload.customer_id) is None:
        raise DomainValidationError(f"Customer {payload.customer_id} not found.")

    sale = Sale(
        customer_id=payload.customer_id,
        location_id=payload.location_id,
        sale_date=payload.sale_date,
        discount_amount=payload.discount_amount,
        payment_method=payload.payment_method,
        payment_status=payload.payment_status,
        notes=payload.notes,
        created_by=created_by,
        items=[],
    )

    total_amount = 0.0
    for line in payload.items:
        product = await db.get(Product, line.product_id)
        if product is None:
            raise DomainValidationError(f"Product {line.product_id} not found.")
        unit_price = line.unit_price if line.unit_price is not None else (product.sale_price or 0.0)
        total_price = round(unit_price * line.quantity, 2)
        sale.items.append(
            SaleItem(
                product_id=product.id,
                quantity=line.quantity,
                unit_price=unit_price,
                total_price=total_price,
                discount=line.discount,
            )
        )
        total_amount += total_price

    sale.total_amount = round(total_amount, 2)
    db.add(sale)
    await flush_async(db, sale)

    for item in sale.items:
        await inventory_service.commit_sale_line(
            db,
            sale_id=sale.id,
            product_id=item.product_id,
            quantity=item.quantity,
            location_id=payload.location_id,
            created_by=created_by,
        )

    logger.info(
        "Sale created",
        extra={"sale_id": str(sale.id), "items": len(sale.items), "total_amount": sale.total_amount},
    )
    return sale
