from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.config import settings
from stockroom.domain.enums import PaymentStatus, RentalStatus
from stockroom.models.inventory import InventoryRecord
from stockroom.models.product import Product
from stockroom.models.rental import Rental
from stockroom.models.sale import Sale
from stockroom.services.exceptions import DomainValidationError


def _period_start(period_days: int | None, today: date | None = None) -> tuple[int, date]:
    days = period_days or settings.REPORTS_DEFAULT_PERIOD_DAYS
    if days <= 0:
        raise DomainValidationError("period must be a positive number of days.")
    return days, (today or date.today()) - timedelta(days=days)


async def _period_sales(db: AsyncSession, since: date) -> tuple[float, int]:
    row = (
        await db.execute(
            select(func.coalesce(func.sum(Sale.total_amount), 0), func.count(Sale.id))
            .where(Sale.sale_date >= since)
            .where(Sale.payment_status != PaymentStatus.cancelled)
        )
    ).one()
    return float(row[0] or 0), int(row[1] or 0)


async def _count_rentals(db: AsyncSession, status: RentalStatus) -> int:
    return (await db.execute(select(func.count(Rental.id)).where(Rental.status == status))).scalar_one()


async def _active_product_count(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(Product.id)).where(Product.is_active.is_(True)))).scalar_one()


async def dashboard(db: AsyncSession, period_days: int | None = None) -> dict:
    days, since = _period_start(period_days)

    inventory_value = (
        await db.execute(
            select(func.coalesce(func.sum(InventoryRecord.quantity * func.coalesce(Product.cost_price, 0)), 0))
            .join(Product, Product.id == InventoryRecord.product_id)
            .where(Product.is_active.is_(True))
        )
    ).scalar_one()

    low_stock = (
        await db.execute(
            select(func.count(distinct(Product.id)))
            .join(InventoryRecord, InventoryRecord.product_id == Product.id)
            .where(Product.is_active.is_(True))
            .where(InventoryRecord.available_quantity < Product.minimum_stock)
        )
    ).scalar_one()

    sales_total, sales_count = await _period_sales(db, since)
    return {
        "period_days": days,
        "total_products": await _active_product_count(db),
        "total_inventory_value": round(float(inventory_value or 0), 2),
        "low_stock_count": int(low_stock or 0),
        "period_sales": {"total": round(sales_total, 2), "count": sales_count},
        "active_rentals": await _count_rentals(db, RentalStatus.active),
    }


async def kpis(db: AsyncSession, period_days: int | None = None) -> dict:
    days, since = _period_start(period_days)

    stock_row = (
        await db.execute(
            select(
                func.coalesce(func.sum(InventoryRecord.quantity), 0),
                func.coalesce(func.sum(InventoryRecord.reserved_quantity), 0),
            )
        )
    ).one()
    total_stock, total_reserved = int(stock_row[0] or 0), int(stock_row[1] or 0)
    sales_total, sales_count = await _period_sales(db, since)

    return {
        "period_days": days,
        "inventory": {
            "total_products": await _active_product_count(db),
            "total_stock": total_stock,
            "total_reserved": total_reserved,
            "available_stock": total_stock - total_reserved,
        },
        "sales": {"total_sales": round(sales_total, 2), "sales_count": sales_count},
        "rentals": {
            "active_rentals": await _count_rentals(db, RentalStatus.active),
            "overdue_rentals": await _count_rentals(db, RentalStatus.overdue),
        },
    }
