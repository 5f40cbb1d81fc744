from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.logging import get_logger
from stockroom.db.operations import flush_async
from stockroom.domain.enums import OPEN_RENTAL_STATUSES, RentalStatus
from stockroom.models.customer import Customer
from stockroom.models.product import Product
from stockroom.models.rental import Rental, RentalItem
from stockroom.schemas.common import PageParams
from stockroom.schemas.rental import RentalCreate, RentalReturn
from stockroom.services import inventory_service
from stockroom.services.exceptions import DomainValidationError, ResourceNotFoundError

logger = get_logger(__name__)


async def get_rental(db: AsyncSession, rental_id: uuid.UUID, *, for_update: bool = False) -> Rental:
    stmt = select(Rental).where(Rental.id == rental_id)
    if for_update:
        stmt = stmt.with_for_update()
    rental = (await db.execute(stmt)).scalar_one_or_none()
    if rental is None:
        raise ResourceNotFoundError("Rental not found.")
    return rental


async def list_rentals(
    db: AsyncSession,
    params: PageParams,
    *,
    customer_id: uuid.UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    status: RentalStatus | None = None,
) -> tuple[list[Rental], int]:
    stmt = select(Rental)
    if customer_id:
        stmt = stmt.where(Rental.customer_id == customer_id)
    if date_from:
        stmt = stmt.where(Rental.rental_date >= date_from)
    if date_to:
        stmt = stmt.where(Rental.rental_date <= date_to)
    if status:
        stmt = stmt.where(Rental.status == status)

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    rows = await db.execute(
        stmt.order_by(Rental.rental_date.desc(), Rental.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
    )
    return list(rows.scalars().all()), total


async def create_rental(db: AsyncSession, payload: RentalCreate, created_by: uuid.UUID | None = None) -> Rental:
    """Create a rental and reserve stock for each line."""
    if await db.get(Customer, payload.customer_id) is None:
        raise DomainValidationError(f"Customer {payload.customer_id} not found.")

    rental = Rental(
        customer_id=payload.customer_id,
        location_id=payload.location_id,
        rental_date=payload.rental_date,
        expected_return_date=payload.expected_return_date,
        deposit_amount=payload.deposit_amount,
        status=RentalStatus.active,
        notes=payload.notes,
        created_by=created_by,
        items=[],
    )

    total_amount = 0.0
    for line in payload.items:
        product = await db.get(Product, line.product_id)
        if product is None:
            raise DomainValidationError(f"Product {line.product_id} not found.")
        unit_price = line.unit_price if line.unit_price is not None else (product.rental_price or 0.0)
        total_price = round(unit_price * line.quantity, 2)
        rental.items.append(
            RentalItem(
                product_id=product.id,
                quantity=line.quantity,
                unit_price=unit_price,
                total_price=total_price,
                returned_quantity=0,
            )
        )
        total_amount += total_price

    rental.total_amount = round(total_amount, 2)
    db.add(rental)
    await flush_async(db, rental)

    for item in rental.items:
        await inventory_service.reserve_for_rental(
            db,
            rental_id=rental.id,
            product_id=item.product_id,
            quantity=item.quantity,
            location_id=payload.location_id,
            created_by=created_by,
        )

    logger.info(
        "Rental created",
        extra={"rental_id": str(rental.id), "items": len(rental.items), "total_amount": rental.total_amount},
    )
    return rental


async def process_return(
    db: AsyncSession,
    rental_id: uuid.UUID,
    payload: RentalReturn,
    created_by: uuid.UUID | None = None,
) -> Rental:
    """Apply returned quantities; the rental closes once every item is back."""
    rental = await get_rental(db, rental_id, for_update=True)
    if rental.status not in OPEN_RENTAL_STATUSES:
        raise DomainValidationError(f"Rental is {rental.status.value} and cannot receive returns.")

    items_by_id = {item.id: item for item in rental.items}
    for line in payload.items:
        item = items_by_id.get(line.id)
        if item is None:
            raise ResourceNotFoundError(f"Rental item {line.id} not found in this rental.")
        await inventory_service.release_rental_return(
            db,
            rental=rental,
            item=item,
            quantity=line.quantity,
            created_by=created_by,
        )

    if rental.is_fully_returned:
        rental.status = RentalStatus.returned
        rental.return_date = payload.return_date or date.today()

    db.add(rental)
    await flush_async(db, rental)
    logger.info(
        "Rental return processed",
        extra={"rental_id": str(rental.id), "lines": len(payload.items), "status": rental.status.value},
    )
    return rental


async def mark_overdue(db: AsyncSession, today: date | None = None) -> int:
    """Flip active rentals past their expected return date to overdue."""
    today = today or date.today()
    result = await db.execute(
        update(Rental)
        .where(Rental.status == RentalStatus.active, Rental.expected_return_date < today)
        .values(status=RentalStatus.overdue)
        .execution_options(synchronize_session=False)
    )
    logger.info("Overdue rentals flagged", extra={"count": result.rowcount})
    return result.rowcount or 0
