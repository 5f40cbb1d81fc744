"""Inventory reconciliation.

Every function here keeps ``quantity``/``reserved_quantity`` in step with an
appended :class:`StockMovement` row. Nothing is committed: callers own the
transaction, so a failure at any step leaves the database untouched.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from stockroom.core.logging import get_logger
from stockroom.core.metrics import record_stock_movement
from stockroom.db.operations import flush_async
from stockroom.db.types import utcnow
from stockroom.domain.enums import OUTBOUND_MOVEMENT_TYPES, MovementReference, MovementType
from stockroom.models.company import InventoryLocation
from stockroom.models.inventory import InventoryRecord, StockMovement
from stockroom.models.product import Product
from stockroom.models.rental import Rental, RentalItem
from stockroom.schemas.common import PageParams
from stockroom.schemas.inventory import InventoryAdjust, InventoryCreate, MovementCreate, StockEntryCreate
from stockroom.services.exceptions import (
    DomainValidationError,
    InsufficientStockError,
    InvalidQuantityError,
    ResourceNotFoundError,
    ReturnQuantityExceededError,
)

logger = get_logger(__name__)


# --- Lookups ---

async def _require_product(db: AsyncSession, product_id: uuid.UUID) -> Product:
    product = await db.get(Product, product_id)
    if product is None:
        raise ResourceNotFoundError(f"Product {product_id} not found.")
    return product


async def _require_location(db: AsyncSession, location_id: uuid.UUID) -> InventoryLocation:
    location = await db.get(InventoryLocation, location_id)
    if location is None:
        raise ResourceNotFoundError(f"Location {location_id} not found.")
    return location


async def get_inventory(
    db: AsyncSession,
    inventory_id: uuid.UUID,
    *,
    for_update: bool = False,
    with_relations: bool = False,
) -> InventoryRecord:
    stmt = select(InventoryRecord).where(InventoryRecord.id == inventory_id)
    if with_relations:
        stmt = stmt.options(joinedload(InventoryRecord.product), joinedload(InventoryRecord.location))
    if for_update:
        stmt = stmt.with_for_update()
    record = (await db.execute(stmt)).scalar_one_or_none()
    if record is None:
        raise ResourceNotFoundError("Inventory record not found.")
    return record


async def find_inventory(
    db: AsyncSession,
    product_id: uuid.UUID,
    location_id: uuid.UUID,
    *,
    for_update: bool = True,
) -> InventoryRecord | None:
    stmt = select(InventoryRecord).where(
        InventoryRecord.product_id == product_id,
        InventoryRecord.location_id == location_id,
    )
    if for_update:
        stmt = stmt.with_for_update()
    return (await db.execute(stmt)).scalar_one_or_none()


async def resolve_inventory_for_product(
    db: AsyncSession,
    product_id: uuid.UUID,
    location_id: uuid.UUID | None = None,
) -> InventoryRecord:
    """Inventory record used by sale and rental lines.

    With a location the exact pair is used. Without one, the oldest record for
    the product wins so the choice is stable across requests.
    """
    stmt = select(InventoryRecord).where(InventoryRecord.product_id == product_id)
    if location_id is not None:
        stmt = stmt.where(InventoryRecord.location_id == location_id)
    stmt = stmt.order_by(InventoryRecord.created_at, InventoryRecord.id).limit(1).with_for_update()
    record = (await db.execute(stmt)).scalar_one_or_none()
    if record is None:
        where = f" at location {location_id}" if location_id else ""
        raise DomainValidationError(f"No inventory record for product {product_id}{where}.")
    return record


# --- Movement log ---

async def _log_movement(
    db: AsyncSession,
    record: InventoryRecord,
    movement_type: MovementType,
    quantity: int,
    *,
    created_by: uuid.UUID | None = None,
    unit_cost: float | None = None,
    reference_id: uuid.UUID | None = None,
    reference_type: MovementReference | None = None,
    notes: str | None = None,
) -> StockMovement:
    movement = StockMovement(
        product_id=record.product_id,
        location_id=record.location_id,
        movement_type=movement_type,
        quantity=int(quantity),
        unit_cost=unit_cost,
        total_cost=round(unit_cost * quantity, 2) if unit_cost is not None else None,
        reference_id=reference_id,
        reference_type=reference_type,
        notes=notes,
        created_by=created_by,
    )
    record.last_movement_at = utcnow()
    db.add(record)
    db.add(movement)
    await flush_async(db, record, movement)
    record_stock_movement(movement_type.value)
    return movement


# --- Operations ---

async def receive_stock(
    db: AsyncSession,
    payload: StockEntryCreate,
    created_by: uuid.UUID | None = None,
) -> tuple[InventoryRecord, StockMovement]:
    """Add stock at a location, creating the inventory record on first entry."""
    if payload.quantity <= 0:
        raise InvalidQuantityError("Quantity must be greater than 0.")
    await _require_product(db, payload.product_id)
    await _require_location(db, payload.location_id)

    record = await find_inventory(db, payload.product_id, payload.location_id)
    if record is None:
        record = InventoryRecord(
            product_id=payload.product_id,
            location_id=payload.location_id,
            quantity=0,
            reserved_quantity=0,
        )
    record.quantity += payload.quantity

    movement = await _log_movement(
        db,
        record,
        MovementType.entrada,
        payload.quantity,
        created_by=created_by,
        unit_cost=payload.unit_cost,
        notes=payload.notes,
    )
    logger.info(
        "Stock entry recorded",
        extra={
            "product_id": str(record.product_id),
            "location_id": str(record.location_id),
            "quantity": payload.quantity,
        },
    )
    return record, movement


async def register_inventory(
    db: AsyncSession,
    payload: InventoryCreate,
    created_by: uuid.UUID | None = None,
) -> InventoryRecord:
    """Create the record for a (product, location) pair that has none yet."""
    await _require_product(db, payload.product_id)
    await _require_location(db, payload.location_id)
    if await find_inventory(db, payload.product_id, payload.location_id) is not None:
        raise DomainValidationError("An inventory record already exists for this product and location.")

    if payload.quantity > 0:
        record, _ = await receive_stock(
            db,
            StockEntryCreate(
                product_id=payload.product_id,
                location_id=payload.location_id,
                quantity=payload.quantity,
                unit_cost=payload.unit_cost,
                notes=payload.notes,
            ),
            created_by,
        )
        return record

    record = InventoryRecord(
        product_id=payload.product_id,
        location_id=payload.location_id,
        quantity=0,
        reserved_quantity=0,
    )
    db.add(record)
    await flush_async(db, record)
    return record


async def adjust_inventory(
    db: AsyncSession,
    inventory_id: uuid.UUID,
    payload: InventoryAdjust,
    created_by: uuid.UUID | None = None,
) -> tuple[InventoryRecord, StockMovement | None]:
    """Overwrite counts after a physical count; the delta is logged as entrada/saida."""
    record = await get_inventory(db, inventory_id, for_update=True)
    delta = payload.quantity - record.quantity

    record.quantity = payload.quantity
    if payload.reserved_quantity is not None:
        record.reserved_quantity = payload.reserved_quantity

    if delta == 0:
        db.add(record)
        await flush_async(db, record)
        return record, None

    movement = await _log_movement(
        db,
        record,
        MovementType.entrada if delta > 0 else MovementType.saida,
        abs(delta),
        created_by=created_by,
        notes=payload.notes or "Manual adjustment",
    )
    return record, movement


async def commit_sale_line(
    db: AsyncSession,
    *,
    sale_id: uuid.UUID,
    product_id: uuid.UUID,
    quantity: int,
    location_id: uuid.UUID | None = None,
    created_by: uuid.UUID | None = None,
) -> StockMovement:
    # Sales are not blocked on stock; the resulting quantity may go negative.
    record = await resolve_inventory_for_product(db, product_id, location_id)
    record.quantity -= quantity
    return await _log_movement(
        db,
        record,
        MovementType.venda,
        quantity,
        created_by=created_by,
        reference_id=sale_id,
        reference_type=MovementReference.sale,
        notes=f"Sale {sale_id}",
    )


async def reserve_for_rental(
    db: AsyncSession,
    *,
    rental_id: uuid.UUID,
    product_id: uuid.UUID,
    quantity: int,
    location_id: uuid.UUID | None = None,
    created_by: uuid.UUID | None = None,
) -> StockMovement:
    record = await resolve_inventory_for_product(db, product_id, location_id)
    record.reserved_quantity += quantity
    return await _log_movement(
        db,
        record,
        MovementType.locacao,
        quantity,
        created_by=created_by,
        reference_id=rental_id,
        reference_type=MovementReference.rental,
        notes=f"Rental {rental_id}",
    )


async def release_rental_return(
    db: AsyncSession,
    *,
    rental: Rental,
    item: RentalItem,
    quantity: int,
    created_by: uuid.UUID | None = None,
) -> StockMovement:
    """Give back reserved stock for part or all of a rental item.

    On-hand quantity is untouched: the rental only ever reserved it.
    """
    if quantity <= 0:
        raise InvalidQuantityError("Returned quantity must be greater than 0.")
    if item.returned_quantity + quantity > item.quantity:
        raise ReturnQuantityExceededError(
            f"Cannot return {quantity} unit(s) of item {item.id}: "
            f"only {item.outstanding_quantity} outstanding."
        )

    record = await resolve_inventory_for_product(db, item.product_id, rental.location_id)
    item.returned_quantity += quantity
    record.reserved_quantity -= quantity
    db.add(item)
    return await _log_movement(
        db,
        record,
        MovementType.devolucao,
        quantity,
        created_by=created_by,
        reference_id=rental.id,
        reference_type=MovementReference.rental,
        notes=f"Rental return {rental.id}",
    )


async def record_movement(
    db: AsyncSession,
    payload: MovementCreate,
    created_by: uuid.UUID | None = None,
) -> StockMovement:
    """Record a manual movement; entrada adds, every other type subtracts."""
    if payload.quantity <= 0:
        raise InvalidQuantityError("Quantity must be greater than 0.")

    if payload.movement_type is MovementType.entrada:
        _, movement = await receive_stock(
            db,
            StockEntryCreate(
                product_id=payload.product_id,
                location_id=payload.location_id,
                quantity=payload.quantity,
                unit_cost=payload.unit_cost,
                notes=payload.notes,
            ),
            created_by,
        )
        return movement

    record = await find_inventory(db, payload.product_id, payload.location_id)
    if payload.movement_type in OUTBOUND_MOVEMENT_TYPES:
        current = record.quantity if record is not None else 0
        if current < payload.quantity:
            raise InsufficientStockError(
                f"Insufficient stock: {current} on hand, {payload.quantity} requested."
            )
    if record is None:
        raise DomainValidationError("No inventory record for this product and location.")

    record.quantity -= payload.quantity
    return await _log_movement(
        db,
        record,
        payload.movement_type,
        payload.quantity,
        created_by=created_by,
        unit_cost=payload.unit_cost,
        notes=payload.notes,
    )


# --- Queries ---

def _day_start(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


async def list_inventory(
    db: AsyncSession,
    params: PageParams,
    *,
    location_id: uuid.UUID | None = None,
    product_id: uuid.UUID | None = None,
    low_stock: bool = False,
) -> tuple[list[InventoryRecord], int]:
    stmt = select(InventoryRecord).join(Product, Product.id == InventoryRecord.product_id)
    if location_id:
        stmt = stmt.where(InventoryRecord.location_id == location_id)
    if product_id:
        stmt = stmt.where(InventoryRecord.product_id == product_id)
    if low_stock:
        stmt = stmt.where(InventoryRecord.available_quantity < Product.minimum_stock)

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    rows = await db.execute(
        stmt.options(joinedload(InventoryRecord.product), joinedload(InventoryRecord.location))
        .order_by(Product.name, InventoryRecord.id)
        .offset(params.offset)
        .limit(params.limit)
    )
    return list(rows.scalars().unique().all()), total


async def list_movements(
    db: AsyncSession,
    params: PageParams,
    *,
    product_id: uuid.UUID | None = None,
    location_id: uuid.UUID | None = None,
    movement_type: MovementType | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> tuple[list[StockMovement], int]:
    if date_from and date_to and date_from > date_to:
        raise DomainValidationError("dateFrom must not be after dateTo.")

    stmt = select(StockMovement)
    if product_id:
        stmt = stmt.where(StockMovement.product_id == product_id)
    if location_id:
        stmt = stmt.where(StockMovement.location_id == location_id)
    if movement_type:
        stmt = stmt.where(StockMovement.movement_type == movement_type)
    if date_from:
        stmt = stmt.where(StockMovement.created_at >= _day_start(date_from))
    if date_to:
        stmt = stmt.where(StockMovement.created_at < _day_start(date_to + timedelta(days=1)))

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    rows = await db.execute(
        stmt.order_by(StockMovement.created_at.desc(), StockMovement.id)
        .offset(params.offset)
        .limit(params.limit)
    )
    return list(rows.scalars().all()), total


async def movements_for_product(db: AsyncSession, product_id: uuid.UUID, limit: int = 50) -> list[StockMovement]:
    rows = await db.execute(
        select(StockMovement)
        .where(StockMovement.product_id == product_id)
        .order_by(StockMovement.created_at.desc())
        .limit(limit)
    )
    return list(rows.scalars().all())
