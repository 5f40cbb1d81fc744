"""Resource-ownership checks used by the authorization dependencies."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.domain.enums import ResourceType, UserRole
from stockroom.models.company import InventoryLocation
from stockroom.models.inventory import InventoryRecord
from stockroom.models.product import Product
from stockroom.models.rental import Rental
from stockroom.models.sale import Sale
from stockroom.models.user import User

_EXISTENCE_ONLY = {
    ResourceType.product: Product,
    ResourceType.sale: Sale,
    ResourceType.rental: Rental,
}


async def _inventory_company(db: AsyncSession, inventory_id: uuid.UUID) -> uuid.UUID | None:
    result = await db.execute(
        select(InventoryLocation.company_id)
        .join(InventoryRecord, InventoryRecord.location_id == InventoryLocation.id)
        .where(InventoryRecord.id == inventory_id)
    )
    return result.scalar_one_or_none()


async def can_access(
    db: AsyncSession,
    user: User,
    resource_type: ResourceType,
    resource_id: uuid.UUID | str | None,
) -> bool:
    """True when ``user`` may act on the resource.

    Inventory is scoped to the caller's company through its location. Products,
    sales and rentals only need to exist.
    """
    if user.role is UserRole.admin:
        return True
    try:
        resource_uuid = resource_id if isinstance(resource_id, uuid.UUID) else uuid.UUID(str(resource_id))
    except ValueError:
        return False

    if resource_type is ResourceType.inventory:
        company_id = await _inventory_company(db, resource_uuid)
        return company_id is not None and user.company_id is not None and company_id == user.company_id

    model = _EXISTENCE_ONLY[resource_type]
    result = await db.execute(select(model.id).where(model.id == resource_uuid))
    return result.scalar_one_or_none() is not None
