import pytest
from sqlalchemy import func, select

from scripts import seed_dev_data
from stockroom.domain.enums import MovementType, UserRole
from stockroom.models.inventory import InventoryRecord, StockMovement
from stockroom.models.product import Product
from stockroom.models.user import User


async def _count(session, column) -> int:
    return (await session.execute(select(func.count(column)))).scalar_one()


@pytest.mark.asyncio
async def test_seed_dev_data_populates_and_is_idempotent(async_db_session):
    await seed_dev_data.seed_dev_data()

    assert await _count(async_db_session, User.id) == len(seed_dev_data.DEV_USERS)
    assert await _count(async_db_session, Product.id) == len(seed_dev_data.DEV_PRODUCTS)

    admin = (
        await async_db_session.execute(select(User).where(User.role == UserRole.admin))
    ).scalar_one()
    assert admin.company_id is None
    assert admin.hashed_password != "AdminDev123!"

    totem = (
        await async_db_session.execute(select(Product).where(Product.sku == "TOT-001"))
    ).scalar_one()
    record = (
        await async_db_session.execute(select(InventoryRecord).where(InventoryRecord.product_id == totem.id))
    ).scalar_one()
    assert record.quantity == 6
    entries = (
        await async_db_session.execute(
            select(func.count(StockMovement.id)).where(StockMovement.movement_type == MovementType.entrada)
        )
    ).scalar_one()
    assert entries == len(seed_dev_data.DEV_PRODUCTS)

    await seed_dev_data.seed_dev_data()
    assert await _count(async_db_session, User.id) == len(seed_dev_data.DEV_USERS)
    assert await _count(async_db_session, Product.id) == len(seed_dev_data.DEV_PRODUCTS)
