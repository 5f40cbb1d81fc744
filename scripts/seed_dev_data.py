"""Seed script for a development database: company, users per role, catalog and stock."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import sys
from pathlib import Path

# Ensure project root is on PYTHONPATH when running as a script.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from sqlalchemy import select

from stockroom.core.config import settings
from stockroom.db.session_async import AsyncSessionLocal
from stockroom.domain.enums import ProductStatus, ProductType, UserRole
from stockroom.models.company import Company, InventoryLocation
from stockroom.models.product import Category
from stockroom.schemas.company import CompanyCreate, LocationCreate
from stockroom.schemas.product import CategoryCreate, ProductCreate
from stockroom.schemas.user import UserCreate
from stockroom.services import category_service, company_service, product_service, user_service
from stockroom.services.product_service.utils import sku_exists

logger = logging.getLogger("seed_dev_data")

DEV_COMPANY = CompanyCreate(name="Dev Displays Ltda", cnpj="00000000000191", email="contact@example.com")
DEV_LOCATION_NAME = "Dev warehouse"


@dataclass(frozen=True, slots=True)
class DevUser:
    email: str
    name: str
    password: str
    role: UserRole


DEV_USERS: tuple[DevUser, ...] = (
    DevUser("admin.dev@example.com", "Dev Admin", "AdminDev123!", UserRole.admin),
    DevUser("manager.dev@example.com", "Dev Manager", "ManagerDev123!", UserRole.manager),
    DevUser("operator.dev@example.com", "Dev Operator", "OperatorDev123!", UserRole.operator),
    DevUser("viewer.dev@example.com", "Dev Viewer", "ViewerDev123!", UserRole.viewer),
)


@dataclass(frozen=True, slots=True)
class DevProduct:
    sku: str
    name: str
    product_type: ProductType
    sale_price: float
    rental_price: float | None
    minimum_stock: int
    initial_stock: int


DEV_PRODUCTS: tuple[DevProduct, ...] = (
    DevProduct("TOT-001", "Totem 55in touch", ProductType.totem, 8900.0, 450.0, 2, 6),
    DevProduct("TAB-001", "Tablet 10in kiosk", ProductType.tablet, 1500.0, 90.0, 5, 12),
    DevProduct("WOB-001", "Shelf wobbler", ProductType.wobbler, 3.5, None, 200, 150),
    DevProduct("ADS-001", "Vinyl sticker A3", ProductType.adesivo, 12.0, None, 50, 80),
)


async def _company_and_location(session) -> tuple[Company, InventoryLocation]:
    company = (
        await session.execute(select(Company).where(Company.cnpj == DEV_COMPANY.cnpj))
    ).scalar_one_or_none()
    if company is None:
        company = await company_service.create_company(session, DEV_COMPANY)
        logger.info("Created company %s", company.name)

    location = (
        await session.execute(
            select(InventoryLocation).where(
                InventoryLocation.company_id == company.id,
                InventoryLocation.name == DEV_LOCATION_NAME,
            )
        )
    ).scalar_one_or_none()
    if location is None:
        location = await company_service.create_location(
            session, LocationCreate(name=DEV_LOCATION_NAME), company.id
        )
        logger.info("Created location %s", location.name)
    return company, location


async def _category_for(session, product_type: ProductType) -> Category:
    name = product_type.value.replace("_", " ").title()
    category = (await session.execute(select(Category).where(Category.name == name))).scalar_one_or_none()
    if category is None:
        category = await category_service.create_category(
            session, CategoryCreate(name=name, product_type=product_type)
        )
    return category


async def seed_dev_data() -> None:
    """Insert development rows that are missing; existing rows are left alone."""
    logger.info("Seeding development data into %s", settings.ASYNC_DATABASE_URL)
    created = 0
    skipped = 0

    async with AsyncSessionLocal() as session:
        company, location = await _company_and_location(session)

        for dev_user in DEV_USERS:
            if await user_service.get_by_email(session, dev_user.email):
                skipped += 1
                logger.debug("Skipped user %s (already exists)", dev_user.email)
                continue
            await user_service.create_user(
                session,
                UserCreate(
                    email=dev_user.email,
                    name=dev_user.name,
                    password=dev_user.password,
                    company_id=None if dev_user.role is UserRole.admin else company.id,
                ),
                role=dev_user.role,
            )
            created += 1

        for dev_product in DEV_PRODUCTS:
            if await sku_exists(session, dev_product.sku):
                skipped += 1
                logger.debug("Skipped product %s (already exists)", dev_product.sku)
                continue
            category = await _category_for(session, dev_product.product_type)
            await product_service.create_product(
                session,
                ProductCreate(
                    sku=dev_product.sku,
                    name=dev_product.name,
                    category_id=category.id,
                    product_type=dev_product.product_type,
                    status=ProductStatus.novo,
                    sale_price=dev_product.sale_price,
                    rental_price=dev_product.rental_price,
                    cost_price=round(dev_product.sale_price * 0.6, 2),
                    minimum_stock=dev_product.minimum_stock,
                    initial_stock=dev_product.initial_stock,
                    location_id=location.id,
                ),
            )
            created += 1

        await session.commit()

    logger.info("Seed completed: %s created, %s skipped", created, skipped)


async def main() -> None:
    await seed_dev_data()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
