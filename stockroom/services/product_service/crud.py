from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.config import settings
from stockroom.core.logging import get_logger
from stockroom.db.operations import flush_async
from stockroom.models.product import Product
from stockroom.schemas.inventory import StockEntryCreate
from stockroom.schemas.product import ProductCreate, ProductUpdate
from stockroom.services import inventory_service
from stockroom.services.exceptions import DomainValidationError

from .qr import generate_qr_data_url
from .read import get_product
from .utils import normalize_sku, require_category, sku_exists

logger = get_logger(__name__)


async def create_product(
    db: AsyncSession,
    payload: ProductCreate,
    created_by: uuid.UUID | None = None,
) -> Product:
    sku = normalize_sku(payload.sku)
    if await sku_exists(db, sku):
        raise DomainValidationError(f"SKU {sku} is already registered.")
    await require_category(db, payload.category_id)

    data = payload.model_dump(exclude={"initial_stock", "location_id", "sku"})
    product = Product(**data, sku=sku, qr_code=generate_qr_data_url(sku), is_active=True)
    db.add(product)
    await flush_async(db, product)

    if payload.initial_stock:
        await inventory_service.receive_stock(
            db,
            StockEntryCreate(
                product_id=product.id,
                location_id=payload.location_id,
                quantity=payload.initial_stock,
                unit_cost=payload.cost_price,
                notes="Initial stock",
            ),
            created_by,
        )

    logger.info("Product created", extra={"product_id": str(product.id), "sku": sku})
    return product


async def update_product(db: AsyncSession, product_id: uuid.UUID, changes: ProductUpdate) -> Product:
    product = await get_product(db, product_id)
    data = changes.model_dump(exclude_unset=True)

    if "sku" in data and data["sku"] is not None:
        data["sku"] = normalize_sku(data["sku"])
        if data["sku"] != product.sku:
            if await sku_exists(db, data["sku"], exclude_id=product.id):
                raise DomainValidationError(f"SKU {data['sku']} is already used by another product.")
            data["qr_code"] = generate_qr_data_url(data["sku"])
    if data.get("category_id") is not None:
        await require_category(db, data["category_id"])

    for field in ("sku", "name", "category_id", "product_type", "status", "unit", "minimum_stock", "is_active"):
        if field in data and data[field] is None:
            raise DomainValidationError(f"{field} cannot be null.")

    for key, value in data.items():
        setattr(product, key, value)

    db.add(product)
    await flush_async(db, product)
    return product


async def deactivate_product(db: AsyncSession, product_id: uuid.UUID) -> Product:
    """Soft delete: stock history keeps pointing at the product."""
    product = await get_product(db, product_id)
    product.is_active = False
    db.add(product)
    await flush_async(db, product)
    logger.info("Product deactivated", extra={"product_id": str(product.id)})
    return product


async def get_qr_code(db: AsyncSession, product_id: uuid.UUID, size: int | None = None) -> dict:
    """QR code for a product, generated and stored on first request.

    A non-default ``size`` renders a fresh image without replacing the stored one.
    """
    product = await get_product(db, product_id)
    if size is not None and size != settings.QR_CODE_DEFAULT_SIZE:
        qr_code = generate_qr_data_url(product.sku, size=size)
    else:
        if not product.qr_code:
            product.qr_code = generate_qr_data_url(product.sku)
            db.add(product)
            await flush_async(db, product)
        qr_code = product.qr_code
    return {"qr_code": qr_code, "sku": product.sku, "name": product.name}
