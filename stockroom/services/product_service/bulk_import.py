from __future__ import annotations

import uuid
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.config import settings
from stockroom.core.logging import get_logger
from stockroom.models.product import Category, Product
from stockroom.schemas.product import BulkImportError, BulkImportResult, ProductCreate
from stockroom.services.exceptions import DomainValidationError

from .crud import create_product
from .utils import normalize_sku

logger = get_logger(__name__)


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))


def _raw_sku(row: dict[str, Any]) -> str | None:
    value = row.get("sku")
    return str(value) if value is not None else None


async def _existing_skus(db: AsyncSession, skus: list[str]) -> set[str]:
    if not skus:
        return set()
    result = await db.execute(select(Product.sku).where(Product.sku.in_(skus)))
    return set(result.scalars().all())


async def _existing_categories(db: AsyncSession, ids: set[uuid.UUID]) -> set[uuid.UUID]:
    if not ids:
        return set()
    result = await db.execute(select(Category.id).where(Category.id.in_(ids)))
    return set(result.scalars().all())


async def bulk_import_products(
    db: AsyncSession,
    rows: list[dict[str, Any]],
    created_by: uuid.UUID | None = None,
) -> BulkImportResult:
    """Create products from raw rows in batches.

    Invalid rows are reported in ``errors_details``; SKUs that already exist
    (in the database or earlier in the same file) are skipped with a warning.
    """
    if not rows:
        raise DomainValidationError("No products to import.")
    if len(rows) > settings.BULK_IMPORT_MAX_ITEMS:
        raise DomainValidationError(
            f"At most {settings.BULK_IMPORT_MAX_ITEMS} products can be imported at once."
        )

    result = BulkImportResult()
    seen: set[str] = set()
    batch_size = settings.BULK_IMPORT_BATCH_SIZE

    for start in range(0, len(rows), batch_size):
        batch = list(enumerate(rows[start:start + batch_size], start=start + 1))

        parsed: list[tuple[int, ProductCreate]] = []
        for row_number, row in batch:
            try:
                parsed.append((row_number, ProductCreate.model_validate(row)))
            except ValidationError as exc:
                result.errors += 1
                result.errors_details.append(
                    BulkImportError(row=row_number, sku=_raw_sku(row), error=_first_error(exc))
                )

        existing = await _existing_skus(db, [normalize_sku(item.sku) for _, item in parsed])
        categories = await _existing_categories(db, {item.category_id for _, item in parsed})

        for row_number, item in parsed:
            sku = normalize_sku(item.sku)
            if sku in existing or sku in seen:
                result.warnings += 1
                result.warnings_details.append(BulkImportError(row=row_number, sku=sku, error="SKU already exists; skipped."))
                continue
            if item.category_id not in categories:
                result.errors += 1
                result.errors_details.append(
                    BulkImportError(row=row_number, sku=sku, error=f"Category {item.category_id} not found.")
                )
                continue
            if item.initial_stock:
                result.errors += 1
                result.errors_details.append(
                    BulkImportError(row=row_number, sku=sku, error="initial_stock is not supported in bulk import.")
                )
                continue

            await create_product(db, item, created_by)
            seen.add(sku)
            result.success += 1

    logger.info(
        "Bulk import finished",
        extra={"success": result.success, "errors": result.errors, "warnings": result.warnings},
    )
    return result
