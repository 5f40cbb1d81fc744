# stockroom/schemas/product.py
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stockroom.domain.enums import ProductStatus, ProductType
from stockroom.schemas.inventory import InventoryRead, MovementRead


# --- Category ---
class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None
    product_type: ProductType


class CategoryRead(CategoryCreate):
    id: UUID
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


# --- Product ---
class ProductBase(BaseModel):
    sku: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    category_id: UUID
    product_type: ProductType
    status: ProductStatus
    barcode: str | None = Field(default=None, max_length=64)
    serial_number: str | None = Field(default=None, max_length=120)
    unit: str = Field(default="unidade", max_length=30)
    cost_price: float | None = Field(default=None, ge=0)
    sale_price: float | None = Field(default=None, ge=0)
    rental_price: float | None = Field(default=None, ge=0)
    minimum_stock: int = Field(default=0, ge=0)
    maximum_stock: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    dimensions: dict[str, Any] | None = None
    specifications: dict[str, Any] | None = None
    images: list[str] | None = None


class ProductCreate(ProductBase):
    initial_stock: int | None = Field(default=None, gt=0)
    location_id: UUID | None = None

    @model_validator(mode="after")
    def _initial_stock_needs_location(self) -> "ProductCreate":
        if self.initial_stock and self.location_id is None:
            raise ValueError("location_id is required when initial_stock is given")
        return self


class ProductUpdate(BaseModel):
    # qr_code is derived from the SKU and cannot be written directly.
    model_config = ConfigDict(extra="ignore")

    sku: str | None = Field(default=None, min_length=1, max_length=64)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category_id: UUID | None = None
    product_type: ProductType | None = None
    status: ProductStatus | None = None
    barcode: str | None = Field(default=None, max_length=64)
    serial_number: str | None = Field(default=None, max_length=120)
    unit: str | None = Field(default=None, max_length=30)
    cost_price: float | None = Field(default=None, ge=0)
    sale_price: float | None = Field(default=None, ge=0)
    rental_price: float | None = Field(default=None, ge=0)
    minimum_stock: int | None = Field(default=None, ge=0)
    maximum_stock: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    dimensions: dict[str, Any] | None = None
    specifications: dict[str, Any] | None = None
    images: list[str] | None = None
    is_active: bool | None = None


class ProductRead(ProductBase):
    id: UUID
    qr_code: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ProductDetail(ProductRead):
    category: CategoryRead | None = None
    inventory: list[InventoryRead] = Field(default_factory=list)
    movements: list[MovementRead] = Field(default_factory=list)


class QRCodeRead(BaseModel):
    qr_code: str
    sku: str
    name: str


class LowStockRead(BaseModel):
    product_id: UUID
    sku: str
    name: str
    minimum_stock: int
    location_id: UUID
    quantity: int
    reserved_quantity: int
    available_quantity: int


# --- Bulk import ---
class BulkImportRequest(BaseModel):
    products: list[dict[str, Any]]


class BulkImportError(BaseModel):
    row: int
    sku: str | None = None
    error: str


class BulkImportResult(BaseModel):
    success: int = 0
    errors: int = 0
    warnings: int = 0
    errors_details: list[BulkImportError] = Field(default_factory=list)
    warnings_details: list[BulkImportError] = Field(default_factory=list)
