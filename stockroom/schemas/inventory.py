# stockroom/schemas/inventory.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from stockroom.domain.enums import MovementReference, MovementType


class StockEntryCreate(BaseModel):
    product_id: UUID
    location_id: UUID
    quantity: int = Field(..., gt=0)
    unit_cost: float | None = Field(default=None, ge=0)
    notes: str | None = None


class InventoryCreate(BaseModel):
    product_id: UUID
    location_id: UUID
    quantity: int = Field(default=0, ge=0)
    unit_cost: float | None = Field(default=None, ge=0)
    notes: str | None = None


class InventoryAdjust(BaseModel):
    quantity: int = Field(..., ge=0)
    # Omitted means "keep the current reservation".
    reserved_quantity: int | None = Field(default=None, ge=0)
    notes: str | None = None


class InventoryRead(BaseModel):
    id: UUID
    product_id: UUID
    location_id: UUID
    quantity: int
    reserved_quantity: int
    available_quantity: int
    last_movement_at: datetime | None = None
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class InventoryProductSummary(BaseModel):
    id: UUID
    sku: str
    name: str
    minimum_stock: int
    model_config = ConfigDict(from_attributes=True)


class InventoryLocationSummary(BaseModel):
    id: UUID
    company_id: UUID
    name: str
    model_config = ConfigDict(from_attributes=True)


class InventoryDetail(InventoryRead):
    product: InventoryProductSummary | None = None
    location: InventoryLocationSummary | None = None


class MovementCreate(BaseModel):
    product_id: UUID
    location_id: UUID
    movement_type: MovementType
    quantity: int = Field(..., gt=0)
    unit_cost: float | None = Field(default=None, ge=0)
    notes: str | None = None


class MovementRead(BaseModel):
    id: UUID
    product_id: UUID
    location_id: UUID
    movement_type: MovementType
    quantity: int
    unit_cost: float | None = None
    total_cost: float | None = None
    reference_id: UUID | None = None
    reference_type: MovementReference | None = None
    notes: str | None = None
    created_by: UUID | None = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)

