# stockroom/schemas/sale.py
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from stockroom.domain.enums import PaymentStatus


class SaleItemCreate(BaseModel):
    product_id: UUID
    quantity: int = Field(..., gt=0)
    # Falls back to the product's sale price when omitted.
    unit_price: float | None = Field(default=None, ge=0)
    discount: float = Field(default=0, ge=0)


class SaleCreate(BaseModel):
    customer_id: UUID
    sale_date: date
    location_id: UUID | None = None
    items: list[SaleItemCreate] = Field(..., min_length=1)
    discount_amount: float = Field(default=0, ge=0)
    payment_method: str | None = Field(default=None, max_length=50)
    payment_status: PaymentStatus = PaymentStatus.pending
    notes: str | None = None


class SaleItemRead(BaseModel):
    id: UUID
    product_id: UUID
    quantity: int
    unit_price: float
    total_price: float
    discount: float
    model_config = ConfigDict(from_attributes=True)


class SaleRead(BaseModel):
    id: UUID
    customer_id: UUID
    location_id: UUID | None = None
    sale_date: date
    total_amount: float
    discount_amount: float
    payment_method: str | None = None
    payment_status: PaymentStatus
    notes: str | None = None
    created_by: UUID | None = None
    created_at: datetime
    items: list[SaleItemRead] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)
