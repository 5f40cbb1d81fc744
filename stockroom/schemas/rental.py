# stockroom/schemas/rental.py
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stockroom.domain.enums import RentalStatus


class RentalItemCreate(BaseModel):
    product_id: UUID
    quantity: int = Field(..., gt=0)
    # Falls back to the product's rental price when omitted.
    unit_price: float | None = Field(default=None, ge=0)


class RentalCreate(BaseModel):
    customer_id: UUID
    rental_date: date
    expected_return_date: date
    location_id: UUID | None = None
    items: list[RentalItemCreate] = Field(..., min_length=1)
    deposit_amount: float = Field(default=0, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> "RentalCreate":
        if self.expected_return_date < self.rental_date:
            raise ValueError("expected_return_date must not be before rental_date")
        return self


class ReturnLine(BaseModel):
    id: UUID = Field(..., description="Rental item id")
    quantity: int = Field(..., gt=0)


class RentalReturn(BaseModel):
    items: list[ReturnLine] = Field(..., min_length=1)
    return_date: date | None = None


class RentalItemRead(BaseModel):
    id: UUID
    product_id: UUID
    quantity: int
    unit_price: float
    total_price: float
    returned_quantity: int
    model_config = ConfigDict(from_attributes=True)


class RentalRead(BaseModel):
    id: UUID
    customer_id: UUID
    location_id: UUID | None = None
    rental_date: date
    expected_return_date: date
    return_date: date | None = None
    total_amount: float
    deposit_amount: float
    status: RentalStatus
    notes: str | None = None
    created_by: UUID | None = None
    created_at: datetime
    items: list[RentalItemRead] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)


class OverdueResult(BaseModel):
    updated: int
