# stockroom/schemas/supplier.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from stockroom.domain.enums import SupplierCategory


class SupplierCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    category: SupplierCategory
    cnpj: str | None = Field(default=None, max_length=20)
    contact_person: str | None = Field(default=None, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=40)
    address: str | None = None
    payment_terms: str | None = Field(default=None, max_length=120)
    delivery_time: int | None = Field(default=None, ge=0)
    rating: float | None = Field(default=None, ge=0, le=5)
    notes: str | None = None


class SupplierRead(SupplierCreate):
    id: UUID
    is_active: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
