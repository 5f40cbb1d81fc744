# stockroom/schemas/customer.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from stockroom.domain.enums import CustomerType


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    cpf_cnpj: str | None = Field(default=None, max_length=20)
    customer_type: CustomerType = CustomerType.individual
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=40)
    address: str | None = None
    notes: str | None = None


class CustomerRead(CustomerCreate):
    id: UUID
    is_active: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
