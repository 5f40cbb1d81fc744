# stockroom/schemas/company.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CompanyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    cnpj: str | None = Field(default=None, max_length=20)
    address: str | None = None
    phone: str | None = Field(default=None, max_length=40)
    email: EmailStr | None = None


class CompanyRead(CompanyCreate):
    id: UUID
    is_active: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class LocationCreate(BaseModel):
    company_id: UUID | None = None
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    address: str | None = None


class LocationRead(BaseModel):
    id: UUID
    company_id: UUID
    name: str
    description: str | None = None
    address: str | None = None
    is_active: bool
    model_config = ConfigDict(from_attributes=True)
