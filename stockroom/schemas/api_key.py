# stockroom/schemas/api_key.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ApiKeyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    company_id: UUID | None = None
    expires_at: datetime | None = None


class ApiKeyRead(BaseModel):
    id: UUID
    name: str
    key_prefix: str
    company_id: UUID | None = None
    is_active: bool
    expires_at: datetime | None = None
    last_used_at: datetime | None = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ApiKeyCreated(ApiKeyRead):
    # Only returned once, at creation.
    key: str


class StockLevelRead(BaseModel):
    sku: str
    product_id: UUID
    location_id: UUID
    location_name: str
    quantity: int
    reserved_quantity: int
    available_quantity: int


class StockLookupRead(BaseModel):
    sku: str
    total_quantity: int
    total_available: int
    locations: list[StockLevelRead]
