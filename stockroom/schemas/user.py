# stockroom/schemas/user.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from stockroom.domain.enums import UserRole


class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=200)


class UserCreate(UserBase):
    password: str = Field(min_length=8)
    role: UserRole = UserRole.viewer
    company_id: UUID | None = None


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None


class UserRead(UserBase):
    id: UUID
    role: UserRole
    company_id: UUID | None = None
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    message: str | None = None
    user: UserRead


class TokenPayload(BaseModel):
    sub: str | None = None
    type: str | None = None
    jti: str | None = None
    exp: int | None = None
