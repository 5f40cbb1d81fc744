from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.security import get_password_hash, verify_password
from stockroom.db.operations import flush_async
from stockroom.db.types import utcnow
from stockroom.domain.enums import UserRole
from stockroom.models.company import Company
from stockroom.models.user import User
from stockroom.schemas.user import ProfileUpdate, UserCreate
from stockroom.services.exceptions import DomainValidationError


async def get_by_email(db: AsyncSession, email: str) -> User | None:
    stmt = select(User).where(func.lower(User.email) == email.strip().lower()).limit(1)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_by_id(db: AsyncSession, user_id: uuid.UUID | str) -> User | None:
    try:
        user_uuid = user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id))
    except ValueError:
        return None
    return await db.get(User, user_uuid)


async def create_user(db: AsyncSession, data: UserCreate, *, role: UserRole | None = None) -> User:
    if await get_by_email(db, data.email) is not None:
        raise DomainValidationError("Email already registered.")
    if data.company_id is not None and await db.get(Company, data.company_id) is None:
        raise DomainValidationError(f"Company {data.company_id} not found.")

    user = User(
        email=data.email.lower(),
        name=data.name,
        hashed_password=get_password_hash(data.password),
        role=role or data.role,
        company_id=data.company_id,
        is_active=True,
    )
    db.add(user)
    await flush_async(db, user)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    user = await get_by_email(db, email)
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def mark_login(db: AsyncSession, user: User) -> User:
    user.last_login = utcnow()
    db.add(user)
    await flush_async(db, user)
    return user


async def update_profile(db: AsyncSession, user: User, changes: ProfileUpdate) -> User:
    data = {key: value for key, value in changes.model_dump(exclude_unset=True).items() if value is not None}
    if not data:
        raise DomainValidationError("No fields to update.")

    if "email" in data:
        data["email"] = data["email"].lower()
        if data["email"] != user.email:
            other = await get_by_email(db, data["email"])
            if other is not None and other.id != user.id:
                raise DomainValidationError("Email already registered.")

    for key, value in data.items():
        setattr(user, key, value)
    db.add(user)
    await flush_async(db, user)
    return user
