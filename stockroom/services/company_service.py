from __future__ import annotations

import uuid
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.db.operations import flush_async
from stockroom.models.company import Company, InventoryLocation
from stockroom.schemas.company import CompanyCreate, LocationCreate
from stockroom.services.exceptions import DomainValidationError


async def list_companies(db: AsyncSession, active: bool | None = None) -> Sequence[Company]:
    stmt = select(Company).order_by(Company.name)
    if active is not None:
        stmt = stmt.where(Company.is_active.is_(active))
    result = await db.execute(stmt)
    return result.scalars().all()


async def create_company(db: AsyncSession, payload: CompanyCreate) -> Company:
    if payload.cnpj:
        existing = await db.execute(select(Company.id).where(Company.cnpj == payload.cnpj).limit(1))
        if existing.scalar_one_or_none() is not None:
            raise DomainValidationError("A company with this CNPJ already exists.")
    company = Company(**payload.model_dump(), is_active=True)
    db.add(company)
    await flush_async(db, company)
    return company


async def list_locations(
    db: AsyncSession,
    *,
    company_id: uuid.UUID | None = None,
    active: bool | None = None,
) -> Sequence[InventoryLocation]:
    stmt = select(InventoryLocation).order_by(InventoryLocation.name)
    if company_id:
        stmt = stmt.where(InventoryLocation.company_id == company_id)
    if active is not None:
        stmt = stmt.where(InventoryLocation.is_active.is_(active))
    result = await db.execute(stmt)
    return result.scalars().all()


async def create_location(db: AsyncSession, payload: LocationCreate, company_id: uuid.UUID) -> InventoryLocation:
    if await db.get(Company, company_id) is None:
        raise DomainValidationError(f"Company {company_id} not found.")
    data = payload.model_dump(exclude={"company_id"})
    location = InventoryLocation(**data, company_id=company_id, is_active=True)
    db.add(location)
    await flush_async(db, location)
    return location
