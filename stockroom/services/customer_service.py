from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.db.operations import flush_async
from stockroom.models.customer import Customer
from stockroom.schemas.common import PageParams
from stockroom.schemas.customer import CustomerCreate
from stockroom.services.exceptions import DomainValidationError


async def list_customers(
    db: AsyncSession,
    params: PageParams,
    *,
    search: str | None = None,
    active: bool | None = None,
) -> tuple[list[Customer], int]:
    stmt = select(Customer)
    if search:
        like = f"%{search.strip()}%"
        stmt = stmt.where(or_(Customer.name.ilike(like), Customer.cpf_cnpj.ilike(like)))
    if active is not None:
        stmt = stmt.where(Customer.is_active.is_(active))

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
    rows = await db.execute(stmt.order_by(Customer.name, Customer.id).offset(params.offset).limit(params.limit))
    return list(rows.scalars().all()), total


async def create_customer(db: AsyncSession, payload: CustomerCreate) -> Customer:
    if payload.cpf_cnpj:
        existing = await db.execute(select(Customer.id).where(Customer.cpf_cnpj == payload.cpf_cnpj).limit(1))
        if existing.scalar_one_or_none() is not None:
            raise DomainValidationError("A customer with this CPF/CNPJ already exists.")
    customer = Customer(**payload.model_dump(), is_active=True)
    db.add(customer)
    await flush_async(db, customer)
    return customer
