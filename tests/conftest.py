# tests/conftest.py
import os
import sys
import uuid
from pathlib import Path
from typing import Generator

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("ASYNC_DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REDIS_URL", "")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, sessionmaker

from stockroom.core.security import get_password_hash
from stockroom.core.token_blacklist import get_blacklist
from stockroom.db.session import Base
from stockroom.db.session_async import AsyncSessionLocal
from stockroom.domain.enums import ProductStatus, ProductType, UserRole
from stockroom.main import app
from stockroom.models import Category, Company, Customer, InventoryLocation, Product, User

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

sync_engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sync_engine, expire_on_commit=False)

PASSWORDS = {
    UserRole.admin: "Admin1234",
    UserRole.manager: "Manager1234",
    UserRole.operator: "Operator1234",
    UserRole.viewer: "Viewer1234",
}


# ---------- Database ----------
@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create the SQLite schema once per test session."""
    Base.metadata.drop_all(bind=sync_engine)
    Base.metadata.create_all(bind=sync_engine)
    yield
    Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    get_blacklist().clear()
    with sync_engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest_asyncio.fixture(scope="function")
async def client():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_db_session() -> AsyncSession:
    """AsyncSession for calling services directly; tests commit explicitly."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()


# ---------- Company and catalog ----------
@pytest.fixture(scope="function")
def company(db_session: Session) -> Company:
    company = Company(name="Acme Displays", cnpj=f"{uuid.uuid4().int % 10**14:014d}", is_active=True)
    db_session.add(company)
    db_session.commit()
    return company


@pytest.fixture(scope="function")
def other_company(db_session: Session) -> Company:
    company = Company(name="Other Co", is_active=True)
    db_session.add(company)
    db_session.commit()
    return company


@pytest.fixture(scope="function")
def location(db_session: Session, company: Company) -> InventoryLocation:
    location = InventoryLocation(company_id=company.id, name="Main warehouse", is_active=True)
    db_session.add(location)
    db_session.commit()
    return location


@pytest.fixture(scope="function")
def category(db_session: Session) -> Category:
    category = Category(name="Totems", product_type=ProductType.totem, is_active=True)
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture(scope="function")
def product(db_session: Session, category: Category) -> Product:
    product = Product(
        sku=f"TOT-{uuid.uuid4().hex[:8].upper()}",
        name="Totem 55in",
        category_id=category.id,
        product_type=ProductType.totem,
        status=ProductStatus.novo,
        sale_price=10.0,
        rental_price=4.0,
        cost_price=6.0,
        minimum_stock=2,
        is_active=True,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope="function")
def customer(db_session: Session) -> Customer:
    customer = Customer(name="Jane Buyer", email="jane@example.com", is_active=True)
    db_session.add(customer)
    db_session.commit()
    return customer


# ---------- Users ----------
def _make_user(session: Session, role: UserRole, company_id: uuid.UUID | None = None) -> User:
    user = User(
        email=f"{role.value}-{uuid.uuid4().hex[:8]}@example.com",
        name=f"Test {role.value.title()}",
        hashed_password=get_password_hash(PASSWORDS[role]),
        role=role,
        company_id=company_id,
        is_active=True,
    )
    session.add(user)
    session.commit()
    return user


@pytest.fixture(scope="function")
def admin_user(db_session: Session) -> User:
    return _make_user(db_session, UserRole.admin)


@pytest.fixture(scope="function")
def manager_user(db_session: Session, company: Company) -> User:
    return _make_user(db_session, UserRole.manager, company.id)


@pytest.fixture(scope="function")
def operator_user(db_session: Session, company: Company) -> User:
    return _make_user(db_session, UserRole.operator, company.id)


@pytest.fixture(scope="function")
def viewer_user(db_session: Session) -> User:
    return _make_user(db_session, UserRole.viewer)


async def _login(client: httpx.AsyncClient, user: User) -> str:
    resp = await client.post(
        "/api/v1/auth/login",
        data={"username": user.email, "password": PASSWORDS[user.role]},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


@pytest_asyncio.fixture(scope="function")
async def admin_token(client: httpx.AsyncClient, admin_user: User) -> str:
    return await _login(client, admin_user)


@pytest_asyncio.fixture(scope="function")
async def manager_token(client: httpx.AsyncClient, manager_user: User) -> str:
    return await _login(client, manager_user)


@pytest_asyncio.fixture(scope="function")
async def operator_token(client: httpx.AsyncClient, operator_user: User) -> str:
    return await _login(client, operator_user)


@pytest_asyncio.fixture(scope="function")
async def viewer_token(client: httpx.AsyncClient, viewer_user: User) -> str:
    return await _login(client, viewer_user)
