# stockroom/db/session_async.py
"""Async SQLAlchemy session utilities."""

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from stockroom.core.config import settings

_engine_kwargs: dict[str, Any] = {"pool_pre_ping": True}
# aiosqlite connections are bound to the event loop that opened them.
if settings.ASYNC_DATABASE_URL.startswith("sqlite"):
    _engine_kwargs = {"poolclass": NullPool}

async_engine: AsyncEngine = create_async_engine(settings.ASYNC_DATABASE_URL, **_engine_kwargs)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields an AsyncSession.

    Handlers commit once per request; an exception raised before that rolls
    back the whole request.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            if session.in_transaction():
                await session.rollback()
            raise

