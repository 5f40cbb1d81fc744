# stockroom/initial_data.py
import logging
from contextlib import asynccontextmanager

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.config import settings
from stockroom.db.session_async import AsyncSessionLocal
from stockroom.domain.enums import UserRole
from stockroom.models.user import User
from stockroom.schemas.user import UserCreate
from stockroom.services import user_service

logger = logging.getLogger(__name__)

_ADMIN_INIT_LOCK_KEY = 987654321


@asynccontextmanager
async def _advisory_lock(session: AsyncSession):
    """Serialize admin bootstrap across workers on PostgreSQL; no-op elsewhere."""
    dialect = session.bind.dialect.name if session.bind else "unknown"
    got_lock = False
    try:
        if dialect == "postgresql":
            res = await session.execute(text("SELECT pg_try_advisory_lock(:k)"), {"k": _ADMIN_INIT_LOCK_KEY})
            got_lock = bool(res.scalar())
            if not got_lock:
                logger.info("Another worker is bootstrapping the admin user; skipping.")
                yield False
                return
        yield True
    finally:
        if got_lock:
            await session.execute(text("SELECT pg_advisory_unlock(:k)"), {"k": _ADMIN_INIT_LOCK_KEY})


async def create_initial_admin_user() -> User | None:
    """Create the configured admin when no admin exists yet.

    Idempotent: an existing account with the configured email is promoted
    instead of duplicated.
    """
    if not settings.INITIAL_ADMIN_EMAIL or not settings.INITIAL_ADMIN_PASSWORD:
        logger.info("Skipping admin bootstrap: INITIAL_ADMIN_EMAIL or INITIAL_ADMIN_PASSWORD not set.")
        return None

    async with AsyncSessionLocal() as session:
        async with _advisory_lock(session) as proceed:
            if proceed is False:
                return None

            stmt = select(func.count()).select_from(User).where(User.role == UserRole.admin)
            if ((await session.execute(stmt)).scalar() or 0) > 0:
                logger.info("An admin user already exists; nothing to do.")
                return None

            existing = await user_service.get_by_email(session, str(settings.INITIAL_ADMIN_EMAIL))
            if existing:
                existing.role = UserRole.admin
                existing.is_active = True
                await session.commit()
                logger.warning(
                    "Existing user promoted to admin.",
                    extra={"user_id": str(existing.id), "email": existing.email},
                )
                return existing

            user_in = UserCreate(
                email=str(settings.INITIAL_ADMIN_EMAIL),
                password=settings.INITIAL_ADMIN_PASSWORD,
                name=settings.INITIAL_ADMIN_NAME,
            )
            user = await user_service.create_user(session, user_in, role=UserRole.admin)
            await session.commit()

            logger.info("Initial admin created.", extra={"user_id": str(user.id), "email": user.email})
            return user
