"""
Database engine and session management.

One async engine per process; sessions are request-scoped and commit only
when the request handler returns normally.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from deckhaven.config import settings
from deckhaven.models.db import Base

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Any exception raised by the handler (including HTTPException for a
    rejected card) rolls the session back, so rejected requests never
    leave partial writes.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("Rolling back session after request failure")
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Create all tables defined in the ORM models.

    Called once at application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


async def dispose_db() -> None:
    """Release pooled connections at shutdown."""
    await engine.dispose()
