"""Async SQLAlchemy engine and session management."""

from collections.abc import AsyncGenerator

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config import settings

logger = structlog.get_logger(__name__)

# NullPool in production: the container platform scales to zero between bursts
_engine_kwargs: dict = {
    "echo": settings.db_echo,
}
if settings.is_production:
    _engine_kwargs["poolclass"] = NullPool
else:
    _engine_kwargs["pool_size"] = settings.db_pool_size
    _engine_kwargs["max_overflow"] = settings.db_max_overflow

engine = create_async_engine(str(settings.database_url), **_engine_kwargs)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a request-scoped database session.

    Usage:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for work that outlives a request (background writes)."""
    return async_session_factory


async def init_db() -> None:
    """Verify database connectivity on startup."""
    logger.info("Initializing database connection", database_url=str(settings.database_url).split("@")[-1])

    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

    logger.info("Database connection established")


async def close_db() -> None:
    """Dispose of the engine on shutdown."""
    logger.info("Closing database connection")
    await engine.dispose()
    logger.info("Database connection closed")
