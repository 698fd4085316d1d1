# backend/learnhub/db/database.py
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from typing import Any, AsyncGenerator, Dict

from learnhub.core.config import settings
from learnhub.core.exceptions import InfrastructureError
from learnhub.core.logging import logger


def _engine_url(url: str) -> str:
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.DEBUG}
    # SQLite pools do not take sizing arguments
    if not url.startswith("sqlite"):
        options.update(pool_size=settings.DB_POOL_SIZE, max_overflow=settings.DB_MAX_OVERFLOW)
    return options


DATABASE_URL = _engine_url(settings.DATABASE_URL)

# Create async engine
engine = create_async_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

# Create async session factory
async_session_local = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency"""
    async with async_session_local() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def database_errors(session: AsyncSession, action: str):
    """
    Roll back and re-raise persistence failures as InfrastructureError.

    Domain errors raised inside the block also roll back but pass through
    unchanged. Nothing is retried here; callers re-run the whole operation.
    """
    try:
        yield
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error while {action}: {str(e)}")
        raise InfrastructureError(f"Database unavailable while {action}") from e
    except Exception:
        await session.rollback()
        raise


async def init_db():
    """Initialize database (create tables)"""
    from learnhub.db.base import Base
    # Import all models to ensure they're registered
    from learnhub.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections"""
    await engine.dispose()
