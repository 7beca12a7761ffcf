"""
Database session management with async SQLAlchemy 2.0.
One engine per process; one session, and one transaction, per request.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from typing import AsyncGenerator, Optional

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

POOL_SIZE = 5
MAX_OVERFLOW = 10

# Global engine and sessionmaker
engine: Optional[AsyncEngine] = None
async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None


def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create the process-wide async engine.

    SQLite URLs get the driver's default pool; server databases get a sized,
    pre-pinged connection pool.
    """
    global engine

    url = database_url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=False)
        logger.info("Database engine created", extra={"dialect": "sqlite"})
        return engine

    engine = create_async_engine(
        url,
        echo=False,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_pre_ping=True,
    )
    logger.info(
        "Database engine created",
        extra={"pool_size": POOL_SIZE, "max_overflow": MAX_OVERFLOW},
    )
    return engine


def create_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Bind a sessionmaker to the engine, creating the engine if needed."""
    global async_session_maker

    async_session_maker = async_sessionmaker(
        engine or create_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return async_session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting database session.

    Services commit their own work; anything left pending when the handler
    returns is committed here, and any exception rolls the session back.
    """
    if async_session_maker is None:
        create_sessionmaker()

    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Initialize database connection and sessionmaker."""
    if async_session_maker is None:
        create_sessionmaker()
    logger.info("Database initialized")


async def close_db() -> None:
    """Dispose of the engine's connections."""
    global engine, async_session_maker

    if engine is not None:
        await engine.dispose()
        logger.info("Database connections closed")
    engine = None
    async_session_maker = None
