"""
Database initialization and bootstrapping.
"""

from app.db import session as db_session
from app.db.base import Base
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_tables() -> None:
    """
    Create all database tables.
    Intended for local development and SQLite deployments; production schemas
    are managed with migrations.
    """
    import app.models  # noqa: F401  registers every model with Base.metadata

    engine = db_session.engine or db_session.create_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables initialized", extra={"tables": sorted(Base.metadata.tables)})
