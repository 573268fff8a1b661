"""
Database configuration.

Manages engine creation and the async session factory.
"""
from typing import Optional
import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from core.settings import get_app_settings


logger = logging.getLogger(__name__)


# =============================================================================
# ENGINE CREATION
# =============================================================================

def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        database_url: Override for DB_DATABASE_URL

    Returns:
        Configured async engine
    """
    settings = get_app_settings().database
    url = database_url or settings.database_url

    logger.info(f"Creating database engine: {url}")

    return create_async_engine(
        url,
        echo=settings.echo_sql,
        pool_pre_ping=settings.pool_pre_ping,  # Test connections before using
    )


# Global engine instance
engine: Optional[AsyncEngine] = None


def get_engine() -> AsyncEngine:
    """
    Get or create global engine instance.

    Returns:
        Global async engine
    """
    global engine

    if engine is None:
        engine = create_engine()

    return engine


# =============================================================================
# SESSION FACTORY
# =============================================================================

def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by every Unit of Work."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get session factory bound to the global engine.

    Returns:
        Session factory for creating sessions
    """
    return create_session_factory(get_engine())


# =============================================================================
# DATABASE INITIALIZATION
# =============================================================================

async def init_database(bind: Optional[AsyncEngine] = None) -> None:
    """
    Initialize database.

    Creates all tables if they don't exist.
    """
    from core.data.models import Base

    logger.info("Initializing database...")

    async with (bind or get_engine()).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("✅ Database initialized successfully")


async def close_database() -> None:
    """Close database connections."""
    global engine

    if engine:
        logger.info("Closing database connections...")
        await engine.dispose()
        engine = None
        logger.info("✅ Database connections closed")
