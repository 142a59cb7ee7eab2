"""Database base configuration for SQLAlchemy with SQLModel.

This module provides base database configuration for async SQLAlchemy with SQLModel.
It includes:
- Engine configuration
- Session factory
- Schema bootstrap
- Health check functionality
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from shortlink.core.config import settings

# Registers the table models with SQLModel.metadata
from shortlink import models  # noqa: F401

logger = logging.getLogger(__name__)

# Mapping of environment to SQLAlchemy engine configurations
ENGINE_CONFIGS: Dict[str, Dict] = {
    "development": {
        "echo": settings.DB_ECHO,
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    },
    "production": {
        "echo": False,
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    },
    "testing": {
        "echo": False,
        "poolclass": NullPool,
    },
}


def get_engine_config(database_url: Optional[str] = None) -> Dict:
    """Get the appropriate engine configuration based on the environment.

    SQLite engines get no pool sizing options; SQLAlchemy picks a suitable
    pool for them.

    Returns:
        Dict: Engine configuration parameters for the current environment.
    """
    env = settings.ENVIRONMENT.value
    config = dict(ENGINE_CONFIGS.get(env, ENGINE_CONFIGS["development"]))
    url = database_url or str(settings.SQLALCHEMY_DATABASE_URI)
    if url.startswith("sqlite"):
        for key in ("pool_size", "max_overflow", "pool_timeout", "pool_recycle"):
            config.pop(key, None)
    return config


def get_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create and configure an async SQLAlchemy engine.

    Args:
        database_url: Optional URL, defaults to settings.SQLALCHEMY_DATABASE_URI

    Returns:
        AsyncEngine: Configured SQLAlchemy async engine instance.
    """
    engine_url = database_url or str(settings.SQLALCHEMY_DATABASE_URI)
    engine_config = get_engine_config(engine_url)

    logger.info(f"Creating database engine for {engine_url.split('@')[-1]}")

    return create_async_engine(engine_url, **engine_config)


# Shared async engine instance; nothing connects until first use
engine = get_engine()

# Async session factory
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get async session with proper error handling and cleanup.

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    session = async_session_factory()
    try:
        yield session
    finally:
        await session.close()


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Create the urls and clicks tables (and their indexes) if missing."""
    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schema is up to date")


class DatabaseHealthCheck:
    """Health check functionality for the database connection."""

    @staticmethod
    async def check_connection(session: Optional[AsyncSession] = None) -> Dict:
        """Check database connectivity and return status.

        Args:
            session: Session to probe with, a fresh one is opened when omitted

        Returns:
            Dict: Health check result containing status and latency information
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        status = "healthy"
        error_message = None
        latency_ms = 0

        try:
            if session is not None:
                await session.execute(text("SELECT 1"))
            else:
                async with async_session_factory() as new_session:
                    await new_session.execute(text("SELECT 1"))
            latency_ms = int((loop.time() - start_time) * 1000)
        except Exception as e:
            status = "unhealthy"
            error_message = str(e)
            logger.error(f"Database health check failed: {e}")

        return {
            "status": status,
            "latency_ms": latency_ms,
            "error": error_message,
        }
