# 📄 File: app/shared/infrastructure/database/connection.py
#
# 🧭 Purpose (Layman Explanation):
# Manages the connection to our PostgreSQL database where identification history is kept,
# and keeps trying for a little while at startup if the database is slow to come up.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy engine management with connection pooling, a tenacity-retried startup
# connectivity check, health checks, and the declarative Base shared by all ORM models.
#
# 🔗 Dependencies:
# - sqlalchemy (async engine, declarative base)
# - asyncpg (PostgreSQL async driver)
# - tenacity (startup connection retry)
# - app/shared/config/settings.py (database configuration)
#
# 🔄 Connected Modules / Calls From:
# - app/shared/infrastructure/database/session.py (session management)
# - app/main.py (lifespan startup/shutdown)
# - app/api/v1/health.py (readiness checks)
# - migrations/env.py (metadata for alembic)

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.shared.config.settings import get_settings
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Declarative base for all ORM models
Base = declarative_base()


class DatabaseConnectionManager:
    """
    Manages PostgreSQL database connections with connection pooling
    and health monitoring.
    """

    def __init__(self):
        self._engine: Optional[AsyncEngine] = None
        self._health_check_query = text("SELECT 1")

    def _build_connection_params(self) -> Dict[str, Any]:
        """Build SQLAlchemy connection parameters from settings."""
        settings = get_settings()
        return {
            "url": settings.database_url,
            "echo": settings.debug,
            "pool_pre_ping": True,
            "pool_recycle": settings.DB_POOL_RECYCLE,
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "connect_args": {
                "server_settings": {
                    "application_name": "nursery_identification",
                    "jit": "off"
                },
                "command_timeout": 60,
                "statement_cache_size": 0,
            }
        }

    async def initialize(self) -> None:
        """
        Create the engine and verify connectivity.

        The connectivity check is retried with exponential backoff up to
        DB_CONNECT_ATTEMPTS times before giving up.
        """
        if self._engine is not None:
            logger.warning("Database engine already initialized")
            return

        settings = get_settings()
        logger.info("Initializing database connection pool...")
        self._engine = create_async_engine(**self._build_connection_params())

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(settings.DB_CONNECT_ATTEMPTS),
                wait=wait_exponential(multiplier=1, min=1, max=8),
                retry=retry_if_exception_type(Exception),
                before_sleep=before_sleep_log(logger.logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    await self._ping()
        except Exception as e:
            logger.error(f"❌ Failed to initialize database connection: {e}")
            await self._engine.dispose()
            self._engine = None
            raise

        logger.info(
            f"✅ Database connection pool initialized. "
            f"Pool size: {settings.DB_POOL_SIZE}, "
            f"Max overflow: {settings.DB_MAX_OVERFLOW}"
        )

    async def _ping(self) -> None:
        async with self._engine.begin() as conn:
            result = await conn.execute(self._health_check_query)
            result.scalar()

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform a single database health check and return structured status.
        """
        timestamp = datetime.now(timezone.utc).isoformat()

        if self._engine is None:
            return {
                "status": "unhealthy",
                "error": "Database engine not initialized",
                "timestamp": timestamp
            }

        try:
            await self._ping()
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": "Database unreachable",
                "timestamp": timestamp
            }

        return {"status": "healthy", "timestamp": timestamp}

    async def get_connection_info(self) -> Dict[str, Any]:
        """
        Get current connection pool information for monitoring.
        """
        if self._engine is None:
            return {"status": "not_initialized"}

        pool = self._engine.pool
        return {
            "status": "initialized",
            "pool_size": pool.size(),
            "checked_in": pool.checkedin(),
            "checked_out": pool.checkedout(),
            "overflow": pool.overflow(),
        }

    async def close(self) -> None:
        """Close database engine and all connections."""
        if self._engine is None:
            logger.warning("Database engine not initialized, nothing to close")
            return

        logger.info("Closing database connection pool...")
        await self._engine.dispose()
        self._engine = None
        logger.info("✅ Database connection pool closed")

    @property
    def engine(self) -> Optional[AsyncEngine]:
        """Get the SQLAlchemy async engine."""
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None


# Global database connection manager instance
db_manager = DatabaseConnectionManager()


async def init_database() -> bool:
    """
    Initialize database connection and verify connectivity.

    Returns:
        True if initialization successful

    Raises:
        Exception: If the database stays unreachable after all attempts
    """
    await db_manager.initialize()
    return True


async def close_database() -> None:
    """Close the global database connection manager."""
    await db_manager.close()


def get_database_engine() -> AsyncEngine:
    """
    Get the database engine instance.

    Raises:
        RuntimeError: If database is not initialized
    """
    if not db_manager.is_initialized:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    return db_manager.engine


async def database_health_check() -> Dict[str, Any]:
    """Perform database health check."""
    return await db_manager.health_check()


async def get_connection_info() -> Dict[str, Any]:
    """Get database connection pool information."""
    return await db_manager.get_connection_info()
