# 📄 File: app/shared/infrastructure/database/session.py
#
# 🧭 Purpose (Layman Explanation):
# Manages database sessions (like short conversations with the database) so that each
# piece of work gets its own clean session that is saved or undone as a whole.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy session management: one session factory bound to the shared engine,
# a commit/rollback unit-of-work context manager, and a FastAPI dependency.
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncSession, async_sessionmaker)
# - app/shared/infrastructure/database/connection.py (database engine)
#
# 🔄 Connected Modules / Calls From:
# - Plant identification repository implementation (one short session per write)
# - app/main.py (initialization during lifespan)

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import exc
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.shared.core.exceptions import DatabaseError, NurseryException, TransactionError
from app.shared.infrastructure.database.connection import get_database_engine
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)


class DatabaseSessionManager:
    """
    Manages database sessions with transaction handling and automatic cleanup.
    """

    def __init__(self):
        self._session_factory: Optional[async_sessionmaker] = None

    def initialize(self) -> None:
        """Initialize the session factory with the database engine."""
        try:
            engine = get_database_engine()
        except RuntimeError as e:
            raise DatabaseError(f"Session initialization failed: {e}", operation="initialize")

        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=True,
        )
        logger.info("Database session factory initialized successfully")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session with automatic transaction management.

        Commits when the block exits cleanly, rolls back otherwise.

        Raises:
            DatabaseError: If the manager is not initialized or SQLAlchemy fails
            TransactionError: If anything else goes wrong inside the unit of work
        """
        if self._session_factory is None:
            raise DatabaseError("Session manager not initialized", operation="get_session")

        session: AsyncSession = self._session_factory()

        try:
            yield session
            await session.commit()

        except exc.SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database error occurred, transaction rolled back: {e}")
            raise DatabaseError(f"Database operation failed: {e}")

        except NurseryException:
            await session.rollback()
            raise

        except Exception as e:
            await session.rollback()
            logger.error(f"Unexpected error occurred, transaction rolled back: {e}")
            raise TransactionError(f"Transaction failed: {e}")

        finally:
            await session.close()

    def is_initialized(self) -> bool:
        """Check if session manager is initialized."""
        return self._session_factory is not None


# Global session manager instance
session_manager = DatabaseSessionManager()


def initialize_sessions() -> None:
    """Initialize the global database session manager."""
    session_manager.initialize()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a transactional database session.

    Yields:
        AsyncSession: Database session
    """
    async with session_manager.get_session() as session:
        yield session
