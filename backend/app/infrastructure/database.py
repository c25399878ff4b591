"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py), for
      the manager's own sessions and for repositories via managed_session()

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - expire_on_commit=False: prevents lazy-load issues in async context and lets
      workers hand detached items to the result store
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from app.core.errors import DatabaseError, ErrorContext
from app.db.session import create_session_factory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def managed_session(
    session_factory: async_sessionmaker[AsyncSession],
    context: ErrorContext | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Open a session, roll back on failure and raise DatabaseError for SQLAlchemy errors."""
    session = session_factory()
    try:
        yield session
    except IntegrityError as e:
        await session.rollback()
        logger.error(f"DB integrity error: {e}")
        raise DatabaseError("Integrity constraint violated", "commit", context)
    except OperationalError as e:
        await session.rollback()
        logger.error(f"DB operational error: {e}")
        raise DatabaseError("Connection or operational error", "execute", context)
    except DBAPIError as e:
        await session.rollback()
        logger.error(f"DB driver error: {e}")
        raise DatabaseError("Database driver error", "query", context)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"SQLAlchemy error: {e}")
        raise DatabaseError("Database operation failed", "unknown", context)
    finally:
        await session.close()


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            # SQLite dialects pick their own pool class
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self.session_factory = create_session_factory(self.engine)

    def session(self):
        """Provide session with auto-rollback on exception."""
        return managed_session(self.session_factory)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    """Return the initialized manager or fail loudly."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager
