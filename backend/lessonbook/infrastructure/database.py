"""Database Access — async engine, per-request sessions and SQLAlchemy error mapping.

Invariants:
    - A failed unit of work is rolled back before the session closes
    - SQLAlchemy exceptions leave this module only as DatabaseError (core/errors.py)
    - Pool sizing applies to server databases only; SQLite keeps the dialect's own pool

Design Decisions:
    - Module-level db_manager set once by the lifespan hook (init_db), read by get_db
      and the readiness probe
    - expire_on_commit=False: rows returned by services stay readable after commit
      without an async refresh
    - create_all() on startup serves the single-file SQLite deployment; Alembic
      migrations cover server databases
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from lessonbook.core.errors import DatabaseError
from lessonbook.db.base import Base

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_ERROR_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def to_database_error(exc: SQLAlchemyError) -> DatabaseError:
    for exc_type, message, operation in _ERROR_MAP:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation)
    return DatabaseError("Database operation failed", "unknown")


def build_engine(
    database_url: str, pool_size: int = 20, max_overflow: int = 10,
) -> AsyncEngine:
    options: dict = {"pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


class DatabaseSessionManager:
    """Owns the engine and hands out sessions that roll back on failure."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = build_engine(database_url, pool_size, max_overflow)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = to_database_error(e)
            logger.error(
                f"{error.message}: {e}", extra={"error_code": error.code},
            )
            raise error from e
        finally:
            await session.close()

    async def create_all(self) -> None:
        """Create any missing tables from the ORM metadata."""
        import lessonbook.models  # noqa: F401  (registers every table on Base.metadata)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def health_check(self) -> bool:
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except (DatabaseError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
