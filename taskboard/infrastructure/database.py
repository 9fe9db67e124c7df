"""Database Wiring — async engine and per-request sessions for the board store.

Invariants:
    - One AsyncSession per request; the services commit explicitly, never this module
    - A session that exits with an exception is rolled back before it is closed
    - Lost or refused connections surface as DatabaseError (503); constraint
      violations are left to the services that expect them (savepoints in the ledger)
    - Pool sizing applies to PostgreSQL only; SQLite URLs use the dialect's default pool

Design Decisions:
    - Built from Settings in the lifespan hook; the module-level db_manager is what
      get_db and the readiness probe read
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from taskboard.config import Settings
from taskboard.core.errors import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the engine and hands out request-scoped sessions."""

    def __init__(self, settings: Settings):
        engine_options = {"pool_pre_ping": True}
        if not settings.database_url.startswith("sqlite"):
            engine_options.update(
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
            )
        self.engine = create_async_engine(settings.database_url, **engine_options)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._session_factory() as session:
            try:
                yield session
            except (OperationalError, InterfaceError) as e:
                await session.rollback()
                logger.error(
                    f"Database unavailable: {e}", extra={"error_code": "DATABASE_ERROR"},
                )
                raise DatabaseError("Connection lost or refused", "execute") from e
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """SELECT 1 through a fresh session (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except (DatabaseError, OSError):
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(settings: Settings) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(settings)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
