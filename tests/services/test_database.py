"""Database Wiring — tests for session rollback, error mapping and the readiness check.

Tests cover:
    - Connection failures inside a session become DatabaseError
    - Integrity and domain errors propagate unchanged after rollback
    - health_check() reports an unreachable database as not ready
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError

from taskboard.config import Settings
from taskboard.core.errors import DatabaseError, ForbiddenError
from taskboard.infrastructure.database import DatabaseSessionManager


@pytest.fixture
async def manager():
    db = DatabaseSessionManager(Settings(database_url="sqlite+aiosqlite:///:memory:"))
    yield db
    await db.dispose()


async def test_health_check_on_reachable_database(manager):
    assert await manager.health_check() is True


async def test_health_check_on_unreachable_database(tmp_path):
    missing = tmp_path / "no-such-dir" / "board.db"
    db = DatabaseSessionManager(Settings(database_url=f"sqlite+aiosqlite:///{missing}"))
    try:
        assert await db.health_check() is False
    finally:
        await db.dispose()


async def test_connection_failure_maps_to_database_error(manager):
    with pytest.raises(DatabaseError) as exc:
        async with manager.session():
            raise OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))
    assert exc.value.http_status == 503


async def test_integrity_error_propagates(manager):
    with pytest.raises(IntegrityError):
        async with manager.session():
            raise IntegrityError("INSERT", {}, Exception("unique"))


async def test_domain_error_rolls_back_and_propagates(manager):
    async with manager.session() as db:
        await db.execute(text("CREATE TABLE notes (body TEXT)"))
        await db.commit()

    with pytest.raises(ForbiddenError):
        async with manager.session() as db:
            await db.execute(text("INSERT INTO notes VALUES ('draft')"))
            raise ForbiddenError()

    async with manager.session() as db:
        result = await db.execute(text("SELECT count(*) FROM notes"))
        assert result.scalar_one() == 0
