"""Database Sessions — rollback and error mapping of DatabaseSessionManager.

Invariants:
    - SQLAlchemy failures inside a session surface as DatabaseError (503)
    - Domain errors pass through unchanged
    - Readiness reports True on a live engine, False when the database cannot be opened
"""

import pytest
from sqlalchemy import text

from app.core.errors import DatabaseError, ResourceNotFoundError
from app.infrastructure.database import DatabaseSessionManager


@pytest.fixture
async def manager():
    mgr = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    yield mgr
    await mgr.dispose()


async def test_failed_query_becomes_database_error(manager):
    with pytest.raises(DatabaseError) as exc:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert exc.value.http_status == 503


async def test_constraint_violation_becomes_database_error(manager):
    with pytest.raises(DatabaseError) as exc:
        async with manager.session() as db:
            await db.execute(text("CREATE TABLE t (id INTEGER PRIMARY KEY)"))
            await db.execute(text("INSERT INTO t (id) VALUES (1)"))
            await db.execute(text("INSERT INTO t (id) VALUES (1)"))
    assert exc.value.operation == "write"


async def test_domain_error_passes_through(manager):
    with pytest.raises(ResourceNotFoundError):
        async with manager.session():
            raise ResourceNotFoundError("Blog", "x")


async def test_health_check_on_live_engine(manager):
    assert await manager.health_check() is True


async def test_health_check_on_unreachable_database(tmp_path):
    mgr = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path}/missing/dir/db.sqlite")
    try:
        assert await mgr.health_check() is False
    finally:
        await mgr.dispose()
