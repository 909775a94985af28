"""Database manager tests.

Tests cover:
    - Pool sizing applies to server databases only
    - A session is rolled back when the caller raises
    - ping() reports an unreachable database as False instead of raising
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from storefront.infrastructure.database import DatabaseSessionManager, engine_options
from storefront.models.user import User


def _manager(engine, session_factory=None):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = engine
    manager._session_factory = session_factory
    return manager


def test_sqlite_keeps_dialect_pool():
    assert engine_options("sqlite+aiosqlite:///:memory:", 20, 10) == {}


def test_server_database_gets_pool_settings():
    options = engine_options("postgresql+asyncpg://u:p@db/shop", 5, 2)
    assert options["pool_size"] == 5
    assert options["max_overflow"] == 2
    assert options["pool_pre_ping"] is True


async def test_session_rolls_back_when_caller_raises(
    test_engine, test_session_factory, consumer,
):
    manager = _manager(test_engine, test_session_factory)

    with pytest.raises(RuntimeError):
        async with manager.session() as session:
            user = await session.get(User, consumer.id)
            user.name = "changed"
            await session.flush()
            raise RuntimeError("request failed")

    async with test_session_factory() as session:
        assert (await session.get(User, consumer.id)).name == "alice"


async def test_ping_healthy_database(test_engine):
    assert await _manager(test_engine).ping() is True


async def test_ping_unreachable_database(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nowhere.db'}",
    )
    try:
        assert await _manager(engine).ping() is False
    finally:
        await engine.dispose()
