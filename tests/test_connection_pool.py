"""Tests for SQLite connection handling."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from plantwatch.lib.db import ConnectionPool, Database, get_db
from plantwatch.lib.exceptions import DatabaseNotConnectedError


def _fake_db(*args, **kwargs):
    db = MagicMock(spec=Database)
    db.connect = AsyncMock()
    db.close = AsyncMock()
    return db


class TestConnectionPool:
    """Tests for ConnectionPool class."""

    @pytest.fixture
    def pool(self):
        return ConnectionPool(max_size=2)

    async def test_released_connection_is_reused(self, pool):
        with patch("plantwatch.lib.db.connection.Database", side_effect=_fake_db) as factory:
            async with pool.acquire() as first:
                pass
            async with pool.acquire() as second:
                pass

        assert first is second
        factory.assert_called_once()

    async def test_checkouts_bounded_by_max_size(self, pool):
        in_use = 0
        peak = 0

        async def worker() -> None:
            nonlocal in_use, peak
            async with pool.acquire():
                in_use += 1
                peak = max(peak, in_use)
                await asyncio.sleep(0.01)
                in_use -= 1

        with patch("plantwatch.lib.db.connection.Database", side_effect=_fake_db) as factory:
            await asyncio.gather(*[worker() for _ in range(6)])

        assert peak == 2
        assert factory.call_count == 2

    async def test_failed_connection_closed_and_kept_for_reconnect(self, pool):
        with patch("plantwatch.lib.db.connection.Database", side_effect=_fake_db):
            with pytest.raises(OSError):
                async with pool.acquire() as db:
                    raise OSError("disk I/O error")

        db.close.assert_awaited_once()
        assert pool._idle == [db]

    async def test_close_closes_idle_connections(self, pool):
        first, second = _fake_db(), _fake_db()
        pool._idle = [first, second]

        await pool.close()

        first.close.assert_awaited_once()
        second.close.assert_awaited_once()
        assert pool._idle == []
        assert pool._slots is None


class TestGetDb:
    """Tests for get_db() function."""

    @pytest.fixture
    def db_module(self):
        """Provide db module with automatic state restoration."""
        import plantwatch.lib.db.connection as db

        original_persistent = db._persistent
        original_pool = db._pool

        yield db

        db._persistent = original_persistent
        db._pool = original_pool

    async def test_prefers_persistent_connection(self, db_module):
        persistent = MagicMock()
        db_module._persistent = persistent

        async with get_db() as conn:
            assert conn is persistent

    async def test_falls_back_to_pool(self, db_module):
        db_module._persistent = None
        db_module._pool = ConnectionPool(max_size=1)

        with patch("plantwatch.lib.db.connection.Database", side_effect=_fake_db):
            async with get_db() as conn:
                conn.connect.assert_awaited_once()

        assert db_module._pool._idle == [conn]


class TestDatabase:
    """Tests for the Database wrapper."""

    async def test_query_without_connect_raises(self):
        with pytest.raises(DatabaseNotConnectedError):
            await Database(":memory:").fetchall("SELECT 1")

    async def test_rows_are_dicts(self):
        db = Database(":memory:")
        await db.connect()
        try:
            await db.executescript("CREATE TABLE t (a INTEGER, b TEXT)")
            await db.executemany("INSERT INTO t VALUES (?, ?)", [(1, "x"), (2, "y")])

            assert await db.fetchall("SELECT a, b FROM t ORDER BY a") == [
                {"a": 1, "b": "x"},
                {"a": 2, "b": "y"},
            ]
            assert await db.fetchone("SELECT b FROM t WHERE a = ?", (2,)) == {"b": "y"}
        finally:
            await db.close()

    async def test_transaction_rolls_back_on_error(self):
        db = Database(":memory:")
        await db.connect()
        try:
            await db.executescript("CREATE TABLE t (a INTEGER)")
            with pytest.raises(RuntimeError):
                async with db.transaction():
                    await db.execute("INSERT INTO t VALUES (1)")
                    raise RuntimeError("abort")

            assert await db.fetchall("SELECT a FROM t") == []
        finally:
            await db.close()
