"""SQLite connection handling for the plant data store.

The monitor holds one long-lived connection for its whole run (init_db()
at startup, close_db() on shutdown). The web server never calls init_db(),
so get_db() hands out pooled connections to request handlers instead.
Callers only ever use get_db() and do not need to know which is active.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from functools import cache
from pathlib import Path
from typing import Any, cast

import aiosqlite

from plantwatch.lib.config import get_settings
from plantwatch.lib.db.types import SQLParams
from plantwatch.lib.exceptions import DatabaseNotConnectedError
from plantwatch.logging import get_logger

_logger = get_logger("lib.db")

_SQL_DIR = Path(__file__).resolve().parent.parent / "sql"

# Applied in order; every statement is idempotent
_SCHEMA_TEMPLATES = (
    "init_species_table.sql",
    "init_room_table.sql",
    "init_plant_table.sql",
    "idx_plant.sql",
    "init_plant_time_series_table.sql",
    "idx_plant_time_series.sql",
)


@cache
def load_template(name: str) -> str:
    """Read a query template from the sql/ directory (cached).

    Raises:
        FileNotFoundError: If no template with that name is shipped.
    """
    path = _SQL_DIR / name
    if not path.is_file():
        raise FileNotFoundError(f"SQL template not found: {path}")
    return path.read_text()


def _row_as_dict(cursor: aiosqlite.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    columns = [col[0] for col in cursor.description or ()]
    return dict(zip(columns, row, strict=True))


class Database:
    """A single aiosqlite connection returning rows as dicts."""

    def __init__(self, db_path: str | None = None) -> None:
        self._db_path = db_path or get_settings().db_path
        self._connection: aiosqlite.Connection | None = None
        self._in_transaction = False

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def _conn(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise DatabaseNotConnectedError()
        return self._connection

    async def connect(self) -> None:
        if self._connection is not None:
            return
        self._connection = await aiosqlite.connect(
            self._db_path, timeout=get_settings().db_timeout_sec
        )
        self._connection.row_factory = _row_as_dict  # type: ignore[assignment]

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Group writes so they are committed or rolled back together."""
        conn = self._conn
        await conn.execute("BEGIN")
        self._in_transaction = True
        try:
            yield
        except Exception:
            await conn.rollback()
            raise
        else:
            await conn.commit()
        finally:
            self._in_transaction = False

    async def _commit_unless_in_transaction(self) -> None:
        if not self._in_transaction:
            await self._conn.commit()

    async def execute(self, sql: str, params: SQLParams = ()) -> int:
        """Run one write statement and return the affected row count."""
        cursor = await self._conn.execute(sql, params)
        await self._commit_unless_in_transaction()
        return cursor.rowcount

    async def executemany(self, sql: str, params_seq: Sequence[SQLParams]) -> None:
        await self._conn.executemany(sql, params_seq)
        await self._commit_unless_in_transaction()

    async def executescript(self, sql: str) -> None:
        await self._conn.executescript(sql)

    async def fetchone(self, sql: str, params: SQLParams = ()) -> dict[str, Any] | None:
        async with self._conn.execute(sql, params) as cursor:
            return cast(dict[str, Any] | None, await cursor.fetchone())

    async def fetchall(self, sql: str, params: SQLParams = ()) -> list[dict[str, Any]]:
        async with self._conn.execute(sql, params) as cursor:
            return cast(list[dict[str, Any]], await cursor.fetchall())


class ConnectionPool:
    """Reusable connections for request handlers.

    At most ``max_size`` connections are checked out at once; further
    callers wait for one to be released.
    """

    def __init__(self, max_size: int = 5) -> None:
        self._max_size = max_size
        self._idle: list[Database] = []
        self._slots: asyncio.Semaphore | None = None

    def _get_slots(self) -> asyncio.Semaphore:
        # Created on first use so it binds to the running loop
        if self._slots is None:
            self._slots = asyncio.Semaphore(self._max_size)
        return self._slots

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[Database]:
        async with self._get_slots():
            db = self._idle.pop() if self._idle else Database()
            try:
                await db.connect()
                yield db
            except Exception:
                # A connection that failed mid-use is reopened on next checkout
                await db.close()
                raise
            finally:
                self._idle.append(db)

    async def close(self) -> None:
        """Close every idle connection. The pool stays usable afterwards."""
        idle, self._idle = self._idle, []
        for db in idle:
            await db.close()
        self._slots = None
        if idle:
            _logger.info("Closed %d pooled connections", len(idle))


_persistent: Database | None = None
_pool = ConnectionPool()


@asynccontextmanager
async def get_db() -> AsyncIterator[Database]:
    """Yield the persistent connection if one is open, else a pooled one."""
    if _persistent is not None:
        yield _persistent
        return
    async with _pool.acquire() as db:
        yield db


async def create_schema(db: Database) -> None:
    """Create the plant tables and indexes if they are missing."""
    for name in _SCHEMA_TEMPLATES:
        await db.executescript(load_template(name))


async def init_db() -> None:
    """Open the persistent connection and make sure the schema exists."""
    global _persistent
    if _persistent is None:
        _persistent = Database()
        await _persistent.connect()
        _logger.info("Opened persistent database connection: %s", _persistent._db_path)

    await _persistent.execute("PRAGMA journal_mode=WAL")
    await create_schema(_persistent)


async def close_db() -> None:
    """Close the persistent connection, if any, and drain the pool."""
    global _persistent
    if _persistent is not None:
        await _persistent.close()
        _persistent = None
        _logger.info("Closed persistent database connection")

    await _pool.close()
