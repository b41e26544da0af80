"""
SQLite connection pool.

A bounded set of ``sqlite3`` connections shared by every MCP call. One
operation holds one connection for exactly one statement::

    pool = SqlitePool(parse_sqlite_url("sqlite:///data/app.db"), max_connections=5)
    await pool.open()

    async with pool.acquire() as conn:          # StorePrimitive
        outcome = await conn.execute("DELETE FROM notes WHERE id = ?", (3,))

    await pool.close()

Manifesto:
    - **Scoped acquisition:** ``async with pool.acquire()`` returns the
      connection on every exit path, errors and cancellation included
    - **Off the event loop:** blocking ``sqlite3`` calls run in a worker
      thread; the calling task only suspends while its statement runs
    - **One statement, one transaction:** writes commit on success and roll
      back on failure; there is no multi-statement transaction API
    - **Owned, not global:** the pool is created by the server lifespan and
      handed to operations explicitly

Architecture:
    ::

        acquire() ──► semaphore (max_connections)
                        │
                        ├─ idle connection available? reuse it
                        └─ else open a new sqlite3 connection (in a thread)
                        ▼
                  PooledConnection.execute / query ── asyncio.to_thread
                        ▼
        release ◄── connection back on the idle list, semaphore released

    In-memory databases use a uniquely named shared-cache URI so every
    pooled connection sees the same data.

Guardrails:
    ❌ DON'T: Keep a PooledConnection after the ``async with`` block
    ✅ DO: Acquire per operation

    ❌ DON'T: Retry failed statements here
    ✅ DO: Surface ExecutionError with the store's message

Tags:
    connection-pool, sqlite, asyncio, tablespine
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import sqlite3
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

from tablespine.core.connection import ConnectionInfo
from tablespine.core.errors import DatabaseConnectionError, translate_sqlite_error
from tablespine.core.logging import get_logger
from tablespine.core.protocols import ExecuteOutcome, NativeRow
from tablespine.core.result import Err, Ok, Result

logger = get_logger(__name__)

T = TypeVar("T")

_memory_ids = itertools.count(1)

_ACCEPTED_TYPES: dict[type, tuple[type, ...]] = {
    int: (int,),
    float: (float,),
    str: (str,),
    bytes: (bytes, bytearray, memoryview),
}


@dataclass(frozen=True, slots=True)
class SqliteColumn:
    """One cell of a ``sqlite3`` result row."""

    name: str
    value: Any

    @property
    def is_null(self) -> bool:
        return self.value is None

    @property
    def native_type(self) -> str:
        return type(self.value).__name__

    def try_get(self, kind: type) -> Result[Any]:
        accepted = _ACCEPTED_TYPES.get(kind, (kind,))
        # sqlite3 never returns bool, but adapters registered by the host might
        if isinstance(self.value, accepted) and not isinstance(self.value, bool):
            return Ok(self.value)
        return Err(TypeError(f"column {self.name!r} holds {self.native_type}, not {kind.__name__}"))


class PooledConnection:
    """A ``sqlite3`` connection checked out of a :class:`SqlitePool`.

    Satisfies :class:`~tablespine.core.protocols.StorePrimitive`.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @property
    def raw(self) -> sqlite3.Connection:
        """The underlying ``sqlite3.Connection``."""
        return self._conn

    async def _run(self, fn: Callable[[], T]) -> T:
        task = asyncio.ensure_future(asyncio.to_thread(fn))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            # The worker thread still owns the connection; stop the statement
            # and wait for the thread before the connection can be reused.
            self._conn.interrupt()
            with contextlib.suppress(Exception):
                await task
            raise

    def _execute_sync(self, sql: str, params: tuple[Any, ...]) -> ExecuteOutcome:
        try:
            cursor = self._conn.execute(sql, params)
            outcome = ExecuteOutcome(last_insert_id=cursor.lastrowid, affected_count=max(cursor.rowcount, 0))
            self._conn.commit()
            return outcome
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise translate_sqlite_error(exc).with_context(sql=sql) from exc

    def _query_sync(self, sql: str, params: tuple[Any, ...]) -> list[NativeRow]:
        try:
            cursor = self._conn.execute(sql, params)
            names = [desc[0] for desc in cursor.description or ()]
            rows = cursor.fetchall()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise translate_sqlite_error(exc).with_context(sql=sql) from exc
        return [
            [SqliteColumn(name, value) for name, value in zip(names, row, strict=True)]
            for row in rows
        ]

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> ExecuteOutcome:
        """Run one write statement and commit it."""
        return await self._run(lambda: self._execute_sync(sql, params))

    async def query(self, sql: str, params: tuple[Any, ...] = ()) -> list[NativeRow]:
        """Run one read statement and return every row."""
        return await self._run(lambda: self._query_sync(sql, params))


class SqlitePool:
    """Bounded pool of ``sqlite3`` connections."""

    def __init__(
        self,
        info: ConnectionInfo,
        *,
        max_connections: int = 5,
        busy_timeout: float = 5.0,
        journal_mode: str | None = "WAL",
    ) -> None:
        if max_connections < 1:
            raise ValueError("max_connections must be >= 1")
        self._info = info
        self._max_connections = max_connections
        self._busy_timeout = busy_timeout
        self._journal_mode = journal_mode
        self._idle: list[sqlite3.Connection] = []
        self._all: list[sqlite3.Connection] = []
        self._semaphore = asyncio.Semaphore(max_connections)
        self._closed = False
        # Held open for the pool's lifetime so a shared in-memory db survives
        self._anchor: sqlite3.Connection | None = None
        if info.is_memory:
            self._target = f"file:tablespine_mem_{next(_memory_ids)}?mode=memory&cache=shared"
        elif info.readonly:
            self._target = f"file:{info.path}?mode=ro"
        else:
            self._target = info.path

    @property
    def info(self) -> ConnectionInfo:
        return self._info

    @property
    def size(self) -> int:
        """Connections currently open."""
        return len(self._all)

    @property
    def in_use(self) -> int:
        """Connections currently checked out."""
        return len(self._all) - len(self._idle)

    @property
    def max_connections(self) -> int:
        return self._max_connections

    @property
    def closed(self) -> bool:
        return self._closed

    def _connect_sync(self) -> sqlite3.Connection:
        uri = self._target.startswith("file:")
        try:
            conn = sqlite3.connect(
                self._target,
                timeout=self._busy_timeout,
                check_same_thread=False,
                uri=uri,
            )
        except sqlite3.Error as exc:
            raise DatabaseConnectionError(
                f"Failed to connect to SQLite at {self._info.path}: {exc}",
                cause=exc,
            ) from exc

        if self._journal_mode and not self._info.is_memory and not self._info.readonly:
            try:
                conn.execute(f"PRAGMA journal_mode = {self._journal_mode}")
            except sqlite3.Error as exc:
                logger.warning("journal_mode_not_applied", mode=self._journal_mode, error=str(exc))
        return conn

    async def _connect(self) -> sqlite3.Connection:
        task = asyncio.ensure_future(asyncio.to_thread(self._connect_sync))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            # The worker thread finishes opening regardless; close what it opened.
            with contextlib.suppress(Exception):
                (await task).close()
            raise

    async def open(self) -> None:
        """Open the first connection, proving the database is reachable."""
        if self._closed:
            raise DatabaseConnectionError("Pool is closed")
        if self._info.is_memory and self._anchor is None:
            self._anchor = await self._connect()
        if not self._all:
            conn = await self._connect()
            self._all.append(conn)
            self._idle.append(conn)
        logger.info(
            "pool_opened",
            path=self._info.path,
            max_connections=self._max_connections,
        )

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[PooledConnection]:
        """Check out one connection for the duration of the block."""
        if self._closed:
            raise DatabaseConnectionError("Pool is closed")

        await self._semaphore.acquire()
        conn: sqlite3.Connection | None = None
        try:
            if self._idle:
                conn = self._idle.pop()
            else:
                if self._info.is_memory and self._anchor is None:
                    self._anchor = await self._connect()
                conn = await self._connect()
                self._all.append(conn)
            yield PooledConnection(conn)
        finally:
            if conn is not None:
                if self._closed:
                    self._all.remove(conn)
                    conn.close()
                else:
                    if conn.in_transaction:
                        conn.rollback()
                    self._idle.append(conn)
            self._semaphore.release()

    async def close(self) -> None:
        """Close idle connections; checked-out ones close on release."""
        self._closed = True
        for conn in self._idle:
            self._all.remove(conn)
            conn.close()
        self._idle.clear()
        if self._anchor is not None:
            self._anchor.close()
            self._anchor = None
        logger.info("pool_closed", path=self._info.path)

    def stats(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "in_use": self.in_use,
            "max_connections": self._max_connections,
            "closed": self._closed,
        }


__all__ = [
    "SqliteColumn",
    "PooledConnection",
    "SqlitePool",
]
