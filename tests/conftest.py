"""
Shared pytest fixtures for tablespine tests.

This module provides:
- SQLite pools (shared in-memory and temporary file) opened and closed per test
- A seeded ``items`` table plus the notebook / registry tables
- ``RecordingPool``, a fake connection source that records every acquire

Usage:
    Fixtures are auto-discovered by pytest::

        @pytest.mark.asyncio
        async def test_something(items_ctx):
            result = await select_rows(items_ctx, SelectRequest(table="items"))
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from tablespine.core.connection import parse_sqlite_url
from tablespine.core.pool import SqlitePool
from tablespine.core.protocols import ExecuteOutcome
from tablespine.ops.context import OperationContext

ITEMS_DDL = (
    "CREATE TABLE items ("
    "id INTEGER PRIMARY KEY, "
    "name TEXT NOT NULL, "
    "qty INTEGER, "
    "price REAL, "
    "payload BLOB)"
)

HOST_TABLES_DDL = (
    "CREATE TABLE notebooks (id INTEGER PRIMARY KEY AUTOINCREMENT, title TEXT, data TEXT)",
    "CREATE TABLE active_mcp_servers (mcp_server_uuid TEXT PRIMARY KEY)",
    "CREATE TABLE mcp_environment_variables ("
    "mcp_server_uuid TEXT PRIMARY KEY, environment_variables TEXT)",
)

SEED_ITEMS = [
    (1, "apple", 3, 0.5),
    (2, "banana", 12, 0.25),
    (3, "cherry", 100, 0.1),
    (4, "date", 7, 1.5),
    (5, "elderberry", 0, 2.0),
]


# =============================================================================
# Fakes
# =============================================================================


class RecordingPool:
    """Connection source that records acquisitions and statements.

    Writes report ``outcome``; reads return ``rows``.
    """

    def __init__(self, *, rows: list | None = None, outcome: ExecuteOutcome | None = None) -> None:
        self.acquired = 0
        self.statements: list[tuple[str, tuple[Any, ...]]] = []
        self.rows = rows or []
        self.outcome = outcome or ExecuteOutcome(last_insert_id=None, affected_count=0)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[RecordingPool]:
        self.acquired += 1
        yield self

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> ExecuteOutcome:
        self.statements.append((sql, params))
        return self.outcome

    async def query(self, sql: str, params: tuple[Any, ...] = ()) -> list:
        self.statements.append((sql, params))
        return self.rows


# =============================================================================
# Pools
# =============================================================================


async def _run_ddl(pool: SqlitePool, *statements: str) -> None:
    async with pool.acquire() as conn:
        for sql in statements:
            await conn.execute(sql)


@pytest_asyncio.fixture
async def memory_pool() -> AsyncIterator[SqlitePool]:
    """Shared-cache in-memory pool with two connections."""
    pool = SqlitePool(parse_sqlite_url("sqlite::memory:"), max_connections=2)
    await pool.open()
    yield pool
    await pool.close()


@pytest_asyncio.fixture
async def file_pool(tmp_path: Path) -> AsyncIterator[SqlitePool]:
    """Pool over a temporary database file."""
    pool = SqlitePool(parse_sqlite_url(str(tmp_path / "test.sqlite")), max_connections=3)
    await pool.open()
    yield pool
    await pool.close()


@pytest_asyncio.fixture
async def items_pool(memory_pool: SqlitePool) -> SqlitePool:
    """In-memory pool with the ``items`` table seeded with five rows."""
    await _run_ddl(memory_pool, ITEMS_DDL)
    async with memory_pool.acquire() as conn:
        for row in SEED_ITEMS:
            await conn.execute("INSERT INTO items (id, name, qty, price) VALUES (?, ?, ?, ?)", row)
    return memory_pool


@pytest_asyncio.fixture
async def host_pool(memory_pool: SqlitePool) -> SqlitePool:
    """In-memory pool with the notebook and server-registry tables."""
    await _run_ddl(memory_pool, *HOST_TABLES_DDL)
    return memory_pool


@pytest.fixture
def items_ctx(items_pool: SqlitePool) -> OperationContext:
    return OperationContext(pool=items_pool, caller="test")


@pytest.fixture
def host_ctx(host_pool: SqlitePool) -> OperationContext:
    return OperationContext(pool=host_pool, caller="test")


@pytest.fixture
def recording_pool() -> RecordingPool:
    return RecordingPool()
