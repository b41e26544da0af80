"""Tests for tablespine.core.pool."""

import asyncio
import sqlite3
import threading

import pytest

from tablespine.core.connection import parse_sqlite_url
from tablespine.core.errors import (
    ConstraintViolationError,
    DatabaseConnectionError,
    ExecutionError,
)
from tablespine.core.pool import SqliteColumn, SqlitePool


class TestSqliteColumn:
    def test_try_get_matching_kind(self):
        assert SqliteColumn("c", 5).try_get(int).unwrap() == 5

    def test_try_get_other_kind_is_err(self):
        assert SqliteColumn("c", "5").try_get(int).is_err()

    def test_bool_never_reads_as_int(self):
        assert SqliteColumn("c", True).try_get(int).is_err()

    def test_memoryview_reads_as_bytes(self):
        assert SqliteColumn("c", memoryview(b"ab")).try_get(bytes).is_ok()


class TestSqlitePoolLifecycle:
    def test_rejects_zero_connections(self):
        with pytest.raises(ValueError):
            SqlitePool(parse_sqlite_url(":memory:"), max_connections=0)

    @pytest.mark.asyncio
    async def test_open_and_close(self, tmp_path):
        pool = SqlitePool(parse_sqlite_url(str(tmp_path / "a.db")))
        await pool.open()
        assert pool.size == 1
        assert pool.in_use == 0
        await pool.close()
        assert pool.closed
        assert pool.size == 0

    @pytest.mark.asyncio
    async def test_acquire_after_close_fails(self, tmp_path):
        pool = SqlitePool(parse_sqlite_url(str(tmp_path / "a.db")))
        await pool.open()
        await pool.close()
        with pytest.raises(DatabaseConnectionError):
            async with pool.acquire():
                pass

    @pytest.mark.asyncio
    async def test_wal_applied_to_file_databases(self, file_pool):
        async with file_pool.acquire() as conn:
            rows = await conn.query("PRAGMA journal_mode")
        assert rows[0][0].value == "wal"

    @pytest.mark.asyncio
    async def test_unreachable_path_fails_to_open(self, tmp_path):
        pool = SqlitePool(parse_sqlite_url(str(tmp_path / "missing" / "dir" / "a.db")))
        with pytest.raises(DatabaseConnectionError):
            await pool.open()


class TestSqlitePoolAcquire:
    @pytest.mark.asyncio
    async def test_connection_returned_after_block(self, memory_pool):
        async with memory_pool.acquire():
            assert memory_pool.in_use == 1
        assert memory_pool.in_use == 0

    @pytest.mark.asyncio
    async def test_connection_returned_after_error(self, memory_pool):
        with pytest.raises(RuntimeError):
            async with memory_pool.acquire():
                raise RuntimeError("boom")
        assert memory_pool.in_use == 0

    @pytest.mark.asyncio
    async def test_bounded_by_max_connections(self, memory_pool):
        hold = asyncio.Event()
        peak = 0

        async def worker():
            nonlocal peak
            async with memory_pool.acquire():
                peak = max(peak, memory_pool.in_use)
                await hold.wait()

        tasks = [asyncio.create_task(worker()) for _ in range(4)]
        await asyncio.sleep(0.05)
        assert memory_pool.in_use == memory_pool.max_connections == 2
        hold.set()
        await asyncio.gather(*tasks)
        assert peak == 2
        assert memory_pool.in_use == 0

    @pytest.mark.asyncio
    async def test_memory_database_shared_across_connections(self, memory_pool):
        async with memory_pool.acquire() as first:
            await first.execute("CREATE TABLE t (x INTEGER)")
            await first.execute("INSERT INTO t VALUES (1)")
            async with memory_pool.acquire() as second:
                rows = await second.query("SELECT x FROM t")
        assert rows[0][0].value == 1

    @pytest.mark.asyncio
    async def test_cancelled_task_releases_connection(self, memory_pool):
        started = asyncio.Event()

        async def holder():
            async with memory_pool.acquire():
                started.set()
                await asyncio.sleep(10)

        task = asyncio.create_task(holder())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert memory_pool.in_use == 0

    @pytest.mark.asyncio
    async def test_cancel_while_connecting_closes_new_connection(self, tmp_path, monkeypatch):
        pool = SqlitePool(parse_sqlite_url(str(tmp_path / "a.db")))
        entered = threading.Event()
        release = threading.Event()
        opened = []
        real_connect = pool._connect_sync

        def slow_connect():
            entered.set()
            release.wait(5)
            conn = real_connect()
            opened.append(conn)
            return conn

        monkeypatch.setattr(pool, "_connect_sync", slow_connect)

        async def use():
            async with pool.acquire():
                pass

        task = asyncio.create_task(use())
        await asyncio.to_thread(entered.wait, 5)
        task.cancel()
        release.set()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert pool.size == 0
        assert pool.in_use == 0
        assert len(opened) == 1
        with pytest.raises(sqlite3.ProgrammingError):
            opened[0].execute("SELECT 1")
        await pool.close()


class TestPooledConnection:
    @pytest.mark.asyncio
    async def test_execute_reports_rowid_and_count(self, memory_pool):
        async with memory_pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)")
            outcome = await conn.execute("INSERT INTO t (v) VALUES (?)", ("a",))
        assert outcome.last_insert_id == 1
        assert outcome.affected_count == 1

    @pytest.mark.asyncio
    async def test_store_message_kept_verbatim(self, memory_pool):
        async with memory_pool.acquire() as conn:
            with pytest.raises(ExecutionError) as exc_info:
                await conn.query("SELECT * FROM nope")
        assert exc_info.value.message == "no such table: nope"
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)
        assert exc_info.value.context.sql == "SELECT * FROM nope"

    @pytest.mark.asyncio
    async def test_constraint_violation(self, memory_pool):
        async with memory_pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY)")
            await conn.execute("INSERT INTO t (id) VALUES (1)")
            with pytest.raises(ConstraintViolationError, match="UNIQUE constraint failed"):
                await conn.execute("INSERT INTO t (id) VALUES (1)")

    @pytest.mark.asyncio
    async def test_failed_write_is_rolled_back(self, memory_pool):
        async with memory_pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT NOT NULL)")
            with pytest.raises(ConstraintViolationError):
                await conn.execute("INSERT INTO t (v) VALUES (NULL)")
            rows = await conn.query("SELECT COUNT(*) FROM t")
        assert rows[0][0].value == 0

    @pytest.mark.asyncio
    async def test_interrupted_statement_is_execution_error(self, memory_pool):
        endless = "WITH RECURSIVE c(x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM c) SELECT count(*) FROM c"
        async with memory_pool.acquire() as conn:
            task = asyncio.create_task(conn.query(endless))

            async def interrupt_until_done():
                # interrupt() is a no-op until the statement is actually running
                while not task.done():
                    conn.raw.interrupt()
                    await asyncio.sleep(0.01)

            await asyncio.wait_for(interrupt_until_done(), timeout=10)
            with pytest.raises(ExecutionError) as exc_info:
                await task
            assert exc_info.value.code == "EXECUTION_FAILED"
            assert exc_info.value.message == "interrupted"

            rows = await conn.query("SELECT 1")
        assert rows[0][0].value == 1
        assert memory_pool.in_use == 0
