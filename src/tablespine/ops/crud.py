"""
Generic CRUD operations.

Each function builds one statement, checks out one pooled connection, runs
the statement and releases the connection. Validation happens before the
pool is touched, so a rejected request never costs a connection.
"""

from __future__ import annotations

from tablespine.core.errors import TablespineError
from tablespine.core.marshal import marshal_row
from tablespine.core.statements import (
    build_delete,
    build_insert,
    build_select,
    build_update,
)
from tablespine.ops._failures import failed, internal
from tablespine.ops.context import OperationContext
from tablespine.ops.requests import (
    DeleteRequest,
    InsertRequest,
    SelectRequest,
    UpdateRequest,
)
from tablespine.ops.responses import InsertResponse, MutationResponse, SelectResponse
from tablespine.ops.result import OperationResult, start_timer


async def insert_row(
    ctx: OperationContext,
    request: InsertRequest,
) -> OperationResult[InsertResponse]:
    """Insert one row and report the store-assigned row id."""
    timer = start_timer()
    try:
        stmt = build_insert(request.table, request.values)
        params = stmt.native_params()
        async with ctx.pool.acquire() as conn:
            outcome = await conn.execute(stmt.sql, params)
        return OperationResult.ok(
            InsertResponse(generated_id=outcome.last_insert_id),
            elapsed_ms=timer.elapsed_ms,
        )
    except TablespineError as exc:
        return failed("insert", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("insert", ctx, exc, timer.elapsed_ms)


async def select_rows(
    ctx: OperationContext,
    request: SelectRequest,
) -> OperationResult[SelectResponse]:
    """Read rows; column order follows the store's result set."""
    timer = start_timer()
    try:
        stmt = build_select(
            request.table,
            columns=request.columns,
            where=request.where,
            params=request.params,
            order_by=request.order_by,
            limit=request.limit,
            offset=request.offset,
        )
        params = stmt.native_params()
        async with ctx.pool.acquire() as conn:
            native_rows = await conn.query(stmt.sql, params)
        rows = [marshal_row(row) for row in native_rows]
        return OperationResult.ok(SelectResponse(rows=rows), elapsed_ms=timer.elapsed_ms)
    except TablespineError as exc:
        return failed("select", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("select", ctx, exc, timer.elapsed_ms)


async def update_rows(
    ctx: OperationContext,
    request: UpdateRequest,
) -> OperationResult[MutationResponse]:
    """Update matching rows (all rows when no filter is given)."""
    timer = start_timer()
    try:
        stmt = build_update(request.table, request.set, where=request.where, params=request.params)
        params = stmt.native_params()
        async with ctx.pool.acquire() as conn:
            outcome = await conn.execute(stmt.sql, params)
        return OperationResult.ok(
            MutationResponse(affected_count=outcome.affected_count),
            elapsed_ms=timer.elapsed_ms,
        )
    except TablespineError as exc:
        return failed("update", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("update", ctx, exc, timer.elapsed_ms)


async def delete_rows(
    ctx: OperationContext,
    request: DeleteRequest,
) -> OperationResult[MutationResponse]:
    """Delete matching rows (all rows when no filter is given)."""
    timer = start_timer()
    try:
        stmt = build_delete(request.table, where=request.where, params=request.params)
        params = stmt.native_params()
        async with ctx.pool.acquire() as conn:
            outcome = await conn.execute(stmt.sql, params)
        return OperationResult.ok(
            MutationResponse(affected_count=outcome.affected_count),
            elapsed_ms=timer.elapsed_ms,
        )
    except TablespineError as exc:
        return failed("delete", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("delete", ctx, exc, timer.elapsed_ms)
