"""
MCP server registry operations.

Keeps track of which MCP servers are active (``active_mcp_servers``) and
stores one JSON environment document per server
(``mcp_environment_variables``). Both tables belong to the host application
and are keyed by ``mcp_server_uuid``.
"""

from __future__ import annotations

import json
from typing import Any

from tablespine.core.errors import TablespineError
from tablespine.core.logging import get_logger
from tablespine.core.marshal import marshal_row
from tablespine.core.statements import BoundStatement
from tablespine.core.values import Text, canonical_json
from tablespine.ops._failures import failed, internal
from tablespine.ops.context import OperationContext
from tablespine.ops.requests import SetServerEnvRequest
from tablespine.ops.responses import RowsAffected
from tablespine.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


async def _execute(op: str, ctx: OperationContext, stmt: BoundStatement) -> OperationResult[RowsAffected]:
    timer = start_timer()
    try:
        async with ctx.pool.acquire() as conn:
            outcome = await conn.execute(stmt.sql, stmt.native_params())
        return OperationResult.ok(RowsAffected(outcome.affected_count), elapsed_ms=timer.elapsed_ms)
    except TablespineError as exc:
        return failed(op, ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal(op, ctx, exc, timer.elapsed_ms)


async def register_server(ctx: OperationContext, mcp_server_uuid: str) -> OperationResult[RowsAffected]:
    """Mark a server active. Registering twice is a no-op (0 rows affected)."""
    stmt = BoundStatement(
        "INSERT OR IGNORE INTO active_mcp_servers (mcp_server_uuid) VALUES (?)",
        (Text(mcp_server_uuid),),
    )
    return await _execute("mcp_register_server", ctx, stmt)


async def unregister_server(ctx: OperationContext, mcp_server_uuid: str) -> OperationResult[RowsAffected]:
    stmt = BoundStatement(
        "DELETE FROM active_mcp_servers WHERE mcp_server_uuid = ?",
        (Text(mcp_server_uuid),),
    )
    return await _execute("mcp_unregister_server", ctx, stmt)


async def set_server_env(ctx: OperationContext, request: SetServerEnvRequest) -> OperationResult[RowsAffected]:
    """Insert or replace the environment document for one server."""
    timer = start_timer()
    try:
        env_text = canonical_json(request.env)
    except TablespineError as exc:
        return failed("mcp_set_env", ctx, exc, timer.elapsed_ms)

    stmt = BoundStatement(
        "INSERT INTO mcp_environment_variables (mcp_server_uuid, environment_variables) VALUES (?, ?) "
        "ON CONFLICT(mcp_server_uuid) DO UPDATE SET environment_variables = excluded.environment_variables",
        (Text(request.mcp_server_uuid), Text(env_text)),
    )
    return await _execute("mcp_set_env", ctx, stmt)


async def get_server_env(ctx: OperationContext, mcp_server_uuid: str) -> OperationResult[Any]:
    """Return the parsed environment document, or ``None``.

    ``None`` covers both an unknown server and stored text that is not JSON.
    """
    timer = start_timer()
    stmt = BoundStatement(
        "SELECT environment_variables FROM mcp_environment_variables WHERE mcp_server_uuid = ?",
        (Text(mcp_server_uuid),),
    )
    try:
        async with ctx.pool.acquire() as conn:
            native_rows = await conn.query(stmt.sql, stmt.native_params())
    except TablespineError as exc:
        return failed("mcp_get_env", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("mcp_get_env", ctx, exc, timer.elapsed_ms)

    if not native_rows:
        return OperationResult.ok(None, elapsed_ms=timer.elapsed_ms)

    stored = marshal_row(native_rows[0]).get("environment_variables")
    if not isinstance(stored, Text):
        return OperationResult.ok(None, elapsed_ms=timer.elapsed_ms)
    try:
        env = json.loads(stored.value)
    except json.JSONDecodeError:
        logger.warning("env_not_json", mcp_server_uuid=mcp_server_uuid)
        env = None
    return OperationResult.ok(env, elapsed_ms=timer.elapsed_ms)
