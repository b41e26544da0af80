"""MCP server registry tools."""

from typing import Any

from mcp.server.fastmcp import Context

from tablespine.core.logging import LogContext
from tablespine.mcp import _app
from tablespine.ops.registry import (
    get_server_env,
    register_server,
    set_server_env,
    unregister_server,
)
from tablespine.ops.requests import SetServerEnvRequest

mcp = _app.mcp


@mcp.tool()
async def mcp_register_server(mcp_server_uuid: str, ctx: Context) -> dict[str, Any]:
    """Register an MCP server UUID as active (idempotent)."""
    async with LogContext(request_id=ctx.request_id, tool="mcp_register_server"):
        result = await register_server(_app._op_context(ctx), mcp_server_uuid)
        return _app._unwrap(result).to_dict()


@mcp.tool()
async def mcp_unregister_server(mcp_server_uuid: str, ctx: Context) -> dict[str, Any]:
    """Remove an MCP server UUID from the active set."""
    async with LogContext(request_id=ctx.request_id, tool="mcp_unregister_server"):
        result = await unregister_server(_app._op_context(ctx), mcp_server_uuid)
        return _app._unwrap(result).to_dict()


@mcp.tool()
async def mcp_set_env(mcp_server_uuid: str, env: Any, ctx: Context) -> dict[str, Any]:
    """Store the environment document (any JSON value) for an MCP server.

    Replaces any document already stored for that server.
    """
    async with LogContext(request_id=ctx.request_id, tool="mcp_set_env"):
        request = SetServerEnvRequest(mcp_server_uuid=mcp_server_uuid, env=env)
        result = await set_server_env(_app._op_context(ctx), request)
        return _app._unwrap(result).to_dict()


@mcp.tool()
async def mcp_get_env(mcp_server_uuid: str, ctx: Context) -> dict[str, Any]:
    """Fetch the environment document for an MCP server.

    Returns:
        ``{"env": <document>}``; ``null`` when none is stored
    """
    async with LogContext(request_id=ctx.request_id, tool="mcp_get_env"):
        result = await get_server_env(_app._op_context(ctx), mcp_server_uuid)
        return {"env": _app._unwrap(result)}
