"""Health-check MCP tool."""

from typing import Any

from mcp.server.fastmcp import Context

from tablespine.mcp import _app
from tablespine.ops.health import check_health

mcp = _app.mcp


@mcp.tool()
async def health_check(ctx: Context) -> dict[str, Any]:
    """Check database connectivity.

    Returns:
        Status, database path, pool usage and server version
    """
    result = await check_health(_app._op_context(ctx))
    report = result.data
    if not result.success or report is None:
        return {"status": "unhealthy", "error": result.error_message, "version": _app._get_version()}
    return {"status": "healthy" if report.connected else "unhealthy", **report.to_dict()}
