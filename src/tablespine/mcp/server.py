"""tablespine MCP server.

Exposes generic SQLite CRUD plus the notebook and server-registry helpers
as MCP tools. Shared state lives in :mod:`tablespine.mcp._app`; the tools
live in :mod:`tablespine.mcp.tools`.

Tags: mcp, server, sqlite, crud
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from tablespine.core.settings import load_settings
from tablespine.core.transports.mcp import run_service_mcp
from tablespine.mcp._app import AppContext, lifespan, mcp

# Import tools to trigger @mcp.tool() registration
from tablespine.mcp import tools  # noqa: F401,E402


def create_server() -> FastMCP:
    """Return the MCP server with every tool registered."""
    return mcp


def run() -> None:
    """Run the MCP server (entry point for the ``tablespine-mcp`` script)."""
    settings = load_settings()
    run_service_mcp(
        mcp,
        default_port=settings.port,
        host=settings.host,
        log_level=settings.log_level,
        log_json=settings.log_json,
        log_name="tablespine-mcp",
    )


__all__ = ["AppContext", "create_server", "lifespan", "mcp", "run"]
