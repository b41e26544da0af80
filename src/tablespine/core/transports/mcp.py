"""MCP server scaffold.

Builds the ``FastMCP`` instance tools register on, and provides the console
script entry point that picks stdio or streamable-http from ``sys.argv``::

    from tablespine.core.transports.mcp import create_service_mcp, run_service_mcp

    mcp = create_service_mcp(
        name="tablespine",
        instructions="SQLite CRUD MCP",
        lifespan=lifespan,
    )

    @mcp.tool()
    async def sqlite_select(...): ...

    def run():
        run_service_mcp(mcp, default_port=8100)
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any

from mcp.server.fastmcp import FastMCP

from tablespine.core.logging import configure_logging, get_logger


def create_service_mcp(
    name: str,
    instructions: str,
    lifespan: Callable[..., Any],
) -> FastMCP:
    """Create a FastMCP server instance.

    Parameters
    ----------
    name : str
        MCP server name (e.g. "tablespine").
    instructions : str
        Natural language description of the server's capabilities.
    lifespan : async context manager factory
        Receives the server, yields the application context.

    Returns
    -------
    FastMCP
        Configured server instance; register tools on it.
    """
    return FastMCP(
        name,
        instructions=instructions,
        lifespan=lifespan,
    )


def parse_transport_args(argv: list[str], default_port: int) -> tuple[str, int]:
    """Return ``(transport, port)`` from ``--transport/-t`` and ``--port/-p``."""
    transport = "stdio"
    port = default_port

    i = 0
    while i < len(argv):
        if argv[i] in ("--transport", "-t") and i + 1 < len(argv):
            transport = argv[i + 1]
            i += 2
        elif argv[i] in ("--port", "-p") and i + 1 < len(argv):
            port = int(argv[i + 1])
            i += 2
        else:
            i += 1
    return transport, port


def run_service_mcp(
    mcp: FastMCP,
    *,
    default_port: int = 8100,
    host: str = "0.0.0.0",
    log_level: str = "INFO",
    log_json: bool | None = None,
    log_name: str | None = None,
) -> None:
    """Console-script entry point: start the server on stdio or HTTP.

    Parameters
    ----------
    mcp : FastMCP
        The configured server instance.
    default_port : int
        Port for the HTTP transport when ``--port`` is not given.
    host : str
        Bind address for the HTTP transport.
    log_level, log_json :
        Passed to :func:`~tablespine.core.logging.configure_logging`.
    log_name : str | None
        Service name in log lines. Defaults to the MCP server name.
    """
    name = log_name or mcp.name
    configure_logging(level=log_level, json_format=log_json, service=name)
    logger = get_logger(name)

    transport, port = parse_transport_args(sys.argv[1:], default_port)

    if transport in ("http", "streamable-http"):
        mcp.settings.host = host
        mcp.settings.port = port
        logger.info("mcp_starting", transport="streamable-http", port=port)
        mcp.run(transport="streamable-http")
    else:
        logger.info("mcp_starting", transport="stdio")
        mcp.run(transport="stdio")


__all__ = [
    "create_service_mcp",
    "parse_transport_args",
    "run_service_mcp",
]
