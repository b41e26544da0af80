"""Shared MCP application state: server instance, lifespan, helpers.

Tags: mcp, server, internal
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TypeVar

from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from tablespine import __version__
from tablespine.core.connection import parse_sqlite_url
from tablespine.core.errors import TablespineError
from tablespine.core.logging import get_logger
from tablespine.core.pool import SqlitePool
from tablespine.core.settings import TablespineSettings, load_settings
from tablespine.core.transports.mcp import create_service_mcp
from tablespine.ops.context import OperationContext
from tablespine.ops.result import OperationResult

T = TypeVar("T")

logger = get_logger("tablespine.mcp")

SERVER_NAME = "tablespine"
INSTRUCTIONS = "SQLite CRUD MCP"


@dataclass
class AppContext:
    """Lifespan state shared by every tool call."""

    pool: SqlitePool
    settings: TablespineSettings


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Open the pool before the first request and close it on shutdown."""
    settings = load_settings()
    info = parse_sqlite_url(settings.database_url)
    pool = SqlitePool(
        info,
        max_connections=settings.max_connections,
        busy_timeout=settings.busy_timeout,
        journal_mode=settings.journal_mode,
    )
    await pool.open()
    logger.info("server_ready", server=server.name, database=info.path)
    try:
        yield AppContext(pool=pool, settings=settings)
    finally:
        await pool.close()


mcp = create_service_mcp(
    name=SERVER_NAME,
    instructions=INSTRUCTIONS,
    lifespan=lifespan,
)


def _get_app(ctx: Context) -> AppContext:
    """Return the lifespan state for the current request."""
    return ctx.request_context.lifespan_context


def _op_context(ctx: Context) -> OperationContext:
    return OperationContext(pool=_get_app(ctx).pool, request_id=str(ctx.request_id), caller="mcp")


def _unwrap(result: OperationResult[T]) -> T:
    """Return the payload of a successful result, else raise ``ToolError``.

    The error text is ``"<CODE>: <message>"`` so callers can branch on the
    code without parsing the message.
    """
    if not result.success:
        error = result.error
        code = error.code if error else "INTERNAL"
        message = error.message if error else "unknown error"
        raise ToolError(f"{code}: {message}")
    return result.data  # type: ignore[return-value]


def _tool_error(exc: TablespineError) -> ToolError:
    """Map an error raised before an operation ran (argument conversion)."""
    logger.warning("tool_rejected", code=exc.code, error=exc.message)
    return ToolError(f"{exc.code}: {exc.message}")


def _get_version() -> str:
    return __version__


__all__ = [
    "AppContext",
    "INSTRUCTIONS",
    "SERVER_NAME",
    "lifespan",
    "mcp",
]
