"""Generic table CRUD MCP tools.

Table and column names are validated; ``where`` and ``order_by`` are passed
to SQLite verbatim and must come from a trusted caller.
"""

from typing import Any

from mcp.server.fastmcp import Context

from tablespine.core.errors import BindEncodingError
from tablespine.core.logging import LogContext
from tablespine.mcp import _app
from tablespine.ops.crud import delete_rows, insert_row, select_rows, update_rows
from tablespine.ops.requests import (
    DeleteRequest,
    InsertRequest,
    SelectRequest,
    UpdateRequest,
)

mcp = _app.mcp


@mcp.tool()
async def sqlite_insert(table: str, values: dict[str, Any], ctx: Context) -> dict[str, Any]:
    """Insert one row into a table.

    Args:
        table: Table name (letters, digits, underscore; not starting with a digit)
        values: Column name to value; nested arrays/objects are stored as JSON text

    Returns:
        ``{"generated_id": <rowid>}``
    """
    async with LogContext(request_id=ctx.request_id, tool="sqlite_insert"):
        try:
            request = InsertRequest.from_wire(table, values)
        except BindEncodingError as exc:
            raise _app._tool_error(exc) from exc
        result = await insert_row(_app._op_context(ctx), request)
        return _app._unwrap(result).to_dict()


@mcp.tool()
async def sqlite_select(
    table: str,
    ctx: Context,
    columns: list[str] | None = None,
    where: str | None = None,
    params: list[Any] | None = None,
    order_by: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> dict[str, Any]:
    """Select rows from a table.

    Args:
        table: Table name
        columns: Columns to return; omit for all columns
        where: SQL filter, e.g. ``"id > ?"`` (trusted, passed through verbatim)
        params: Values for the ``?`` placeholders in ``where``
        order_by: SQL ordering, e.g. ``"id DESC"`` (trusted)
        limit: Maximum rows to return
        offset: Rows to skip

    Returns:
        ``{"rows": [{column: value, ...}, ...]}``; blobs are base64 strings
    """
    async with LogContext(request_id=ctx.request_id, tool="sqlite_select"):
        try:
            request = SelectRequest.from_wire(
                table,
                columns=columns,
                where=where,
                params=params,
                order_by=order_by,
                limit=limit,
                offset=offset,
            )
        except BindEncodingError as exc:
            raise _app._tool_error(exc) from exc
        result = await select_rows(_app._op_context(ctx), request)
        return _app._unwrap(result).to_dict()


@mcp.tool()
async def sqlite_update(
    table: str,
    set: dict[str, Any],
    ctx: Context,
    where: str | None = None,
    params: list[Any] | None = None,
) -> dict[str, Any]:
    """Update rows in a table.

    Args:
        table: Table name
        set: Column name to new value
        where: SQL filter (trusted); omit to update every row
        params: Values for the ``?`` placeholders in ``where``

    Returns:
        ``{"affected_count": n}``
    """
    async with LogContext(request_id=ctx.request_id, tool="sqlite_update"):
        try:
            request = UpdateRequest.from_wire(table, set, where=where, params=params)
        except BindEncodingError as exc:
            raise _app._tool_error(exc) from exc
        result = await update_rows(_app._op_context(ctx), request)
        return _app._unwrap(result).to_dict()


@mcp.tool()
async def sqlite_delete(
    table: str,
    ctx: Context,
    where: str | None = None,
    params: list[Any] | None = None,
) -> dict[str, Any]:
    """Delete rows from a table.

    Args:
        table: Table name
        where: SQL filter (trusted); omit to delete every row
        params: Values for the ``?`` placeholders in ``where``

    Returns:
        ``{"affected_count": n}``
    """
    async with LogContext(request_id=ctx.request_id, tool="sqlite_delete"):
        try:
            request = DeleteRequest.from_wire(table, where=where, params=params)
        except BindEncodingError as exc:
            raise _app._tool_error(exc) from exc
        result = await delete_rows(_app._op_context(ctx), request)
        return _app._unwrap(result).to_dict()
