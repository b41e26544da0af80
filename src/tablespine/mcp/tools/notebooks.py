"""Notebook MCP tools."""

from typing import Any

from mcp.server.fastmcp import Context

from tablespine.core.logging import LogContext
from tablespine.mcp import _app
from tablespine.ops.notebooks import (
    append_notebook,
    create_notebook,
    delete_notebook,
    get_notebook,
    list_notebooks,
)
from tablespine.ops.requests import (
    AppendNotebookRequest,
    CreateNotebookRequest,
    ListNotebooksRequest,
)

mcp = _app.mcp


@mcp.tool()
async def notebook_create(body: str, ctx: Context, title: str | None = None) -> dict[str, Any]:
    """Create a notebook with title and body.

    Returns:
        ``{"id": <new notebook id>}``
    """
    async with LogContext(request_id=ctx.request_id, tool="notebook_create"):
        result = await create_notebook(_app._op_context(ctx), CreateNotebookRequest(body=body, title=title))
        return {"id": _app._unwrap(result)}


@mcp.tool()
async def notebook_append(id: int, delta: str, ctx: Context) -> dict[str, Any]:
    """Append text to a notebook's body.

    Returns:
        ``{"rows_affected": n}``; 0 when the notebook does not exist
    """
    async with LogContext(request_id=ctx.request_id, tool="notebook_append"):
        result = await append_notebook(_app._op_context(ctx), AppendNotebookRequest(id=id, delta=delta))
        return _app._unwrap(result).to_dict()


@mcp.tool()
async def notebook_delete(id: int, ctx: Context) -> dict[str, Any]:
    """Delete a notebook by id."""
    async with LogContext(request_id=ctx.request_id, tool="notebook_delete"):
        result = await delete_notebook(_app._op_context(ctx), id)
        return _app._unwrap(result).to_dict()


@mcp.tool()
async def notebook_list(
    ctx: Context,
    query: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> dict[str, Any]:
    """List notebooks, newest first.

    Args:
        query: Only notebooks whose title or body contains this text
        limit: Page size (default 50, at most 500)
        offset: Notebooks to skip

    Returns:
        ``{"items": [{"id", "title", "snippet"}, ...]}``
    """
    async with LogContext(request_id=ctx.request_id, tool="notebook_list"):
        request = ListNotebooksRequest(query=query, limit=limit, offset=offset)
        result = await list_notebooks(_app._op_context(ctx), request)
        return {"items": [item.to_dict() for item in _app._unwrap(result)]}


@mcp.tool()
async def notebook_get(id: int, ctx: Context) -> dict[str, Any]:
    """Get a notebook by id.

    Returns:
        ``{"id", "title", "data"}``, or ``{}`` when there is no such notebook
    """
    async with LogContext(request_id=ctx.request_id, tool="notebook_get"):
        result = await get_notebook(_app._op_context(ctx), id)
        detail = _app._unwrap(result)
        return detail.to_dict() if detail is not None else {}
