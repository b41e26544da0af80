"""
Notebook operations.

Fixed statements against the host application's ``notebooks`` table
(``id``, ``title``, ``data``). Bodies are appended to in place, so a
notebook can be grown one chunk at a time.
"""

from __future__ import annotations

from tablespine.core.errors import TablespineError
from tablespine.core.marshal import marshal_row
from tablespine.core.statements import BoundStatement
from tablespine.core.values import DynamicValue, Integer, Text
from tablespine.ops._failures import failed, internal
from tablespine.ops.context import OperationContext
from tablespine.ops.requests import (
    AppendNotebookRequest,
    CreateNotebookRequest,
    ListNotebooksRequest,
)
from tablespine.ops.responses import NotebookDetail, NotebookSummary, RowsAffected
from tablespine.ops.result import OperationResult, start_timer

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 500
SNIPPET_LENGTH = 200


def _int_or(value: DynamicValue | None, default: int = 0) -> int:
    return value.value if isinstance(value, Integer) else default


def _text_or(value: DynamicValue | None, default: str = "") -> str:
    return value.value if isinstance(value, Text) else default


def clamp_page(limit: int | None, offset: int | None) -> tuple[int, int]:
    """Return ``(limit, offset)`` with defaults applied and bounds enforced."""
    limit = DEFAULT_LIST_LIMIT if limit is None else limit
    offset = 0 if offset is None else offset
    return max(1, min(limit, MAX_LIST_LIMIT)), max(0, offset)


async def create_notebook(
    ctx: OperationContext,
    request: CreateNotebookRequest,
) -> OperationResult[int]:
    """Insert a notebook and return its id. A missing title is stored as ``""``."""
    timer = start_timer()
    try:
        stmt = BoundStatement(
            "INSERT INTO notebooks (title, data) VALUES (?, ?)",
            (Text(request.title or ""), Text(request.body)),
        )
        async with ctx.pool.acquire() as conn:
            outcome = await conn.execute(stmt.sql, stmt.native_params())
        return OperationResult.ok(outcome.last_insert_id or 0, elapsed_ms=timer.elapsed_ms)
    except TablespineError as exc:
        return failed("notebook_create", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("notebook_create", ctx, exc, timer.elapsed_ms)


async def append_notebook(
    ctx: OperationContext,
    request: AppendNotebookRequest,
) -> OperationResult[RowsAffected]:
    timer = start_timer()
    try:
        stmt = BoundStatement(
            "UPDATE notebooks SET data = COALESCE(data, '') || ? WHERE id = ?",
            (Text(request.delta), Integer(request.id)),
        )
        async with ctx.pool.acquire() as conn:
            outcome = await conn.execute(stmt.sql, stmt.native_params())
        return OperationResult.ok(RowsAffected(outcome.affected_count), elapsed_ms=timer.elapsed_ms)
    except TablespineError as exc:
        return failed("notebook_append", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("notebook_append", ctx, exc, timer.elapsed_ms)


async def delete_notebook(ctx: OperationContext, notebook_id: int) -> OperationResult[RowsAffected]:
    timer = start_timer()
    try:
        stmt = BoundStatement("DELETE FROM notebooks WHERE id = ?", (Integer(notebook_id),))
        async with ctx.pool.acquire() as conn:
            outcome = await conn.execute(stmt.sql, stmt.native_params())
        return OperationResult.ok(RowsAffected(outcome.affected_count), elapsed_ms=timer.elapsed_ms)
    except TablespineError as exc:
        return failed("notebook_delete", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("notebook_delete", ctx, exc, timer.elapsed_ms)


async def list_notebooks(
    ctx: OperationContext,
    request: ListNotebooksRequest | None = None,
) -> OperationResult[list[NotebookSummary]]:
    """List notebooks newest first.

    With a query, only notebooks whose title or body contains it (``LIKE``,
    case-insensitive for ASCII) are returned. Each item carries the first
    200 characters of the body as ``snippet``.
    """
    request = request or ListNotebooksRequest()
    timer = start_timer()
    limit, offset = clamp_page(request.limit, request.offset)

    sql = f"SELECT id, title, substr(data, 1, {SNIPPET_LENGTH}) AS snippet FROM notebooks"
    params: tuple[DynamicValue, ...] = ()
    if request.query:
        pattern = Text(f"%{request.query}%")
        sql += " WHERE (title LIKE ? OR data LIKE ?)"
        params = (pattern, pattern)
    sql += " ORDER BY id DESC LIMIT ? OFFSET ?"
    stmt = BoundStatement(sql, params + (Integer(limit), Integer(offset)))

    try:
        async with ctx.pool.acquire() as conn:
            native_rows = await conn.query(stmt.sql, stmt.native_params())
        items = []
        for native in native_rows:
            row = marshal_row(native)
            items.append(
                NotebookSummary(
                    id=_int_or(row.get("id")),
                    title=_text_or(row.get("title")),
                    snippet=_text_or(row.get("snippet")),
                )
            )
        return OperationResult.ok(items, elapsed_ms=timer.elapsed_ms)
    except TablespineError as exc:
        return failed("notebook_list", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("notebook_list", ctx, exc, timer.elapsed_ms)


async def get_notebook(ctx: OperationContext, notebook_id: int) -> OperationResult[NotebookDetail | None]:
    """Fetch one notebook; ``data`` is ``None`` on success when it does not exist."""
    timer = start_timer()
    try:
        stmt = BoundStatement("SELECT id, title, data FROM notebooks WHERE id = ?", (Integer(notebook_id),))
        async with ctx.pool.acquire() as conn:
            native_rows = await conn.query(stmt.sql, stmt.native_params())
        if not native_rows:
            return OperationResult.ok(None, elapsed_ms=timer.elapsed_ms)
        row = marshal_row(native_rows[0])
        detail = NotebookDetail(
            id=_int_or(row.get("id")),
            title=_text_or(row.get("title")),
            data=_text_or(row.get("data")),
        )
        return OperationResult.ok(detail, elapsed_ms=timer.elapsed_ms)
    except TablespineError as exc:
        return failed("notebook_get", ctx, exc, timer.elapsed_ms)
    except Exception as exc:
        return internal("notebook_get", ctx, exc, timer.elapsed_ms)
