"""Tests for tablespine.ops.notebooks."""

import pytest

from tablespine.ops.context import OperationContext
from tablespine.ops.notebooks import (
    append_notebook,
    clamp_page,
    create_notebook,
    delete_notebook,
    get_notebook,
    list_notebooks,
)
from tablespine.ops.requests import AppendNotebookRequest, CreateNotebookRequest, ListNotebooksRequest


class TestClampPage:
    @pytest.mark.parametrize(
        ("limit", "offset", "expected"),
        [
            (None, None, (50, 0)),
            (0, -5, (1, 0)),
            (10_000, 3, (500, 3)),
            (20, 40, (20, 40)),
        ],
    )
    def test_bounds(self, limit, offset, expected):
        assert clamp_page(limit, offset) == expected


class TestNotebookLifecycle:
    @pytest.mark.asyncio
    async def test_create_append_get(self, host_ctx):
        created = await create_notebook(host_ctx, CreateNotebookRequest(body="hello", title="first"))
        assert created.success
        notebook_id = created.data

        appended = await append_notebook(host_ctx, AppendNotebookRequest(id=notebook_id, delta=" world"))
        assert appended.data.to_dict() == {"rows_affected": 1}

        fetched = await get_notebook(host_ctx, notebook_id)
        assert fetched.data.to_dict() == {"id": notebook_id, "title": "first", "data": "hello world"}

    @pytest.mark.asyncio
    async def test_missing_title_stored_empty(self, host_ctx):
        created = await create_notebook(host_ctx, CreateNotebookRequest(body="b"))
        fetched = await get_notebook(host_ctx, created.data)
        assert fetched.data.title == ""

    @pytest.mark.asyncio
    async def test_append_to_null_body(self, host_ctx):
        async with host_ctx.pool.acquire() as conn:
            outcome = await conn.execute("INSERT INTO notebooks (title, data) VALUES ('t', NULL)")
        await append_notebook(host_ctx, AppendNotebookRequest(id=outcome.last_insert_id, delta="x"))
        fetched = await get_notebook(host_ctx, outcome.last_insert_id)
        assert fetched.data.data == "x"

    @pytest.mark.asyncio
    async def test_get_missing(self, host_ctx):
        result = await get_notebook(host_ctx, 404)
        assert result.success
        assert result.data is None

    @pytest.mark.asyncio
    async def test_delete(self, host_ctx):
        created = await create_notebook(host_ctx, CreateNotebookRequest(body="b"))
        assert (await delete_notebook(host_ctx, created.data)).data.rows_affected == 1
        assert (await delete_notebook(host_ctx, created.data)).data.rows_affected == 0


class TestListNotebooks:
    @pytest.mark.asyncio
    async def test_newest_first_with_snippet(self, host_ctx):
        for i in range(3):
            await create_notebook(host_ctx, CreateNotebookRequest(body="x" * 300, title=f"n{i}"))
        result = await list_notebooks(host_ctx)
        assert [item.title for item in result.data] == ["n2", "n1", "n0"]
        assert all(len(item.snippet) == 200 for item in result.data)

    @pytest.mark.asyncio
    async def test_query_matches_title_or_body(self, host_ctx):
        await create_notebook(host_ctx, CreateNotebookRequest(body="groceries", title="list"))
        await create_notebook(host_ctx, CreateNotebookRequest(body="meeting notes", title="work"))
        await create_notebook(host_ctx, CreateNotebookRequest(body="nothing", title="Grocery run"))
        result = await list_notebooks(host_ctx, ListNotebooksRequest(query="grocer"))
        assert sorted(item.title for item in result.data) == ["Grocery run", "list"]

    @pytest.mark.asyncio
    async def test_paging(self, host_ctx):
        for i in range(5):
            await create_notebook(host_ctx, CreateNotebookRequest(body="b", title=f"n{i}"))
        result = await list_notebooks(host_ctx, ListNotebooksRequest(limit=2, offset=1))
        assert [item.title for item in result.data] == ["n3", "n2"]

    @pytest.mark.asyncio
    async def test_clamped_limit_bound_as_params(self, recording_pool):
        await list_notebooks(OperationContext(pool=recording_pool), ListNotebooksRequest(limit=0, offset=-1))
        sql, params = recording_pool.statements[0]
        assert sql.endswith("ORDER BY id DESC LIMIT ? OFFSET ?")
        assert params == (1, 0)

    @pytest.mark.asyncio
    async def test_missing_table_is_execution_failure(self, items_ctx):
        result = await list_notebooks(items_ctx)
        assert result.error.code == "EXECUTION_FAILED"
        assert "no such table" in result.error.message
