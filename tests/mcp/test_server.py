"""Tests for tablespine.mcp.server - registration and lifespan."""

import pytest

from tablespine.mcp import _app

EXPECTED_TOOLS = {
    "sqlite_insert",
    "sqlite_select",
    "sqlite_update",
    "sqlite_delete",
    "mcp_register_server",
    "mcp_unregister_server",
    "mcp_set_env",
    "mcp_get_env",
    "notebook_create",
    "notebook_append",
    "notebook_delete",
    "notebook_list",
    "notebook_get",
    "health_check",
}


class TestServer:
    def test_create_server(self):
        from tablespine.mcp.server import create_server

        server = create_server()
        assert server is _app.mcp
        assert server.name == "tablespine"
        assert server.instructions == "SQLite CRUD MCP"

    @pytest.mark.asyncio
    async def test_all_tools_registered(self):
        from tablespine.mcp.server import mcp

        tools = await mcp.list_tools()
        assert {tool.name for tool in tools} == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_context_parameter_hidden_from_schema(self):
        from tablespine.mcp.server import mcp

        tools = {tool.name: tool for tool in await mcp.list_tools()}
        props = tools["sqlite_update"].inputSchema["properties"]
        assert set(props) == {"table", "set", "where", "params"}
        assert "ctx" not in tools["health_check"].inputSchema.get("properties", {})


class TestLifespan:
    @pytest.mark.asyncio
    async def test_opens_and_closes_pool(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DATABASE_URL", "sqlite://./life.sqlite")

        async with _app.lifespan(_app.mcp) as app:
            pool = app.pool
            assert not pool.closed
            assert pool.info.path == str((tmp_path / "life.sqlite").resolve())
        assert pool.closed
