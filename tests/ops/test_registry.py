"""Tests for tablespine.ops.registry."""

import pytest

from tablespine.ops.registry import get_server_env, register_server, set_server_env, unregister_server
from tablespine.ops.requests import SetServerEnvRequest

UUID = "6f1c2d4e-0000-4000-8000-000000000001"


class TestRegisterServer:
    @pytest.mark.asyncio
    async def test_idempotent(self, host_ctx):
        first = await register_server(host_ctx, UUID)
        second = await register_server(host_ctx, UUID)
        assert first.data.rows_affected == 1
        assert second.data.rows_affected == 0

    @pytest.mark.asyncio
    async def test_unregister(self, host_ctx):
        await register_server(host_ctx, UUID)
        assert (await unregister_server(host_ctx, UUID)).data.rows_affected == 1
        assert (await unregister_server(host_ctx, UUID)).data.rows_affected == 0


class TestServerEnv:
    @pytest.mark.asyncio
    async def test_set_then_get(self, host_ctx):
        env = {"API_KEY": "k", "RETRIES": 3}
        result = await set_server_env(host_ctx, SetServerEnvRequest(UUID, env))
        assert result.data.rows_affected == 1
        assert (await get_server_env(host_ctx, UUID)).data == env

    @pytest.mark.asyncio
    async def test_set_replaces(self, host_ctx):
        await set_server_env(host_ctx, SetServerEnvRequest(UUID, {"a": 1}))
        await set_server_env(host_ctx, SetServerEnvRequest(UUID, ["b"]))
        assert (await get_server_env(host_ctx, UUID)).data == ["b"]

    @pytest.mark.asyncio
    async def test_stored_as_canonical_json(self, host_ctx):
        await set_server_env(host_ctx, SetServerEnvRequest(UUID, {"b": 1, "a": 2}))
        async with host_ctx.pool.acquire() as conn:
            rows = await conn.query("SELECT environment_variables FROM mcp_environment_variables")
        assert rows[0][0].value == '{"a":2,"b":1}'

    @pytest.mark.asyncio
    async def test_get_unknown_server(self, host_ctx):
        result = await get_server_env(host_ctx, "missing")
        assert result.success
        assert result.data is None

    @pytest.mark.asyncio
    async def test_unparsable_text_reads_as_none(self, host_ctx):
        async with host_ctx.pool.acquire() as conn:
            await conn.execute(
                "INSERT INTO mcp_environment_variables VALUES (?, ?)",
                (UUID, "not json {"),
            )
        assert (await get_server_env(host_ctx, UUID)).data is None

    @pytest.mark.asyncio
    async def test_unencodable_env(self, recording_pool):
        from tablespine.ops.context import OperationContext

        result = await set_server_env(OperationContext(pool=recording_pool), SetServerEnvRequest(UUID, {"x": object()}))
        assert result.error.code == "BIND_ENCODING_FAILED"
        assert recording_pool.acquired == 0
