"""Tests for ToolRegistry discovery, caching and execution."""

import json
from unittest.mock import AsyncMock

import pytest

from medusa_mcp.protocol.errors import MissingParameterError, ToolNotFoundError
from medusa_mcp.registry.models import ParameterSchema
from medusa_mcp.registry.registry import ToolRegistry, content_envelope


class TestDiscovery:
    async def test_discover_returns_all_descriptors(self, registry: ToolRegistry) -> None:
        tools = await registry.discover()
        assert [tool.name for tool in tools] == ["echo", "ping_tool"]
        assert registry.discovery_count == 1

    async def test_cache_hit_within_ttl(self, registry: ToolRegistry, clock) -> None:
        first = await registry.discover()
        clock.advance(299)
        second = await registry.discover()
        assert second is first
        assert registry.discovery_count == 1

    async def test_rebuild_after_ttl(self, registry: ToolRegistry, clock) -> None:
        first = await registry.discover()
        clock.advance(300)
        second = await registry.discover()
        assert second is not first
        assert registry.discovery_count == 2

    async def test_force_refresh(self, registry: ToolRegistry) -> None:
        await registry.discover()
        await registry.discover(force_refresh=True)
        assert registry.discovery_count == 2

    async def test_failing_factory_is_skipped(self, tool_factory) -> None:
        def broken():
            raise RuntimeError("cannot build")

        registry = ToolRegistry([("broken", broken), ("ok", lambda: tool_factory("ok"))])
        tools = await registry.discover()
        assert [tool.name for tool in tools] == ["ok"]

    async def test_non_descriptor_is_skipped(self, tool_factory) -> None:
        registry = ToolRegistry([("odd", lambda: {"name": "odd"}), ("ok", lambda: tool_factory("ok"))])
        tools = await registry.discover()
        assert [tool.name for tool in tools] == ["ok"]

    async def test_duplicate_names_keep_first(self, tool_factory) -> None:
        first = tool_factory("dup", result="first")
        second = tool_factory("dup", result="second")
        registry = ToolRegistry([("a", lambda: first), ("b", lambda: second)])
        tools = await registry.discover()
        assert len(tools) == 1
        assert tools[0] is first


class TestMcpShape:
    async def test_projection(self, registry: ToolRegistry) -> None:
        shaped = registry.to_mcp_shape(await registry.discover())
        assert shaped[0] == {
            "name": "echo",
            "description": "echo tool",
            "inputSchema": {
                "type": "object",
                "properties": {"message": {"type": "string"}},
                "required": ["message"],
            },
        }

    async def test_memoized_per_cache_build(self, registry: ToolRegistry) -> None:
        tools = await registry.discover()
        assert registry.to_mcp_shape(tools) is registry.to_mcp_shape(tools)
        rebuilt = await registry.discover(force_refresh=True)
        assert registry.to_mcp_shape(rebuilt) is not registry.to_mcp_shape(tools)


class TestExecute:
    async def test_unknown_tool(self, registry: ToolRegistry) -> None:
        with pytest.raises(ToolNotFoundError, match="Tool not found: missing"):
            await registry.execute(await registry.discover(), "missing", {})

    async def test_missing_parameter_is_checked_before_invoke(
        self, registry: ToolRegistry, echo_invoke: AsyncMock
    ) -> None:
        with pytest.raises(MissingParameterError) as exc_info:
            await registry.execute(await registry.discover(), "echo", {"other": 1})
        assert exc_info.value.parameter == "message"
        echo_invoke.assert_not_awaited()

    async def test_result_is_pretty_printed(self, registry: ToolRegistry) -> None:
        result = await registry.execute(await registry.discover(), "echo", {"message": "hi"})
        text = result["content"][0]["text"]
        assert text == json.dumps({"echo": {"message": "hi"}}, indent=2)

    async def test_invoke_errors_propagate(self, tool_factory) -> None:
        tool = tool_factory("bad", invoke=AsyncMock(side_effect=ValueError("nope")))
        registry = ToolRegistry([("bad", lambda: tool)])
        with pytest.raises(ValueError, match="nope"):
            await registry.execute(await registry.discover(), "bad", {})


class TestCacheStats:
    def test_empty_cache(self, registry: ToolRegistry) -> None:
        assert registry.cache_stats() == {
            "toolsCount": 0,
            "mcpToolsCount": 0,
            "cacheAge": 0,
            "isCacheValid": False,
        }

    async def test_after_listing(self, registry: ToolRegistry, clock) -> None:
        registry.to_mcp_shape(await registry.discover())
        clock.advance(12)
        stats = registry.cache_stats()
        assert stats["toolsCount"] == 2
        assert stats["mcpToolsCount"] == 2
        assert stats["cacheAge"] == 12
        assert stats["isCacheValid"] is True


class TestContentEnvelope:
    def test_string_passes_through(self) -> None:
        assert content_envelope("plain") == {"content": [{"type": "text", "text": "plain"}]}

    def test_none_is_serialized(self) -> None:
        assert content_envelope(None)["content"][0]["text"] == "null"


class TestParameterSchema:
    def test_duplicate_required_names_rejected(self) -> None:
        with pytest.raises(ValueError, match="unique"):
            ParameterSchema(required=["a", "a"])
