"""ToolRegistry — cached discovery, MCP projection, validated execution.

Discovery walks a fixed list of :data:`~medusa_mcp.registry.models.ToolSource`
factories. A factory that raises is logged and skipped; the pass as a
whole still succeeds. The resulting tuple of descriptors replaces the
cache in a single assignment, so readers see either the old or the new
sequence, never a mix.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

from medusa_mcp.protocol.errors import MissingParameterError, ToolNotFoundError
from medusa_mcp.registry.models import ToolDescriptor, ToolSource

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 5 * 60.0


class _CacheState(NamedTuple):
    entries: tuple[ToolDescriptor, ...]
    built_at: float


class ToolRegistry:
    """Discovers tool descriptors and caches them for ``ttl`` seconds.

    Usage::

        registry = ToolRegistry(admin_tool_sources(client))
        tools = await registry.discover()
        listing = registry.to_mcp_shape(tools)
        result = await registry.execute(tools, "manage_medusa_admin_orders", {...})
    """

    def __init__(
        self,
        sources: Sequence[ToolSource],
        *,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sources = list(sources)
        self._ttl = ttl
        self._clock = clock
        self._state: _CacheState | None = None
        self._rebuild_lock = asyncio.Lock()
        self._mcp_memo: tuple[tuple[ToolDescriptor, ...], list[dict[str, Any]]] | None = None
        self.discovery_count = 0

    @property
    def ttl(self) -> float:
        return self._ttl

    def _is_fresh(self, state: _CacheState | None) -> bool:
        return state is not None and (self._clock() - state.built_at) < self._ttl

    async def discover(self, force_refresh: bool = False) -> tuple[ToolDescriptor, ...]:
        """Return cached descriptors, rebuilding when stale or forced."""
        state = self._state
        if not force_refresh and self._is_fresh(state):
            assert state is not None
            return state.entries

        async with self._rebuild_lock:
            # Another waiter may have rebuilt while we queued for the lock.
            state = self._state
            if not force_refresh and self._is_fresh(state):
                assert state is not None
                return state.entries
            entries = await self._load_all()
            self._state = _CacheState(entries, self._clock())
            self._mcp_memo = None
            self.discovery_count += 1
            logger.info("Discovered %d tool(s)", len(entries))
            return entries

    async def _load_all(self) -> tuple[ToolDescriptor, ...]:
        entries: list[ToolDescriptor] = []
        seen: set[str] = set()
        for source_name, factory in self._sources:
            try:
                descriptor = factory()
            except Exception:
                logger.exception("Failed to load tool %s", source_name)
                continue
            if not isinstance(descriptor, ToolDescriptor):
                logger.error("Tool %s did not produce a ToolDescriptor", source_name)
                continue
            if descriptor.name in seen:
                logger.error(
                    "Tool %s redefines name %r; keeping the first definition",
                    source_name,
                    descriptor.name,
                )
                continue
            seen.add(descriptor.name)
            entries.append(descriptor)
            # Let other requests run between factories.
            await asyncio.sleep(0)
        return tuple(entries)

    def to_mcp_shape(self, entries: Sequence[ToolDescriptor]) -> list[dict[str, Any]]:
        """Project descriptors onto the ``tools/list`` shape.

        Memoized on the identity of *entries*; a rebuild drops the memo.
        """
        memo = self._mcp_memo
        if memo is not None and memo[0] is entries:
            return memo[1]
        shaped = [entry.to_mcp() for entry in entries]
        if isinstance(entries, tuple):
            self._mcp_memo = (entries, shaped)
        return shaped

    async def execute(
        self,
        entries: Sequence[ToolDescriptor],
        name: str,
        arguments: dict[str, Any],
    ) -> dict[str, Any]:
        """Validate required arguments, invoke the tool, wrap its result.

        Raises:
            ToolNotFoundError: No descriptor is named *name*.
            MissingParameterError: A required parameter is absent; the tool
                is not invoked.
        """
        tool = next((entry for entry in entries if entry.name == name), None)
        if tool is None:
            raise ToolNotFoundError(name)

        for parameter in tool.parameter_schema.required:
            if parameter not in arguments:
                raise MissingParameterError(name, parameter)

        try:
            result = await tool.invoke(arguments)
        except Exception as exc:
            logger.warning("Tool execution error for %s: %s", name, exc)
            raise

        return content_envelope(result)

    def cache_stats(self) -> dict[str, Any]:
        """Return cache statistics for readiness probes and the CLI."""
        state = self._state
        memo = self._mcp_memo
        return {
            "toolsCount": len(state.entries) if state else 0,
            "mcpToolsCount": len(memo[1]) if memo else 0,
            "cacheAge": (self._clock() - state.built_at) if state else 0,
            "isCacheValid": self._is_fresh(state),
        }


def content_envelope(result: Any) -> dict[str, Any]:
    """Wrap a tool's return value in the MCP text content envelope."""
    text = result if isinstance(result, str) else json.dumps(result, indent=2, default=str)
    return {"content": [{"type": "text", "text": text}]}
