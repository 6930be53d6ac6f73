"""Shared fixtures for the medusa_mcp test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from medusa_mcp.protocol.dispatcher import RequestDispatcher
from medusa_mcp.protocol.session import SessionStore
from medusa_mcp.registry.models import ParameterSchema, ToolDescriptor
from medusa_mcp.registry.registry import ToolRegistry


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_descriptor(
    name: str = "echo",
    *,
    required: list[str] | None = None,
    result: Any = "ok",
    invoke: Any = None,
) -> ToolDescriptor:
    properties = {p: {"type": "string"} for p in (required or [])}
    return ToolDescriptor(
        name=name,
        description=f"{name} tool",
        parameter_schema=ParameterSchema(properties=properties, required=required or []),
        invoke=invoke or AsyncMock(return_value=result),
    )


@pytest.fixture
def tool_factory():
    return make_descriptor


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def echo_invoke() -> AsyncMock:
    return AsyncMock(side_effect=lambda args: {"echo": args})


@pytest.fixture
def registry(echo_invoke: AsyncMock, clock: FakeClock) -> ToolRegistry:
    sources = [
        ("echo", lambda: make_descriptor("echo", required=["message"], invoke=echo_invoke)),
        ("ping", lambda: make_descriptor("ping_tool", result="pong")),
    ]
    return ToolRegistry(sources, ttl=300, clock=clock)


@pytest.fixture
def dispatcher(registry: ToolRegistry) -> RequestDispatcher:
    return RequestDispatcher(
        registry,
        server_info={"name": "test-server", "version": "0.0.1"},
        protocol_version="2025-03-26",
        tool_timeout=5,
    )


@pytest.fixture
def sessions(clock: FakeClock) -> SessionStore:
    return SessionStore(ttl=1800, sweep_interval=300, clock=clock)
