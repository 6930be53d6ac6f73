"""Component wiring shared by both transports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from medusa_mcp import SERVER_NAME, __version__
from medusa_mcp.medusa.client import MedusaClient
from medusa_mcp.medusa.tools import admin_tool_sources
from medusa_mcp.protocol.dispatcher import RequestDispatcher
from medusa_mcp.protocol.session import SessionStore
from medusa_mcp.registry.registry import ToolRegistry

if TYPE_CHECKING:
    from medusa_mcp.config import Settings

SERVER_INFO = {"name": SERVER_NAME, "version": __version__}


def build_client(settings: Settings) -> MedusaClient:
    return MedusaClient(
        settings.medusa_base_url,
        settings.medusa_api_key,
        timeout=settings.medusa_http_timeout,
    )


def build_registry(settings: Settings, client: MedusaClient) -> ToolRegistry:
    return ToolRegistry(admin_tool_sources(client), ttl=settings.mcp_tool_cache_ttl)


def build_dispatcher(settings: Settings, registry: ToolRegistry) -> RequestDispatcher:
    return RequestDispatcher(
        registry,
        server_info=SERVER_INFO,
        protocol_version=settings.mcp_protocol_version,
        tool_timeout=settings.mcp_tool_timeout,
    )


def build_sessions(settings: Settings) -> SessionStore:
    return SessionStore(
        ttl=settings.mcp_session_ttl,
        sweep_interval=settings.mcp_session_sweep_interval,
    )
