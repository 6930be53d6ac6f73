"""Medusa admin API tools."""

from medusa_mcp.medusa.catalog import ADMIN_TOOLS, AdminAction, AdminToolSpec
from medusa_mcp.medusa.client import MedusaClient
from medusa_mcp.medusa.tools import AdminTool, admin_tool_sources

__all__ = [
    "ADMIN_TOOLS",
    "AdminAction",
    "AdminTool",
    "AdminToolSpec",
    "MedusaClient",
    "admin_tool_sources",
]
