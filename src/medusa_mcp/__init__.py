"""Medusa MCP — Model Context Protocol gateway for the Medusa admin API."""

from __future__ import annotations

__version__ = "1.0.5"

SERVER_NAME = "medusa-admin-mcp-server"
