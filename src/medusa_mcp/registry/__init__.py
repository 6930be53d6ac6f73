"""Tool registry: descriptor models and the cached discovery layer."""

from medusa_mcp.registry.models import ParameterSchema, ToolDescriptor, ToolSource
from medusa_mcp.registry.registry import ToolRegistry, content_envelope

__all__ = [
    "ParameterSchema",
    "ToolDescriptor",
    "ToolRegistry",
    "ToolSource",
    "content_envelope",
]
