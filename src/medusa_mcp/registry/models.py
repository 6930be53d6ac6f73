"""Tool descriptors and their parameter schemas."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

ToolFunction = Callable[[dict[str, Any]], Awaitable[Any]]


class ParameterSchema(BaseModel):
    """JSON-Schema-like description of a tool's arguments."""

    model_config = ConfigDict(frozen=True)

    type: str = "object"
    properties: dict[str, dict[str, Any]] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    @field_validator("required")
    @classmethod
    def _unique_required(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            msg = "required parameter names must be unique"
            raise ValueError(msg)
        return value


class ToolDescriptor(BaseModel):
    """A named, schema-described callable exposed to MCP clients.

    Built once per discovery pass and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    description: str = ""
    parameter_schema: ParameterSchema = Field(default_factory=ParameterSchema)
    invoke: ToolFunction

    def to_mcp(self) -> dict[str, Any]:
        """Project onto the ``tools/list`` wire shape (drops ``invoke``)."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameter_schema.model_dump(),
        }


ToolSource = tuple[str, Callable[[], ToolDescriptor]]
"""A ``(source name, descriptor factory)`` pair consumed by discovery."""
