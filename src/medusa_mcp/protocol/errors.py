"""Shared error types for the protocol layer.

Every error that can reach a client carries a JSON-RPC ``code``; the
dispatcher turns it into an error envelope without inspecting the type.
"""

from __future__ import annotations

from typing import Any

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class JsonRpcError(Exception):
    """Base error for all failures reported through a JSON-RPC envelope."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)


class ParseError(JsonRpcError):
    """The payload is not valid JSON."""

    code = PARSE_ERROR


class InvalidRequestError(JsonRpcError):
    """The payload is JSON but not a valid JSON-RPC 2.0 request."""

    code = INVALID_REQUEST

    def __init__(self, message: str, data: Any = None, *, request_id: Any = None) -> None:
        self.request_id = request_id
        super().__init__(message, data)


class MethodNotFoundError(JsonRpcError):
    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class InvalidParamsError(JsonRpcError):
    code = INVALID_PARAMS


class InternalError(JsonRpcError):
    code = INTERNAL_ERROR


# ---------------------------------------------------------------------------
# Tool-domain errors, surfaced as InternalError unless mapped otherwise
# ---------------------------------------------------------------------------


class ToolError(InternalError):
    """Base error for tool lookup and execution failures."""


class ToolNotFoundError(ToolError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class MissingParameterError(ToolError):
    """A parameter listed as required by the tool's schema was not supplied."""

    def __init__(self, tool_name: str, parameter: str) -> None:
        self.tool_name = tool_name
        self.parameter = parameter
        super().__init__(f"Missing required parameter: {parameter}")


class ToolExecutionError(ToolError):
    """A tool invocation failed at the backend side."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(detail or f"Tool execution failed: {name}")


class ToolTimeoutError(ToolError):
    """A tool invocation exceeded the configured per-call timeout."""

    def __init__(self, name: str, timeout: float) -> None:
        self.name = name
        self.timeout = timeout
        super().__init__(
            f"Tool {name} timed out after {timeout}s", data={"timeout": timeout}
        )
