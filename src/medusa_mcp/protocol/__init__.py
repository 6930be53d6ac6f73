"""JSON-RPC codec, sessions, and the MCP request dispatcher."""

from medusa_mcp.protocol.dispatcher import RequestDispatcher
from medusa_mcp.protocol.errors import (
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    JsonRpcError,
    MethodNotFoundError,
    MissingParameterError,
    ParseError,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
)
from medusa_mcp.protocol.jsonrpc import Call, Notification
from medusa_mcp.protocol.session import Session, SessionState, SessionStore

__all__ = [
    "Call",
    "InternalError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "MethodNotFoundError",
    "MissingParameterError",
    "Notification",
    "ParseError",
    "RequestDispatcher",
    "Session",
    "SessionState",
    "SessionStore",
    "ToolError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolTimeoutError",
]
