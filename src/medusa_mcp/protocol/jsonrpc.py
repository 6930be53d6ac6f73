"""JSON-RPC 2.0 decoding, message classification and envelopes.

Transport-independent: adapters hand raw bytes to :func:`decode` and
each decoded object to :func:`parse_message`, which returns either a
:class:`Call` (expects a response) or a :class:`Notification` (has no
``id``; never answered).
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field

from medusa_mcp.protocol.errors import (
    INTERNAL_ERROR,
    InvalidRequestError,
    ParseError,
)

JSONRPC_VERSION = "2.0"

RequestId = int | str | None


class Call(BaseModel):
    """A JSON-RPC request carrying an ``id``."""

    id: RequestId
    method: str
    params: dict[str, Any] = Field(default_factory=dict)


class Notification(BaseModel):
    """A JSON-RPC request without an ``id``."""

    method: str
    params: dict[str, Any] = Field(default_factory=dict)


Message = Call | Notification


def decode(raw: str | bytes) -> Any:
    """Decode a raw payload into a JSON value.

    Raises:
        ParseError: If *raw* is not valid UTF-8 JSON.
    """
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError("Parse error", "Invalid JSON") from exc


def parse_message(obj: Any) -> Message:
    """Classify a decoded JSON object as a :class:`Call` or :class:`Notification`.

    Raises:
        InvalidRequestError: If *obj* is not a JSON-RPC 2.0 request. The
            request id, when one can be read, is attached so the error
            response can echo it.
    """
    if not isinstance(obj, dict):
        raise InvalidRequestError("Invalid Request", "request must be an object")

    request_id = obj.get("id")
    if not _valid_id(request_id):
        raise InvalidRequestError("Invalid Request", "id must be a string or number")

    if obj.get("jsonrpc") != JSONRPC_VERSION:
        raise InvalidRequestError(
            "Invalid Request", 'jsonrpc must be "2.0"', request_id=request_id
        )

    method = obj.get("method")
    if not isinstance(method, str):
        raise InvalidRequestError(
            "Invalid Request", "method must be a string", request_id=request_id
        )

    params = obj.get("params")
    if params is None:
        params = {}
    elif not isinstance(params, dict):
        raise InvalidRequestError(
            "Invalid Request", "params must be an object", request_id=request_id
        )

    if "id" not in obj:
        return Notification(method=method, params=params)
    return Call(id=request_id, method=method, params=params)


def _valid_id(value: Any) -> bool:
    return value is None or (isinstance(value, (int, str)) and not isinstance(value, bool))


def make_result(request_id: RequestId, result: Any) -> dict[str, Any]:
    """Build a success envelope."""
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def make_error(
    request_id: RequestId,
    code: int,
    message: str,
    data: Any = None,
) -> dict[str, Any]:
    """Build an error envelope; ``data`` is omitted entirely when ``None``."""
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def error_from_exception(request_id: RequestId, exc: BaseException) -> dict[str, Any]:
    """Build an error envelope from any exception.

    An integer ``code`` attribute on the exception is honoured; anything
    else is reported as InternalError with the exception's message.
    """
    code = getattr(exc, "code", None)
    if isinstance(code, bool) or not isinstance(code, int):
        code = INTERNAL_ERROR
    message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
    return make_error(request_id, code, message, getattr(exc, "data", None))
