"""RequestDispatcher — routes JSON-RPC messages to MCP method handlers.

Transport adapters decode bytes, resolve a :class:`Session`, and hand
the decoded payload to :meth:`RequestDispatcher.handle`. The dispatcher
never raises for a client-caused failure: every error becomes a JSON-RPC
error envelope, and errors raised while handling a notification are only
logged.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

from medusa_mcp.protocol.errors import (
    InvalidParamsError,
    InvalidRequestError,
    JsonRpcError,
    MethodNotFoundError,
    ToolTimeoutError,
)
from medusa_mcp.protocol.jsonrpc import (
    Notification,
    decode,
    error_from_exception,
    make_error,
    make_result,
    parse_message,
)
from medusa_mcp.utils.telemetry import (
    ATTR_METHOD,
    ATTR_NOTIFICATION,
    ATTR_SESSION_ID,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from medusa_mcp.protocol.session import Session
    from medusa_mcp.registry.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_PROTOCOL_VERSION = "2025-03-26"

Handler = Callable[[dict[str, Any], "Session"], Awaitable[Any]]
Response = dict[str, Any] | list[dict[str, Any]]


class RequestDispatcher:
    """Resolves MCP methods against a :class:`ToolRegistry`.

    Usage::

        dispatcher = RequestDispatcher(registry, server_info={"name": "x", "version": "1"})
        response = await dispatcher.handle(payload, session)   # None for notifications
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        server_info: dict[str, Any],
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
        tool_timeout: float | None = None,
    ) -> None:
        self._registry = registry
        self._server_info = dict(server_info)
        self._protocol_version = protocol_version
        self._tool_timeout = tool_timeout or None
        self._handlers: dict[str, Handler] = {
            "initialize": self._initialize,
            "notifications/initialized": self._initialized,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "ping": self._ping,
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def methods(self) -> list[str]:
        return list(self._handlers)

    async def handle_raw(self, raw: str | bytes, session: Session) -> Response | None:
        """Decode *raw* and dispatch it; undecodable input yields a ParseError."""
        try:
            payload = decode(raw)
        except JsonRpcError as exc:
            return error_from_exception(None, exc)
        return await self.handle(payload, session)

    async def handle(self, payload: Any, session: Session) -> Response | None:
        """Dispatch a decoded single message or batch.

        Returns ``None`` when nothing must be sent back: a notification, or
        a batch made only of notifications.
        """
        if isinstance(payload, list):
            if not payload:
                return make_error(None, InvalidRequestError.code, "Invalid Request", "empty batch")
            results = await asyncio.gather(*[self._handle_one(item, session) for item in payload])
            responses = [r for r in results if r is not None]
            return responses or None
        return await self._handle_one(payload, session)

    async def _handle_one(self, obj: Any, session: Session) -> dict[str, Any] | None:
        try:
            message = parse_message(obj)
        except InvalidRequestError as exc:
            return make_error(exc.request_id, exc.code, exc.message, exc.data)

        if isinstance(message, Notification):
            try:
                await self.execute_method(message.method, message.params, session, notification=True)
            except JsonRpcError as exc:
                logger.debug("Ignored notification %s: %s", message.method, exc.message)
            except Exception:
                logger.exception("Notification error for %s", message.method)
            return None

        try:
            result = await self.execute_method(message.method, message.params, session)
        except Exception as exc:
            if not isinstance(exc, JsonRpcError):
                logger.exception("Unhandled error in %s", message.method)
            return error_from_exception(message.id, exc)
        return make_result(message.id, result)

    async def execute_method(
        self,
        method: str,
        params: dict[str, Any],
        session: Session,
        *,
        notification: bool = False,
    ) -> Any:
        """Run the handler for *method*.

        Raises:
            MethodNotFoundError: *method* is not part of the method table.
        """
        handler = self._handlers.get(method)
        if handler is None:
            raise MethodNotFoundError(method)

        with _tracer.start_as_current_span(f"mcp.{method}") as span:
            span.set_attribute(ATTR_METHOD, method)
            span.set_attribute(ATTR_SESSION_ID, session.id)
            span.set_attribute(ATTR_NOTIFICATION, notification)
            return await handler(params, session)

    # ------------------------------------------------------------------
    # Method handlers
    # ------------------------------------------------------------------

    async def _initialize(self, params: dict[str, Any], session: Session) -> dict[str, Any]:
        session.initialized = True
        client_info = params.get("clientInfo")
        if isinstance(client_info, dict):
            session.client_info = client_info
        logger.info(
            "Session %s initialized by %s",
            session.id,
            (session.client_info or {}).get("name", "unknown client"),
        )
        return {
            "protocolVersion": self._protocol_version,
            "serverInfo": dict(self._server_info),
            "capabilities": {"tools": {}},
        }

    async def _initialized(self, params: dict[str, Any], session: Session) -> dict[str, Any]:
        session.initialized = True
        return {"acknowledged": True}

    async def _tools_list(self, params: dict[str, Any], session: Session) -> dict[str, Any]:
        tools = await self._registry.discover()
        return {"tools": self._registry.to_mcp_shape(tools)}

    async def _tools_call(self, params: dict[str, Any], session: Session) -> dict[str, Any]:
        name = params.get("name")
        if not name or not isinstance(name, str):
            raise InvalidParamsError("Missing tool name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("Tool arguments must be an object")

        trace.get_current_span().set_attribute(ATTR_TOOL_NAME, name)
        tools = await self._registry.discover()
        call = self._registry.execute(tools, name, arguments)
        if self._tool_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._tool_timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Tool %s timed out after %ss", name, self._tool_timeout)
            raise ToolTimeoutError(name, self._tool_timeout) from exc

    async def _ping(self, params: dict[str, Any], session: Session) -> dict[str, Any]:
        return {"pong": True}