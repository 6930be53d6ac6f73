"""Streamable HTTP transport — FastAPI application.

``POST /mcp`` carries JSON-RPC (single or batch) and always answers with
an ``Mcp-Session-Id`` header. ``GET /mcp`` opens a server-push SSE
stream for a known session, ``DELETE /mcp`` terminates a session, and
``OPTIONS`` is answered by the CORS middleware before anything else
runs. ``/health`` and ``/ready`` bypass authentication.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from sse_starlette.sse import EventSourceResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from medusa_mcp import __version__
from medusa_mcp.protocol.errors import ParseError
from medusa_mcp.protocol.jsonrpc import error_from_exception
from medusa_mcp.server import (
    build_client,
    build_dispatcher,
    build_registry,
    build_sessions,
)
from medusa_mcp.transports.auth import (
    LAST_EVENT_ID_HEADER,
    SESSION_HEADER,
    check_bearer,
    cors_headers,
    should_authenticate,
)

if TYPE_CHECKING:
    from medusa_mcp.config import Settings
    from medusa_mcp.medusa.client import MedusaClient
    from medusa_mcp.protocol.dispatcher import RequestDispatcher
    from medusa_mcp.protocol.session import SessionStore

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"
MAX_REQUEST_SIZE = 10 * 1024 * 1024
_DISCONNECT_POLL_SECONDS = 1.0

_AVAILABLE_ENDPOINTS = {
    "GET /health": "Health check",
    "GET /ready": "Readiness check",
    f"POST {MCP_PATH}": "MCP JSON-RPC endpoint (Streamable HTTP)",
    f"GET {MCP_PATH}": "MCP SSE stream (optional)",
    f"DELETE {MCP_PATH}": "Terminate MCP session",
}

Middleware = Callable[[Request], Awaitable[Response]]


def create_app(
    settings: Settings,
    *,
    dispatcher: RequestDispatcher | None = None,
    sessions: SessionStore | None = None,
    client: MedusaClient | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Collaborators default to the ones described by *settings*; tests pass
    their own.
    """
    if dispatcher is None:
        client = client or build_client(settings)
        dispatcher = build_dispatcher(settings, build_registry(settings, client))
    if sessions is None:
        sessions = build_sessions(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
        await sessions.start()
        try:
            yield
        finally:
            await sessions.stop()
            if client is not None:
                await client.aclose()

    app = FastAPI(title="Medusa MCP", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.dispatcher = dispatcher
    app.state.sessions = sessions

    _install_middleware(app, settings)
    _install_routes(app, settings, dispatcher, sessions)
    return app


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------


def _install_middleware(app: FastAPI, settings: Settings) -> None:
    protected = frozenset({MCP_PATH})

    # Each registration wraps the previous one: cors, then request log, then auth.
    @app.middleware("http")
    async def require_bearer(request: Request, call_next: Middleware) -> Response:
        if not should_authenticate(request.url.path, protected):
            return await call_next(request)
        failure = check_bearer(request.headers.get("authorization"), settings.mcp_auth_token)
        if failure is not None:
            return JSONResponse(failure.body, status_code=failure.status_code)
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Middleware) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        level = logging.ERROR if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s %d %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    @app.middleware("http")
    async def cors(request: Request, call_next: Middleware) -> Response:
        if request.method == "OPTIONS":
            response: Response = Response(status_code=204)
        else:
            response = await call_next(request)
        response.headers.update(cors_headers(request.headers.get("origin")))
        return response


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


def _install_routes(
    app: FastAPI,
    settings: Settings,
    dispatcher: RequestDispatcher,
    sessions: SessionStore,
) -> None:
    registry = dispatcher.registry

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return JSONResponse(
                {
                    "error": "Not Found",
                    "message": f"Endpoint {request.method} {request.url.path} not found",
                    "availableEndpoints": _AVAILABLE_ENDPOINTS,
                },
                status_code=404,
            )
        if exc.status_code == 405:
            return JSONResponse(
                {"error": "Method not allowed"}, status_code=405, headers=exc.headers
            )
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "version": __version__,
            "transport": "streamable-http",
            "protocolVersion": settings.mcp_protocol_version,
        }

    @app.get("/ready")
    async def ready() -> JSONResponse:
        try:
            tools = await registry.discover()
        except Exception as exc:
            logger.exception("Readiness check failed")
            return JSONResponse({"status": "not ready", "error": str(exc)}, status_code=503)
        return JSONResponse(
            {
                "status": "ready",
                "toolsCount": len(tools),
                "medusaUrl": "missing" if settings.missing_backend_settings() else "configured",
                "cache": registry.cache_stats(),
            }
        )

    @app.post(MCP_PATH)
    async def post_message(request: Request) -> Response:
        lookup = sessions.get_or_create(request.headers.get(SESSION_HEADER))
        headers = {SESSION_HEADER: lookup.id}
        if lookup.is_new:
            logger.debug("New session %s", lookup.id)

        body = await _read_body(request, MAX_REQUEST_SIZE)
        if body is None:
            error = ParseError("Parse error", "Request body too large")
            return JSONResponse(error_from_exception(None, error), status_code=413, headers=headers)

        result = await dispatcher.handle_raw(body, lookup.session)
        if result is None:
            return Response(status_code=204, headers=headers)
        return JSONResponse(result, headers=headers)

    @app.get(MCP_PATH)
    async def open_stream(request: Request) -> Response:
        session_id = request.headers.get(SESSION_HEADER)
        if not session_id or session_id not in sessions:
            return JSONResponse(
                {"error": f"Missing or invalid {SESSION_HEADER} header"}, status_code=400
            )
        sessions.get_or_create(session_id)

        last_event_id = request.headers.get(LAST_EVENT_ID_HEADER)
        if last_event_id:
            # No event log is kept, so there is nothing to replay.
            logger.info("Client resuming from event %s", last_event_id)

        return EventSourceResponse(
            _event_stream(request, sessions, session_id),
            ping=settings.mcp_sse_keepalive,
            headers={SESSION_HEADER: session_id},
        )

    @app.delete(MCP_PATH)
    async def terminate_session(request: Request) -> Response:
        session_id = request.headers.get(SESSION_HEADER)
        if not session_id:
            return JSONResponse({"error": f"Missing {SESSION_HEADER} header"}, status_code=400)
        if sessions.terminate(session_id):
            return Response(status_code=204)
        return JSONResponse({"error": "Session not found"}, status_code=404)


async def _read_body(request: Request, limit: int) -> bytes | None:
    """Read the request body, or return ``None`` once it exceeds *limit* bytes.

    A declared ``Content-Length`` over the limit is refused without reading.
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        return None

    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


async def _event_stream(
    request: Request,
    sessions: SessionStore,
    session_id: str,
) -> AsyncGenerator[dict[str, str], None]:
    """Announce the stream, then idle until the client leaves or the session ends.

    Keepalive comments are emitted by :class:`EventSourceResponse` itself.
    """
    yield {"event": "connected", "data": json.dumps({"sessionId": session_id})}
    while session_id in sessions:
        if await request.is_disconnected():
            break
        await asyncio.sleep(_DISCONNECT_POLL_SECONDS)
    logger.debug("SSE stream for session %s closed", session_id)
