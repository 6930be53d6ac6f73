"""Bearer-token authentication and CORS helpers for the HTTP transport.

Authentication is a constant-time equality check against one
process-wide secret. An unconfigured secret fails closed.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

SESSION_HEADER = "Mcp-Session-Id"
LAST_EVENT_ID_HEADER = "Last-Event-ID"

_PUBLIC_PATHS = frozenset({"/health", "/ready"})


class AuthFailure(NamedTuple):
    status_code: int
    body: dict[str, Any]


def _unauthorized(message: str) -> AuthFailure:
    return AuthFailure(401, {"error": "Unauthorized", "message": message})


def should_authenticate(path: str, protected_paths: frozenset[str]) -> bool:
    """Return True when *path* requires a bearer token."""
    if path in _PUBLIC_PATHS:
        return False
    return path in protected_paths


def check_bearer(authorization: str | None, expected_token: str | None) -> AuthFailure | None:
    """Validate an ``Authorization`` header value.

    Returns ``None`` on success, or the status and JSON body to reject with.
    """
    if not authorization:
        return _unauthorized("Missing Authorization header")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return _unauthorized("Invalid Authorization header format. Expected: Bearer <token>")

    if not expected_token:
        logger.error("MCP_AUTH_TOKEN environment variable not set")
        return AuthFailure(
            500,
            {
                "error": "Internal Server Error",
                "message": "Server authentication not configured",
            },
        )

    if not hmac.compare_digest(token.encode("utf-8"), expected_token.encode("utf-8")):
        return _unauthorized("Invalid token")
    return None


def cors_headers(origin: str | None) -> dict[str, str]:
    """CORS response headers reflecting the request origin."""
    headers = {
        "Access-Control-Allow-Origin": origin or "*",
        "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": (
            f"Content-Type, Authorization, {SESSION_HEADER}, {LAST_EVENT_ID_HEADER}"
        ),
        "Access-Control-Expose-Headers": SESSION_HEADER,
        "Access-Control-Max-Age": "86400",
    }
    if origin:
        headers["Vary"] = "Origin"
    return headers
