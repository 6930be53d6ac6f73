"""MedusaClient — async HTTP client for the Medusa admin REST API."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from medusa_mcp.protocol.errors import ToolExecutionError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:9000"


def normalize_base_url(url: str) -> str:
    """Strip trailing slashes so paths can be appended verbatim."""
    return url.rstrip("/")


class MedusaClient:
    """Thin wrapper over a shared :class:`httpx.AsyncClient`.

    Authenticates with HTTP Basic, the API key as username and an empty
    password. Non-2xx responses raise :class:`ToolExecutionError`.

    Usage::

        async with MedusaClient(base_url, api_key) as client:
            orders = await client.request("GET", "/admin/orders", params={"limit": 5})
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = normalize_base_url(base_url)
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def configured(self) -> bool:
        return bool(self._base_url and self._api_key)

    async def __aenter__(self) -> MedusaClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self._base_url,
                auth=httpx.BasicAuth(self._api_key or "", ""),
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: Any = None,
        tool_name: str = "medusa",
    ) -> Any:
        """Perform one admin API call and return the decoded response.

        Raises:
            ToolExecutionError: Credentials are missing, the request fails
                at the transport level, or the backend answers non-2xx.
        """
        if not self.configured:
            raise ToolExecutionError(
                tool_name,
                "Medusa credentials not configured. Please set MEDUSA_BASE_URL and "
                "MEDUSA_API_KEY environment variables.",
            )

        logger.debug("%s %s", method, path)
        try:
            response = await self._client().request(
                method,
                path,
                params=_query_params(params) if params else None,
                json=body,
            )
        except httpx.HTTPError as exc:
            raise ToolExecutionError(tool_name, str(exc) or type(exc).__name__) from exc

        if response.is_error:
            raise ToolExecutionError(tool_name, f"HTTP {response.status_code}: {response.text}")

        if not response.content:
            return {"success": True}
        try:
            return response.json()
        except json.JSONDecodeError:
            return response.text


def _query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Coerce argument values into query-string friendly scalars."""
    query: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            query[key] = [str(v) for v in value]
        elif isinstance(value, dict):
            query[key] = json.dumps(value)
        else:
            query[key] = value
    return query
