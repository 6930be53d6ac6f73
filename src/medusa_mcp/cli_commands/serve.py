"""``medusa-mcp serve`` — run the gateway over STDIO or Streamable HTTP."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from medusa_mcp.cli_commands._output import config_option, load_cli_settings
from medusa_mcp.config import Settings
from medusa_mcp.utils.telemetry import configure_telemetry

logger = logging.getLogger(__name__)


@click.group()
def serve() -> None:
    """Run the MCP server."""


@serve.command("stdio")
@config_option
def stdio(config_path: Path | None) -> None:
    """Serve MCP over stdin/stdout (one session per process)."""
    settings = load_cli_settings(config_path)
    _maybe_configure_telemetry(settings)
    asyncio.run(_run_stdio(settings))


async def _run_stdio(settings: Settings) -> None:
    from medusa_mcp.server import build_client, build_dispatcher, build_registry
    from medusa_mcp.transports.stdio import StdioServer

    async with build_client(settings) as client:
        dispatcher = build_dispatcher(settings, build_registry(settings, client))
        await StdioServer(dispatcher).serve()


@serve.command("http")
@config_option
@click.option("--host", default=None, help="Interface to bind (default: HOST or 127.0.0.1).")
@click.option("--port", type=int, default=None, help="Port to bind (default: PORT or 3000).")
def http(config_path: Path | None, host: str | None, port: int | None) -> None:
    """Serve MCP over Streamable HTTP."""
    settings = load_cli_settings(config_path, host=host, port=port)

    missing = settings.missing_backend_settings()
    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)
    if not settings.mcp_auth_token:
        logger.warning(
            "MCP_AUTH_TOKEN not set. Authentication will fail for all requests to /mcp."
        )

    _maybe_configure_telemetry(settings)

    import uvicorn

    from medusa_mcp.transports.streamable_http import create_app

    logger.info("Streamable HTTP transport listening on %s:%d", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


def _maybe_configure_telemetry(settings: Settings) -> None:
    if not settings.otel_exporter_otlp_endpoint:
        return
    try:
        configure_telemetry(otlp_endpoint=settings.otel_exporter_otlp_endpoint)
    except ImportError as exc:
        logger.warning("Tracing disabled: %s", exc)
