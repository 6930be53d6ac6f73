"""``medusa-mcp tools`` — inspect and invoke tools without a client."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import click

from medusa_mcp.cli_commands._output import (
    config_option,
    console,
    load_cli_settings,
    print_cache_stats,
    print_tools_table,
)


@click.group()
def tools() -> None:
    """Discover and invoke tools."""


@tools.command("list")
@config_option
@click.option("--stats", is_flag=True, help="Also print tool cache statistics.")
def list_tools(config_path: Path | None, stats: bool) -> None:
    """List the tools the server exposes."""
    from medusa_mcp.server import build_client, build_registry

    settings = load_cli_settings(config_path)

    async def _list() -> tuple[list[dict[str, Any]], dict[str, Any]]:
        async with build_client(settings) as client:
            registry = build_registry(settings, client)
            entries = await registry.discover()
            return registry.to_mcp_shape(entries), registry.cache_stats()

    shaped, cache = asyncio.run(_list())
    if not shaped:
        console.print("[yellow]No tools discovered.[/yellow]")
        return

    print_tools_table(shaped)
    if stats:
        print_cache_stats(cache)


@tools.command("call")
@config_option
@click.argument("name")
@click.option("--args", "raw_args", default="{}", help="Tool arguments as a JSON object.")
def call_tool(config_path: Path | None, name: str, raw_args: str) -> None:
    """Invoke tool NAME once against the configured backend."""
    from medusa_mcp.server import build_client, build_registry

    try:
        arguments = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--args") from exc
    if not isinstance(arguments, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    settings = load_cli_settings(config_path)

    async def _call() -> dict[str, Any]:
        async with build_client(settings) as client:
            registry = build_registry(settings, client)
            return await registry.execute(await registry.discover(), name, arguments)

    try:
        result = asyncio.run(_call())
    except Exception as exc:
        console.print(f"[red]Tool error:[/red] {exc}")
        raise SystemExit(1) from exc

    for item in result["content"]:
        console.print(item["text"], markup=False, highlight=False)
