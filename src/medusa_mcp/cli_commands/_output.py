"""Shared CLI helpers and output formatters."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from medusa_mcp.config import ConfigError, Settings, load_settings
from medusa_mcp.utils.logging import configure_logging

console = Console()

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file layered over the environment.",
)


def load_cli_settings(config_path: Path | None, **overrides: Any) -> Settings:
    """Load settings and configure logging, turning config errors into usage errors."""
    try:
        settings = load_settings(config_path, **overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(settings.log_level)
    return settings


def print_tools_table(tools: list[dict[str, Any]]) -> None:
    """Pretty-print MCP-shaped tools as a table."""
    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Actions", justify="right")
    table.add_column("Description")

    for tool in tools:
        schema = tool.get("inputSchema", {})
        actions = schema.get("properties", {}).get("action", {}).get("enum", [])
        table.add_row(
            tool.get("name", "?"),
            str(len(actions)) if actions else "-",
            _truncate(tool.get("description", "")),
        )

    console.print(table)


def print_cache_stats(stats: dict[str, Any]) -> None:
    console.print("\n[bold]Tool cache[/bold]")
    for key, value in stats.items():
        console.print(f"  {key}: {value}")


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
