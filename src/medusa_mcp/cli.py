"""medusa-mcp CLI entrypoint."""

from __future__ import annotations

import click

from medusa_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="medusa-mcp")
def main() -> None:
    """Medusa MCP — Model Context Protocol gateway for the Medusa admin API."""


# Register subcommands
from medusa_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
