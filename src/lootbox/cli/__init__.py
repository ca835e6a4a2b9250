"""
Lootbox CLI entry point.
"""

import click

from lootbox.config.app import load_config

from .mcp_client import mcp
from .utils import setup_logging


@click.group()
@click.option(
    "--settings",
    type=click.Path(exists=True),
    help="Path to Lootbox settings file (YAML or JSON)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--timeout",
    type=float,
    help="Seconds to wait for each MCP server handshake",
)
@click.pass_context
def cli(ctx: click.Context, settings: str | None, verbose: bool, timeout: float | None) -> None:
    """Lootbox - discover tools and resources across MCP servers."""
    ctx.ensure_object(dict)
    overrides = {
        "logging.level": "debug" if verbose else None,
        "mcp_client.connect_timeout": timeout,
    }
    try:
        config = load_config(settings, overrides=overrides)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj["config"] = config
    setup_logging(config.logging.level)


cli.add_command(mcp)
