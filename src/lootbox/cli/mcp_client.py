"""
MCP client CLI commands.

- status: connect to every configured server and report its status
- schemas: connect, then fetch and print each server's tools and resources
"""

import asyncio
import json
import sys
from typing import Any

import click

from lootbox.config.app import AppConfig
from lootbox.mcp_client import (
    ConfigError,
    MCPClientManager,
    MCPSchemaFetcher,
    ServerSchemas,
    load_mcp_config,
)


def _make_manager(config: AppConfig) -> MCPClientManager:
    return MCPClientManager(
        client_name=config.mcp_client.client_name,
        connect_timeout=config.mcp_client.connect_timeout,
    )


def _load_servers(ctx: click.Context, config_path: str | None) -> dict[str, Any]:
    """Load the MCP servers file or exit with an error."""
    config: AppConfig = ctx.obj["config"]
    path = config_path or config.mcp_client.config_path
    try:
        return load_mcp_config(path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


async def _collect_statuses(manager: MCPClientManager, servers: dict[str, Any]) -> dict[str, str]:
    try:
        await manager.connect_all(servers)
        return {name: status.value for name, status in manager.all_statuses().items()}
    finally:
        await manager.disconnect_all()


async def _collect_schemas(
    manager: MCPClientManager,
    fetcher: MCPSchemaFetcher,
    servers: dict[str, Any],
    server_filter: str | None,
) -> list[ServerSchemas]:
    try:
        await manager.connect_all(servers)
        collected = []
        for name in manager.connected_names():
            if server_filter and name != server_filter:
                continue
            session = manager.get_session(name)
            if session is None:
                continue
            collected.append(await fetcher.fetch_schemas(session, name))
        return collected
    finally:
        await manager.disconnect_all()


@click.group("mcp")
def mcp() -> None:
    """Inspect configured MCP servers."""
    pass


@mcp.command("status")
@click.option("--config", "config_path", help="Path to MCP servers file (.mcp.json)")
@click.option("--json", "json_format", is_flag=True, help="Output as JSON")
@click.pass_context
def status(ctx: click.Context, config_path: str | None, json_format: bool) -> None:
    """Connect to every configured server and report its status."""
    servers = _load_servers(ctx, config_path)
    manager = _make_manager(ctx.obj["config"])
    statuses = asyncio.run(_collect_statuses(manager, servers))

    if json_format:
        click.echo(json.dumps(statuses, indent=2))
        return

    if not statuses:
        click.echo("No MCP servers configured.")
        return

    connected = sum(1 for s in statuses.values() if s == "connected")
    click.echo(f"MCP Servers ({connected}/{len(statuses)} connected):")
    for name, state in statuses.items():
        status_icon = "●" if state == "connected" else "○"
        click.echo(f"  {status_icon} {name} ({state})")


@mcp.command("schemas")
@click.option("--config", "config_path", help="Path to MCP servers file (.mcp.json)")
@click.option("--server", "-s", help="Only show this server")
@click.option("--json", "json_format", is_flag=True, help="Output as JSON")
@click.pass_context
def schemas(
    ctx: click.Context, config_path: str | None, server: str | None, json_format: bool
) -> None:
    """Fetch and print tools and resources from connected servers."""
    servers = _load_servers(ctx, config_path)
    manager = _make_manager(ctx.obj["config"])
    fetcher = MCPSchemaFetcher()
    collected = asyncio.run(_collect_schemas(manager, fetcher, servers, server))

    if json_format:
        click.echo(json.dumps([s.to_dict() for s in collected], indent=2))
        return

    if not collected:
        click.echo("No connected MCP servers.")
        return

    for server_schemas in collected:
        click.echo(f"{server_schemas.server_name}:")
        click.echo(f"  Tools ({len(server_schemas.tools)}):")
        for tool in server_schemas.tools:
            desc = f" - {tool.description}" if tool.description else ""
            click.echo(f"    {tool.sanitized_name}{desc}")
        click.echo(f"  Resources ({len(server_schemas.resources)}):")
        for resource in server_schemas.resources:
            target = resource.uri or resource.uri_template or ""
            click.echo(f"    {resource.sanitized_name} {target}".rstrip())
