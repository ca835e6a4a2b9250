"""Transport selection for a configured MCP server."""

import os
from collections.abc import Mapping
from typing import Any

import httpx
from mcp.client.stdio import StdioServerParameters
from mcp.types import Implementation

from lootbox.mcp_client.config import (
    DEFAULT_TRANSPORT,
    HttpServerConfig,
    ServerConfig,
    StdioServerConfig,
    parse_server_config,
)
from lootbox.mcp_client.models import TransportError
from lootbox.mcp_client.transports.base import BaseTransportConnection
from lootbox.mcp_client.transports.http import HTTPTransportConnection, SSETransportConnection
from lootbox.mcp_client.transports.stdio import StdioTransportConnection


def _coerce_config(config: ServerConfig | Mapping[str, Any]) -> ServerConfig:
    if isinstance(config, (StdioServerConfig, HttpServerConfig)):
        return config
    if not isinstance(config, Mapping):
        raise TransportError(f"Invalid MCP server config: {config!r}")
    try:
        return parse_server_config(config)
    except ValueError as e:
        raise TransportError(f"Invalid MCP server config: {e}") from e


def _check_url(url: str) -> str:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise TransportError(f"Invalid server URL '{url}': {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise TransportError(f"Invalid server URL '{url}': expected an http(s) URL with a host")
    return url


def build_stdio_parameters(config: StdioServerConfig) -> StdioServerParameters:
    """Build subprocess parameters; config env overrides the current environment."""
    if not config.command or config.args is None:
        raise TransportError("Stdio transport requires command and args.")
    env = {**os.environ, **(config.env or {})}
    return StdioServerParameters(command=config.command, args=list(config.args), env=env)


def create_transport_connection(
    name: str,
    config: ServerConfig | Mapping[str, Any],
    client_info: Implementation,
    connect_timeout: float | None = None,
) -> BaseTransportConnection:
    """
    Create the transport connection for one server.

    Accepts either a validated config or a raw per-server mapping; raw mappings
    are parsed here so that a malformed entry fails only its own server.

    Args:
        name: Sanitized server name
        config: Server config (transport defaults to stdio)
        client_info: Name/version announced during the handshake
        connect_timeout: Optional handshake timeout in seconds

    Returns:
        Unconnected transport connection

    Raises:
        TransportError: If the fields are missing or invalid for the transport
    """
    server_config = _coerce_config(config)
    transport = server_config.transport or DEFAULT_TRANSPORT

    if transport == "stdio":
        assert isinstance(server_config, StdioServerConfig)
        return StdioTransportConnection(
            name,
            build_stdio_parameters(server_config),
            client_info,
            connect_timeout=connect_timeout,
        )

    if transport in ("streamable_http", "sse") and isinstance(server_config, HttpServerConfig):
        url = _check_url(server_config.url)
        connection_cls = (
            HTTPTransportConnection if transport == "streamable_http" else SSETransportConnection
        )
        return connection_cls(
            name,
            url,
            client_info,
            headers=server_config.merged_headers(),
            connect_timeout=connect_timeout,
        )

    raise TransportError("Invalid MCP server config.")
