"""
MCP server configuration.

Parses the untyped ``mcpServers`` block of an ``.mcp.json`` file into typed
per-server transport configs:
- StdioServerConfig: subprocess speaking MCP over stdin/stdout
- HttpServerConfig: streamable HTTP or SSE endpoint

Server names are sanitized into identifiers before they are used as keys, and
the lootbox bridge server itself is filtered out of the result.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from lootbox.mcp_client.models import ConfigError
from lootbox.utils.identifiers import sanitize_identifier

logger = logging.getLogger("lootbox.mcp.config")

# Command used to launch our own bridge server; never connect to ourselves
BRIDGE_SERVER_COMMAND = "mcp-rpc-bridge"

DEFAULT_TRANSPORT = "stdio"
TRANSPORTS = ("stdio", "streamable_http", "sse")

_STDIO_FIELDS = ("command", "args", "env")
_HTTP_FIELDS = ("url", "headers")


def _reject_fields(data: Any, fields: tuple[str, ...], transport: str) -> Any:
    if isinstance(data, Mapping):
        foreign = [name for name in fields if name in data]
        if foreign:
            raise ValueError(
                f"{transport} transport does not accept {', '.join(repr(f) for f in foreign)}"
            )
    return data


class StdioServerConfig(BaseModel):
    """Server launched as a subprocess and spoken to over stdio."""

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    transport: Literal["stdio"] = "stdio"
    command: str
    args: list[str]
    env: dict[str, str] | None = None

    @field_validator("env", mode="before")
    @classmethod
    def reject_null_env(cls, v: Any) -> Any:
        """An explicit null is not an object; omit the key instead."""
        if v is None:
            raise ValueError("env must be an object")
        return v

    @model_validator(mode="before")
    @classmethod
    def reject_http_fields(cls, data: Any) -> Any:
        """HTTP-only fields cannot appear on a stdio server."""
        return _reject_fields(data, _HTTP_FIELDS, "stdio")


class HttpServerConfig(BaseModel):
    """Server reached over streamable HTTP or server-sent events."""

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    transport: Literal["streamable_http", "sse"]
    url: str
    headers: list[dict[str, str]] | None = None

    @field_validator("headers", mode="before")
    @classmethod
    def reject_null_headers(cls, v: Any) -> Any:
        """An explicit null is not an array; omit the key instead."""
        if v is None:
            raise ValueError("headers must be array of string record objects")
        return v

    @model_validator(mode="before")
    @classmethod
    def reject_stdio_fields(cls, data: Any) -> Any:
        """Stdio-only fields cannot appear on an HTTP server."""
        return _reject_fields(data, _STDIO_FIELDS, "HTTP")

    def merged_headers(self) -> dict[str, str] | None:
        """Collapse the header list into one mapping, later entries winning."""
        if not self.headers:
            return None
        merged: dict[str, str] = {}
        for entry in self.headers:
            merged.update(entry)
        return merged


ServerConfig = StdioServerConfig | HttpServerConfig


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ()))
        msg = item.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def parse_server_config(raw: Mapping[str, Any]) -> ServerConfig:
    """
    Build a typed config from one raw server entry.

    Args:
        raw: Mapping as found under ``mcpServers.<name>``

    Returns:
        StdioServerConfig or HttpServerConfig depending on ``transport``

    Raises:
        ValueError: If the transport is unknown or the fields do not match it
    """
    data = dict(raw)
    transport = data.get("transport")
    if transport is None:
        transport = DEFAULT_TRANSPORT
    if transport not in TRANSPORTS:
        raise ValueError("transport must be 'stdio', 'streamable_http', or 'sse'")
    data["transport"] = transport

    model: type[StdioServerConfig] | type[HttpServerConfig]
    model = StdioServerConfig if transport == "stdio" else HttpServerConfig
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValueError(_format_validation_error(e)) from e


def validate_mcp_config(config: Any) -> dict[str, ServerConfig]:
    """
    Validate a parsed MCP config document.

    Args:
        config: Parsed JSON value, expected to look like ``{"mcpServers": {...}}``

    Returns:
        Dict mapping sanitized server names to typed server configs

    Raises:
        ConfigError: On any structural or type violation
    """
    if not isinstance(config, Mapping):
        raise ConfigError("MCP config must be an object")

    if "mcpServers" not in config:
        raise ConfigError("MCP config must have 'mcpServers' field")

    servers = config["mcpServers"]
    if not isinstance(servers, Mapping):
        raise ConfigError("'mcpServers' must be an object")

    validated: dict[str, ServerConfig] = {}
    for server_name, server_config in servers.items():
        if not isinstance(server_name, str):
            raise ConfigError(f"Server name {server_name!r} must be a string")

        if isinstance(server_config, Mapping) and (
            server_config.get("command") == BRIDGE_SERVER_COMMAND
        ):
            logger.info(f"Skipping {BRIDGE_SERVER_COMMAND} server: {server_name}")
            continue

        if not isinstance(server_config, Mapping):
            raise ConfigError(f"Server config for '{server_name}' must be an object")

        try:
            parsed = parse_server_config(server_config)
        except ValueError as e:
            raise ConfigError(f"Server '{server_name}' config is invalid: {e}") from e

        sanitized_name = sanitize_identifier(server_name)
        if sanitized_name != server_name:
            logger.info(f"Sanitized MCP server name: '{server_name}' -> '{sanitized_name}'")
        # TODO: detect two raw names collapsing onto the same sanitized name
        validated[sanitized_name] = parsed

    return validated


def load_mcp_config(path: str | Path) -> dict[str, ServerConfig]:
    """
    Read and validate an MCP config file.

    Args:
        path: Path to a ``.mcp.json`` style file

    Returns:
        Dict mapping sanitized server names to typed server configs

    Raises:
        ConfigError: If the file is missing, is not valid JSON, or fails validation
    """
    config_path = Path(path).expanduser()
    try:
        content = config_path.read_text()
    except FileNotFoundError as e:
        raise ConfigError(f"MCP config file not found: {path}") from e

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in MCP config file: {path}") from e

    return validate_mcp_config(parsed)
