"""MCP client subsystem: config validation, connection management, schema cache."""

from lootbox.mcp_client.config import (
    BRIDGE_SERVER_COMMAND,
    HttpServerConfig,
    ServerConfig,
    StdioServerConfig,
    load_mcp_config,
    validate_mcp_config,
)
from lootbox.mcp_client.manager import MCPClientManager
from lootbox.mcp_client.models import (
    ConfigError,
    ConnectionStatus,
    ConnectionSummary,
    FetchError,
    MCPConnectionError,
    MCPError,
    ResourceSchema,
    ServerSchemas,
    ToolSchema,
    TransportError,
)
from lootbox.mcp_client.schemas import MCPSchemaFetcher

__all__ = [
    "BRIDGE_SERVER_COMMAND",
    "ConfigError",
    "ConnectionStatus",
    "ConnectionSummary",
    "FetchError",
    "HttpServerConfig",
    "MCPClientManager",
    "MCPConnectionError",
    "MCPError",
    "MCPSchemaFetcher",
    "ResourceSchema",
    "ServerConfig",
    "ServerSchemas",
    "StdioServerConfig",
    "ToolSchema",
    "TransportError",
    "load_mcp_config",
    "validate_mcp_config",
]
