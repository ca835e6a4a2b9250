"""
Data models for the MCP client subsystem.

Contains connection status, the error taxonomy and the cached schema types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConnectionStatus(str, Enum):
    """Connection status of a single server as seen by the manager."""

    CONNECTED = "connected"
    FAILED = "failed"
    UNKNOWN = "unknown"


class MCPError(Exception):
    """Base exception for MCP client errors."""

    def __init__(self, message: str, code: int | None = None):
        """
        Initialize MCP error.

        Args:
            message: Error message
            code: JSON-RPC error code (if applicable)
        """
        super().__init__(message)
        self.code = code


class ConfigError(MCPError):
    """Invalid or unreadable MCP configuration. Aborts initialization."""


class TransportError(MCPError):
    """Transport fields are missing or invalid for the selected transport kind."""


class MCPConnectionError(MCPError):
    """Handshake or network failure while opening a session."""


class FetchError(MCPError):
    """A capability listing call failed or returned an unusable payload."""


@dataclass
class ToolSchema:
    """Tool exposed by a remote server."""

    sanitized_name: str
    original_name: str
    description: str | None = None
    input_schema: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.sanitized_name,
            "originalName": self.original_name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ResourceSchema:
    """Resource exposed by a remote server."""

    sanitized_name: str
    original_name: str
    description: str | None = None
    uri: str | None = None
    uri_template: str | None = None
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.sanitized_name,
            "originalName": self.original_name,
            "description": self.description,
            "uri": self.uri,
            "uriTemplate": self.uri_template,
            "mimeType": self.mime_type,
        }


@dataclass
class ServerSchemas:
    """Tools and resources fetched from one server in a single pass."""

    server_name: str
    tools: list[ToolSchema] = field(default_factory=list)
    resources: list[ResourceSchema] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "serverName": self.server_name,
            "tools": [tool.to_dict() for tool in self.tools],
            "resources": [resource.to_dict() for resource in self.resources],
        }


@dataclass
class ConnectionSummary:
    """Aggregate outcome of a bulk connect."""

    connected: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.connected) + len(self.failed)
