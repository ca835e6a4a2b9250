"""MCP transport connections."""

from lootbox.mcp_client.transports.base import BaseTransportConnection
from lootbox.mcp_client.transports.factory import create_transport_connection
from lootbox.mcp_client.transports.http import HTTPTransportConnection, SSETransportConnection
from lootbox.mcp_client.transports.stdio import StdioTransportConnection

__all__ = [
    "BaseTransportConnection",
    "HTTPTransportConnection",
    "SSETransportConnection",
    "StdioTransportConnection",
    "create_transport_connection",
]
