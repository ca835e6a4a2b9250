"""Stdio transport connection."""

from contextlib import AbstractAsyncContextManager
from typing import Any

from mcp.client.stdio import StdioServerParameters, stdio_client
from mcp.types import Implementation

from lootbox.mcp_client.transports.base import BaseTransportConnection


class StdioTransportConnection(BaseTransportConnection):
    """Stdio transport connection using MCP SDK."""

    def __init__(
        self,
        name: str,
        params: StdioServerParameters,
        client_info: Implementation,
        connect_timeout: float | None = None,
    ) -> None:
        """Initialize stdio transport connection."""
        super().__init__(name, client_info, connect_timeout)
        self.params = params

    def open_streams(self) -> AbstractAsyncContextManager[tuple[Any, Any]]:
        """Spawn the server process and return its stdio streams."""
        return stdio_client(self.params)
