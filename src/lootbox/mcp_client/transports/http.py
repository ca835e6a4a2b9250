"""HTTP transport connections (streamable HTTP and SSE)."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from mcp.client.sse import sse_client
from mcp.client.streamable_http import streamablehttp_client
from mcp.types import Implementation

from lootbox.mcp_client.transports.base import BaseTransportConnection


class HTTPTransportConnection(BaseTransportConnection):
    """Streamable HTTP transport connection using MCP SDK."""

    def __init__(
        self,
        name: str,
        url: str,
        client_info: Implementation,
        headers: dict[str, str] | None = None,
        connect_timeout: float | None = None,
    ) -> None:
        """Initialize HTTP transport connection."""
        super().__init__(name, client_info, connect_timeout)
        self.url = url
        self.headers = headers

    @asynccontextmanager
    async def open_streams(self) -> AsyncIterator[tuple[Any, Any]]:
        """Open the HTTP streams, passing custom headers (e.g. API keys)."""
        async with streamablehttp_client(self.url, headers=self.headers) as (
            read_stream,
            write_stream,
            _,
        ):
            yield read_stream, write_stream


class SSETransportConnection(HTTPTransportConnection):
    """Server-sent events transport connection using MCP SDK."""

    @asynccontextmanager
    async def open_streams(self) -> AsyncIterator[tuple[Any, Any]]:
        """Open the SSE stream and its POST endpoint."""
        async with sse_client(self.url, headers=self.headers) as (read_stream, write_stream):
            yield read_stream, write_stream
