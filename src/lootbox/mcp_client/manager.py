"""
Manager for multiple MCP client connections.

Connects to every configured server concurrently, isolates per-server
failures, and keeps a status table alongside the table of live sessions.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from mcp import ClientSession
from mcp.types import Implementation

from lootbox import __version__
from lootbox.mcp_client.config import ServerConfig
from lootbox.mcp_client.models import ConnectionStatus, ConnectionSummary
from lootbox.mcp_client.transports.base import BaseTransportConnection
from lootbox.mcp_client.transports.factory import create_transport_connection

logger = logging.getLogger("lootbox.mcp.manager")

CLIENT_NAME = "lootbox"


class MCPClientManager:
    """
    Owns the live sessions and connection statuses for a fleet of MCP servers.

    Both tables are keyed by sanitized server name. A name is present in the
    session table only while its session is live; the status table records
    ``connected`` or ``failed`` for every attempted name and is cleared by
    ``disconnect_all()``.
    """

    def __init__(
        self,
        client_name: str = CLIENT_NAME,
        client_version: str = __version__,
        connect_timeout: float | None = None,
    ):
        """
        Initialize manager.

        Args:
            client_name: Client name announced to servers during the handshake
            client_version: Client version announced during the handshake
            connect_timeout: Optional per-server handshake timeout in seconds
        """
        self._connections: dict[str, BaseTransportConnection] = {}
        self._status: dict[str, ConnectionStatus] = {}
        self.client_info = Implementation(name=client_name, version=client_version)
        self.connect_timeout = connect_timeout

    async def connect_one(
        self, server_name: str, config: ServerConfig | Mapping[str, Any]
    ) -> None:
        """
        Connect to a single server. Never raises.

        On success the session is stored and the status becomes ``connected``;
        on any transport or handshake error the status becomes ``failed`` and
        the error is logged.

        Args:
            server_name: Sanitized server name
            config: Validated server config, or a raw per-server mapping
        """
        try:
            logger.info(f"Connecting to MCP server: {server_name}...")

            connection = create_transport_connection(
                server_name,
                config,
                self.client_info,
                connect_timeout=self.connect_timeout,
            )
            await connection.connect()

            previous = self._connections.pop(server_name, None)
            if previous is not None:
                await previous.disconnect()

            self._connections[server_name] = connection
            self._status[server_name] = ConnectionStatus.CONNECTED
            logger.info(f"Successfully connected to MCP server: {server_name}")

        except Exception as e:
            self._status[server_name] = ConnectionStatus.FAILED
            logger.error(f"Failed to connect to MCP server '{server_name}': {e}")
            stale = self._connections.pop(server_name, None)
            if stale is not None:
                await stale.disconnect()

    async def connect_all(
        self, configs: Mapping[str, ServerConfig | Mapping[str, Any]]
    ) -> ConnectionSummary:
        """
        Connect to every configured server concurrently.

        Waits for every attempt to settle; one failing server never prevents
        the others from connecting.

        Args:
            configs: Mapping of sanitized server names to configs

        Returns:
            Summary of the connected and failed server names
        """
        tasks = [
            asyncio.create_task(self.connect_one(name, config)) for name, config in configs.items()
        ]
        if tasks:
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for name, result in zip(configs, results, strict=False):
                if isinstance(result, BaseException):
                    # connect_one never raises; only reachable on cancellation
                    self._status[name] = ConnectionStatus.FAILED
                    logger.error(f"Connection task for '{name}' aborted: {result!r}")

        connected = self.connected_names()
        failed = [
            name for name, status in self._status.items() if status == ConnectionStatus.FAILED
        ]
        summary = ConnectionSummary(connected=connected, failed=failed)

        logger.info(
            f"MCP Clients initialized: {len(connected)} connected, {len(failed)} failed"
        )
        if connected:
            logger.info(f"Connected servers: {', '.join(connected)}")
        if failed:
            logger.warning(f"Failed servers: {', '.join(failed)}")

        return summary

    def get_session(self, server_name: str) -> ClientSession | None:
        """Get the live session for a server, or None if it is not connected."""
        connection = self._connections.get(server_name)
        if connection is None:
            return None
        return connection.session

    def connected_names(self) -> list[str]:
        """Names of connected servers, in the order they connected."""
        return list(self._connections.keys())

    def status_of(self, server_name: str) -> ConnectionStatus:
        """Connection status for a server; ``unknown`` if never attempted."""
        return self._status.get(server_name, ConnectionStatus.UNKNOWN)

    def all_statuses(self) -> dict[str, ConnectionStatus]:
        """Snapshot of every recorded connection status."""
        return dict(self._status)

    async def disconnect_all(self) -> None:
        """
        Close every live session concurrently and forget all statuses.

        Close errors are logged and never stop the other closes. Safe to call
        with no live sessions.
        """
        logger.info(f"Disconnecting {len(self._connections)} MCP clients...")

        connections = list(self._connections.items())
        if connections:
            results = await asyncio.gather(
                *(connection.disconnect() for _, connection in connections),
                return_exceptions=True,
            )
            for (name, _), result in zip(connections, results, strict=False):
                if isinstance(result, Exception):
                    logger.error(f"Error disconnecting from MCP server '{name}': {result}")
                else:
                    logger.info(f"Disconnected from MCP server: {name}")

        self._connections.clear()
        self._status.clear()
