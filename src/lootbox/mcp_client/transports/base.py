"""Base transport connection."""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from typing import Any

from mcp import ClientSession
from mcp.types import Implementation

from lootbox.mcp_client.models import MCPConnectionError

logger = logging.getLogger("lootbox.mcp.client")


class BaseTransportConnection:
    """
    Base class for MCP transport connections.

    The SDK transport and session are async context managers that must be
    entered and exited from the same task, so each connection runs them inside
    a dedicated background task and hands the initialized session back through
    a future. ``disconnect()`` signals that task to unwind.

    Subclasses provide ``open_streams()`` returning an async context manager
    that yields ``(read_stream, write_stream)``.
    """

    def __init__(
        self,
        name: str,
        client_info: Implementation,
        connect_timeout: float | None = None,
    ) -> None:
        """
        Initialize transport connection.

        Args:
            name: Sanitized server name
            client_info: Name/version announced during the handshake
            connect_timeout: Seconds to wait for the handshake (None waits forever)
        """
        self.name = name
        self.client_info = client_info
        self.connect_timeout = connect_timeout
        self._session: ClientSession | None = None
        self._task: asyncio.Task[None] | None = None
        self._closing: asyncio.Event | None = None

    def open_streams(self) -> AbstractAsyncContextManager[tuple[Any, Any]]:
        """Open the underlying transport. Must be implemented by subclasses."""
        raise NotImplementedError

    @property
    def session(self) -> ClientSession | None:
        """Initialized session, or None when not connected."""
        return self._session

    @property
    def is_connected(self) -> bool:
        """Check if connection is active."""
        return self._session is not None and self._task is not None and not self._task.done()

    async def connect(self) -> ClientSession:
        """
        Open the transport and complete the MCP handshake.

        Returns:
            Initialized ClientSession

        Raises:
            MCPConnectionError: If the transport or handshake fails or times out
        """
        if self.is_connected and self._session is not None:
            return self._session

        loop = asyncio.get_running_loop()
        ready: asyncio.Future[ClientSession] = loop.create_future()
        self._closing = asyncio.Event()
        self._task = asyncio.create_task(self._run_connection(ready))

        done, _ = await asyncio.wait(
            {ready, self._task},
            timeout=self.connect_timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )

        if ready in done:
            try:
                return ready.result()
            except Exception as e:
                await self._reap_task()
                # Handle exceptions with empty str() (EndOfStream, ClosedResourceError)
                error_msg = str(e) if str(e) else f"{type(e).__name__}: Connection closed"
                raise MCPConnectionError(
                    f"Failed to connect to '{self.name}': {error_msg}"
                ) from e

        if self._task in done:
            await self._reap_task()
            raise MCPConnectionError(f"Connection to '{self.name}' closed during handshake")

        ready.cancel()
        self._task.cancel()
        await self._reap_task()
        raise MCPConnectionError(
            f"Timed out after {self.connect_timeout}s connecting to '{self.name}'"
        )

    async def _run_connection(self, ready: asyncio.Future[ClientSession]) -> None:
        """Hold the transport and session open until disconnect is requested."""
        assert self._closing is not None
        try:
            async with self.open_streams() as (read_stream, write_stream):
                async with ClientSession(
                    read_stream, write_stream, client_info=self.client_info
                ) as session:
                    await session.initialize()
                    self._session = session
                    if not ready.done():
                        ready.set_result(session)
                    logger.debug(f"Session open for MCP server: {self.name}")
                    await self._closing.wait()
        except Exception as e:
            if not ready.done():
                ready.set_exception(e)
            else:
                logger.warning(f"Connection to '{self.name}' ended with error: {e}")
        finally:
            self._session = None

    async def _reap_task(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def disconnect(self) -> None:
        """Close the session and transport. Errors are logged, not raised."""
        if self._closing is not None:
            self._closing.set()
        try:
            await self._reap_task()
        except Exception as e:
            logger.warning(f"Error closing connection for {self.name}: {e}")
        self._session = None
        self._closing = None

