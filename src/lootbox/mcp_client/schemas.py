"""
Schema fetching and caching for connected MCP servers.
"""

import logging
from collections.abc import Mapping
from typing import Any

from mcp import ClientSession

from lootbox.mcp_client.models import FetchError, ResourceSchema, ServerSchemas, ToolSchema
from lootbox.utils.identifiers import sanitize_identifier

logger = logging.getLogger("lootbox.mcp.schemas")


def _field(entry: Any, name: str) -> Any:
    """Read a field from an SDK model or a plain mapping."""
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


class MCPSchemaFetcher:
    """
    Fetches tool and resource catalogs from live sessions and caches them.

    The cache is keyed by server name and each fetch replaces the previous
    entry for that server wholesale.
    """

    def __init__(self) -> None:
        self._cache: dict[str, ServerSchemas] = {}

    async def fetch_schemas(self, session: ClientSession, server_name: str) -> ServerSchemas:
        """
        Fetch and cache schemas (tools and resources) from an MCP server.

        A failure in one listing call leaves that list empty and does not
        affect the other.

        Args:
            session: Initialized session for the server
            server_name: Sanitized server name used as the cache key

        Returns:
            The freshly cached ServerSchemas
        """
        logger.info(f"Fetching schemas from MCP server: {server_name}...")

        tools = await self._fetch_tools(session, server_name)
        resources = await self._fetch_resources(session, server_name)

        schemas = ServerSchemas(server_name=server_name, tools=tools, resources=resources)
        self._cache[server_name] = schemas

        logger.info(
            f"Fetched {len(tools)} tools and {len(resources)} resources from {server_name}"
        )
        return schemas

    async def _list(self, session: ClientSession, kind: str) -> list[Any]:
        """Call list_tools/list_resources and unwrap the entries."""
        try:
            if kind == "tools":
                response = await session.list_tools()
            else:
                response = await session.list_resources()
        except Exception as e:
            raise FetchError(str(e) or type(e).__name__) from e

        entries = _field(response, kind)
        if not isinstance(entries, (list, tuple)):
            raise FetchError(f"No {kind} array returned")
        return list(entries)

    async def _fetch_tools(self, session: ClientSession, server_name: str) -> list[ToolSchema]:
        try:
            entries = await self._list(session, "tools")
        except FetchError as e:
            logger.warning(f"Failed to fetch tools from {server_name}: {e}")
            return []

        tools = []
        for entry in entries:
            name = _field(entry, "name")
            if not isinstance(name, str):
                logger.warning(f"Skipping unnamed entry from {server_name}: {entry!r}")
                continue
            tools.append(
                ToolSchema(
                    sanitized_name=sanitize_identifier(name),
                    original_name=name,
                    description=_field(entry, "description"),
                    input_schema=_field(entry, "inputSchema"),
                )
            )
        return tools

    async def _fetch_resources(
        self, session: ClientSession, server_name: str
    ) -> list[ResourceSchema]:
        try:
            entries = await self._list(session, "resources")
        except FetchError as e:
            logger.warning(f"Failed to fetch resources from {server_name}: {e}")
            return []

        resources = []
        for entry in entries:
            name = _field(entry, "name")
            if not isinstance(name, str):
                logger.warning(f"Skipping unnamed entry from {server_name}: {entry!r}")
                continue
            uri = _field(entry, "uri")
            uri_template = _field(entry, "uriTemplate")
            resources.append(
                ResourceSchema(
                    sanitized_name=sanitize_identifier(name),
                    original_name=name,
                    description=_field(entry, "description"),
                    # SDK models carry AnyUrl
                    uri=str(uri) if uri is not None else None,
                    uri_template=uri_template if isinstance(uri_template, str) else None,
                    mime_type=_field(entry, "mimeType"),
                )
            )
        return resources

    def get_cached_schemas(self, server_name: str) -> ServerSchemas | None:
        """Get cached schemas for a server."""
        return self._cache.get(server_name)

    def has_cached_schemas(self, server_name: str) -> bool:
        """Check if schemas are cached for a server."""
        return server_name in self._cache

    def get_all_schemas(self) -> list[ServerSchemas]:
        """
        Bulk accessor kept disabled: always returns an empty list.

        Enumerate with ``get_cached_schemas()`` over known server names instead.
        """
        return []
