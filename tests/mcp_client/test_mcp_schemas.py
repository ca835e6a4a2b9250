"""Tests for schema fetching and caching."""

from types import MappingProxyType, SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp.types import ListResourcesResult, ListToolsResult, Resource, Tool

from lootbox.mcp_client.models import ServerSchemas
from lootbox.mcp_client.schemas import MCPSchemaFetcher

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]

WEATHER_SCHEMA = {
    "type": "object",
    "properties": {"city": {"type": "string"}},
    "required": ["city"],
}


def _tools(*names: str) -> ListToolsResult:
    return ListToolsResult(
        tools=[
            Tool(name=name, description=f"{name} tool", inputSchema=WEATHER_SCHEMA)
            for name in names
        ]
    )


def _resources() -> ListResourcesResult:
    return ListResourcesResult(
        resources=[
            Resource(
                name="docs.index",
                uri="file:///docs/index.md",
                description="Docs index",
                mimeType="text/markdown",
            )
        ]
    )


def _session(tools=None, resources=None) -> MagicMock:
    session = MagicMock()
    session.list_tools = AsyncMock(return_value=tools if tools is not None else _tools())
    session.list_resources = AsyncMock(
        return_value=resources if resources is not None else ListResourcesResult(resources=[])
    )
    return session


class TestFetchSchemas:
    async def test_tools_and_resources(self) -> None:
        fetcher = MCPSchemaFetcher()
        session = _session(tools=_tools("get-weather"), resources=_resources())

        schemas = await fetcher.fetch_schemas(session, "weather")

        assert schemas.server_name == "weather"
        [tool] = schemas.tools
        assert tool.sanitized_name == "get_weather"
        assert tool.original_name == "get-weather"
        assert tool.description == "get-weather tool"
        assert tool.input_schema == WEATHER_SCHEMA

        [resource] = schemas.resources
        assert resource.sanitized_name == "docs_index"
        assert resource.original_name == "docs.index"
        assert resource.description == "Docs index"
        assert resource.uri == "file:///docs/index.md"
        assert resource.uri_template is None
        assert resource.mime_type == "text/markdown"

    async def test_result_is_cached(self) -> None:
        fetcher = MCPSchemaFetcher()

        schemas = await fetcher.fetch_schemas(_session(tools=_tools("a")), "srv")

        assert fetcher.has_cached_schemas("srv") is True
        assert fetcher.get_cached_schemas("srv") is schemas

    async def test_tool_failure_keeps_resources(self) -> None:
        fetcher = MCPSchemaFetcher()
        session = _session(resources=_resources())
        session.list_tools = AsyncMock(side_effect=RuntimeError("Method not found"))

        schemas = await fetcher.fetch_schemas(session, "srv")

        assert schemas.tools == []
        assert len(schemas.resources) == 1
        session.list_resources.assert_awaited_once()

    async def test_resource_failure_keeps_tools(self) -> None:
        fetcher = MCPSchemaFetcher()
        session = _session(tools=_tools("a", "b"))
        session.list_resources = AsyncMock(side_effect=RuntimeError("Method not found"))

        schemas = await fetcher.fetch_schemas(session, "srv")

        assert [t.original_name for t in schemas.tools] == ["a", "b"]
        assert schemas.resources == []

    async def test_both_failures_still_cached(self, caplog: pytest.LogCaptureFixture) -> None:
        fetcher = MCPSchemaFetcher()
        session = _session()
        session.list_tools = AsyncMock(side_effect=ConnectionResetError())
        session.list_resources = AsyncMock(side_effect=TimeoutError("slow"))

        schemas = await fetcher.fetch_schemas(session, "srv")

        assert schemas == ServerSchemas(server_name="srv")
        assert fetcher.has_cached_schemas("srv")
        assert "Failed to fetch tools from srv: ConnectionResetError" in caplog.text
        assert "Failed to fetch resources from srv: slow" in caplog.text

    async def test_non_sequence_payload_treated_as_empty(self) -> None:
        fetcher = MCPSchemaFetcher()
        session = _session(
            tools=SimpleNamespace(tools=None),
            resources=SimpleNamespace(resources={"name": "not-a-list"}),
        )

        schemas = await fetcher.fetch_schemas(session, "srv")

        assert schemas.tools == []
        assert schemas.resources == []

    async def test_plain_dict_payloads(self) -> None:
        fetcher = MCPSchemaFetcher()
        session = _session(
            tools={"tools": [{"name": "run.query", "inputSchema": {"type": "object"}}]},
            resources={
                "resources": [
                    {"name": "table rows", "uriTemplate": "db://tables/{name}"},
                    {"name": "bad-template", "uriTemplate": 42},
                ]
            },
        )

        schemas = await fetcher.fetch_schemas(session, "db")

        [tool] = schemas.tools
        assert tool.sanitized_name == "run_query"
        assert tool.description is None
        assert tool.input_schema == {"type": "object"}

        template, bad = schemas.resources
        assert template.sanitized_name == "table_rows"
        assert template.uri is None
        assert template.uri_template == "db://tables/{name}"
        assert bad.uri_template is None

    async def test_read_only_mapping_payloads(self) -> None:
        fetcher = MCPSchemaFetcher()
        tool = MappingProxyType({"name": "run.query", "inputSchema": {"type": "object"}})
        resource = MappingProxyType({"name": "rows", "uri": "db://rows"})
        session = _session(
            tools=MappingProxyType({"tools": [tool]}),
            resources=MappingProxyType({"resources": (resource,)}),
        )

        schemas = await fetcher.fetch_schemas(session, "db")

        assert [t.sanitized_name for t in schemas.tools] == ["run_query"]
        assert schemas.tools[0].input_schema == {"type": "object"}
        assert [r.uri for r in schemas.resources] == ["db://rows"]

    async def test_entries_without_name_skipped(self) -> None:
        fetcher = MCPSchemaFetcher()
        session = _session(tools={"tools": [{"description": "nameless"}, {"name": "ok"}]})

        schemas = await fetcher.fetch_schemas(session, "srv")

        assert [t.original_name for t in schemas.tools] == ["ok"]

    async def test_refetch_overwrites(self) -> None:
        fetcher = MCPSchemaFetcher()

        await fetcher.fetch_schemas(_session(tools=_tools("a", "b", "c")), "srv")
        await fetcher.fetch_schemas(_session(tools=_tools("d", "e")), "srv")

        cached = fetcher.get_cached_schemas("srv")
        assert cached is not None
        assert [t.original_name for t in cached.tools] == ["d", "e"]

    async def test_servers_cached_independently(self) -> None:
        fetcher = MCPSchemaFetcher()

        await fetcher.fetch_schemas(_session(tools=_tools("a")), "one")
        await fetcher.fetch_schemas(_session(tools=_tools("b", "c")), "two")

        assert len(fetcher.get_cached_schemas("one").tools) == 1
        assert len(fetcher.get_cached_schemas("two").tools) == 2


class TestCacheQueries:
    async def test_unknown_server(self) -> None:
        fetcher = MCPSchemaFetcher()

        assert fetcher.get_cached_schemas("missing") is None
        assert fetcher.has_cached_schemas("missing") is False

    async def test_get_all_schemas_never_enumerates(self) -> None:
        fetcher = MCPSchemaFetcher()
        await fetcher.fetch_schemas(_session(tools=_tools("a")), "srv")

        assert fetcher.get_all_schemas() == []


class TestToDict:
    async def test_wire_names(self) -> None:
        fetcher = MCPSchemaFetcher()
        schemas = await fetcher.fetch_schemas(
            _session(tools=_tools("get-weather"), resources=_resources()), "weather"
        )

        data = schemas.to_dict()

        assert data["serverName"] == "weather"
        assert data["tools"][0] == {
            "name": "get_weather",
            "originalName": "get-weather",
            "description": "get-weather tool",
            "inputSchema": WEATHER_SCHEMA,
        }
        assert data["resources"][0]["uri"] == "file:///docs/index.md"
        assert data["resources"][0]["mimeType"] == "text/markdown"
        assert data["resources"][0]["uriTemplate"] is None
