"""
Tests for MCP server tool registration and call routing.

Run with: pytest tests/unit/test_server.py -v
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from cypher_mcp.exceptions import ConnectivityError, InvalidUsageError
from cypher_mcp.server import core
from cypher_mcp.server.tools_registry import TOOL_DEFINITIONS, build_tool_table, get_all_tools

from tests.unit.fakes import COUNTER_KEYS, FakeResult, make_counters, make_records


@pytest.fixture
async def running(service):
    """Install the fake-backed service as the running backend."""
    await core.initialize_backend(service)
    yield service
    await core.cleanup_backend()


def test_server_exists():
    """Test that MCP server instance exists."""
    assert core.server is not None
    assert core.server.name == "neo4j_cypher_mcp"


def test_tool_table_has_exactly_three_tools():
    assert set(core.TOOL_TABLE) == {"read-query", "write-query", "get-schema"}
    assert set(build_tool_table()) == {tool.name for tool in get_all_tools()}


def test_query_tools_require_query_argument():
    tools = {tool.name: tool for tool in TOOL_DEFINITIONS}

    for name in ("read-query", "write-query"):
        schema = tools[name].inputSchema
        assert schema["required"] == ["query"]
        assert schema["properties"]["query"]["type"] == "string"

    assert tools["get-schema"].inputSchema["properties"] == {}


def test_tool_annotations():
    tools = {tool.name: tool for tool in TOOL_DEFINITIONS}

    assert tools["read-query"].annotations.readOnlyHint is True
    assert tools["get-schema"].annotations.readOnlyHint is True
    assert tools["write-query"].annotations.readOnlyHint is False
    assert tools["write-query"].annotations.destructiveHint is True


@pytest.mark.asyncio
async def test_list_tools():
    tools = await core.handle_list_tools()

    assert [tool.name for tool in tools] == ["read-query", "write-query", "get-schema"]


@pytest.mark.asyncio
async def test_read_query_call_returns_json_rows(running, fake_session):
    fake_session.run.return_value = FakeResult(make_records({"name": "Alice", "age": 30}))

    content = await core.handle_call_tool("read-query", {"query": "MATCH (n) RETURN n.name AS name, n.age AS age"})

    assert len(content) == 1
    assert content[0].type == "text"
    rows = json.loads(content[0].text)
    assert rows == [{"name": "Alice", "age": 30}]
    assert list(rows[0].keys()) == ["name", "age"]


@pytest.mark.asyncio
async def test_write_query_call_returns_counters(running, fake_session):
    fake_session.run.return_value = FakeResult(
        counters=make_counters(nodes_created=1, labels_added=1, contains_updates=True)
    )

    content = await core.handle_call_tool(
        "write-query", {"query": "CREATE (n:Person {name: $name})", "params": {"name": "A"}}
    )

    rows = json.loads(content[0].text)
    assert len(rows) == 1
    assert set(rows[0]) == set(COUNTER_KEYS)
    assert rows[0]["nodesCreated"] == 1
    fake_session.run.assert_awaited_once_with("CREATE (n:Person {name: $name})", {"name": "A"})


@pytest.mark.asyncio
async def test_get_schema_call(running, fake_session):
    fake_session.run.return_value = FakeResult(
        make_records({"label": "Person", "attributes": {"name": "STRING"}, "relationships": {}})
    )

    content = await core.handle_call_tool("get-schema", {})

    assert json.loads(content[0].text) == [
        {"label": "Person", "attributes": {"name": "STRING"}, "relationships": {}}
    ]


@pytest.mark.asyncio
async def test_read_query_with_write_syntax_is_rejected(running, fake_session):
    with pytest.raises(InvalidUsageError):
        await core.handle_call_tool("read-query", {"query": "CREATE (n)"})

    fake_session.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_write_query_with_read_syntax_is_rejected(running, fake_session):
    with pytest.raises(InvalidUsageError):
        await core.handle_call_tool("write-query", {"query": "MATCH (n) RETURN n"})

    fake_session.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_invalid_arguments_are_rejected(running, fake_session):
    with pytest.raises(ValidationError):
        await core.handle_call_tool("read-query", {})

    with pytest.raises(ValidationError):
        await core.handle_call_tool("read-query", {"query": "   "})

    with pytest.raises(ValidationError):
        await core.handle_call_tool("read-query", {"query": "RETURN 1", "limit": 5})

    fake_session.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_query_returns_empty_list(running, fake_session):
    from neo4j.exceptions import CypherSyntaxError

    fake_session.run.side_effect = CypherSyntaxError("Invalid input")

    content = await core.handle_call_tool("read-query", {"query": "MATC (n) RETURN n"})

    assert json.loads(content[0].text) == []


@pytest.mark.asyncio
async def test_unknown_tool(running):
    with pytest.raises(ValueError, match="Unknown tool"):
        await core.handle_call_tool("drop-database", {})


@pytest.mark.asyncio
async def test_call_before_initialization_fails():
    with pytest.raises(ConnectivityError):
        await core.handle_call_tool("read-query", {"query": "RETURN 1"})


@pytest.mark.asyncio
async def test_cleanup_closes_client(service, fake_driver):
    await core.initialize_backend(service)
    await core.cleanup_backend()
    await core.cleanup_backend()

    fake_driver.close.assert_awaited_once()
    with pytest.raises(ConnectivityError):
        core.get_service()


def test_sse_app_routes():
    app = core.build_sse_app()

    paths = {route.path for route in app.routes}

    assert paths == {"/sse", "/messages"}


def test_http_app_mounts_mcp():
    app = core.build_http_app()

    assert [route.path for route in app.routes] == ["/mcp"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "transport,runner",
    [("stdio", "run_stdio"), ("http", "run_http"), ("sse", "run_sse")],
)
async def test_main_serves_configured_transport(monkeypatch, transport, runner):
    runners = {name: AsyncMock() for name in ("run_stdio", "run_http", "run_sse")}
    for name, mock in runners.items():
        monkeypatch.setattr(core, name, mock)
    monkeypatch.setattr(core, "configure_logging", MagicMock())
    monkeypatch.setattr(core, "initialize_backend", AsyncMock())
    monkeypatch.setattr(core, "cleanup_backend", AsyncMock())
    monkeypatch.setattr(core.settings, "transport", transport)

    await core.main()

    for name, mock in runners.items():
        if name == runner:
            mock.assert_awaited_once()
        else:
            mock.assert_not_awaited()
