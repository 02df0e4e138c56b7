"""Integration tests for the MCP server protocol surface."""

from __future__ import annotations

import pytest
from mcp import types

from json_mcp.config import Settings
from json_mcp.mcp.server import TOOL_DEFINITIONS, create_dispatcher, create_mcp_server, list_tools


@pytest.fixture
def server(missing_jq_config):
    app_settings = Settings()
    return create_mcp_server(create_dispatcher(app_settings, missing_jq_config), app_settings)


def test_list_tools_fixed_order():
    assert [t.name for t in list_tools()] == [
        "query_json",
        "generate_json_schema",
        "validate_json_schema",
    ]


def test_tool_schemas_have_required_fields():
    """Every tool definition should have name, description, and inputSchema."""
    for tool in TOOL_DEFINITIONS:
        assert tool.name, "Tool must have a name"
        assert tool.description, f"Tool {tool.name} must have a description"
        assert tool.inputSchema["type"] == "object"
        assert "properties" in tool.inputSchema
        assert tool.inputSchema["additionalProperties"] is False


def test_query_json_contract():
    tool = next(t for t in TOOL_DEFINITIONS if t.name == "query_json")
    props = tool.inputSchema["properties"]
    assert set(props) == {"filePath", "query"}
    assert props["filePath"]["type"] == "string"
    assert props["query"]["type"] == "string"
    assert tool.inputSchema["required"] == ["query"]


def test_generate_json_schema_contract():
    tool = next(t for t in TOOL_DEFINITIONS if t.name == "generate_json_schema")
    assert set(tool.inputSchema["properties"]) == {"filePath"}
    assert tool.inputSchema["required"] == []


def test_validate_json_schema_contract():
    tool = next(t for t in TOOL_DEFINITIONS if t.name == "validate_json_schema")
    props = tool.inputSchema["properties"]
    assert props["schema"]["type"] == "object"
    assert props["schemaFilePath"]["type"] == "string"
    assert "required" not in tool.inputSchema


def test_server_creation(server):
    assert server.name == "json-tools-server"
    assert types.ListToolsRequest in server.request_handlers
    assert types.CallToolRequest in server.request_handlers


@pytest.mark.asyncio
async def test_list_tools_request(server):
    handler = server.request_handlers[types.ListToolsRequest]
    result = await handler(types.ListToolsRequest(method="tools/list"))
    assert [t.name for t in result.root.tools] == [t.name for t in TOOL_DEFINITIONS]


@pytest.mark.asyncio
async def test_call_tool_request_unknown_tool(server):
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="nope", arguments={}),
    )
    result = await handler(request)
    assert result.root.isError is True
    assert result.root.content[0].text == "Error: Unknown tool: nope"
