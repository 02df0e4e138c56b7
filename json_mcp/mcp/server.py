"""MCP server bootstrap – registers tools, resolves jq and runs the stdio transport."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Sequence

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from json_mcp.config import Settings, build_settings
from json_mcp.mcp.dispatch import ToolDispatcher
from json_mcp.mcp.tools import build_tool_handlers
from json_mcp.services.jq_binary import JqConfig, resolve_or_exit

logger = logging.getLogger("mcp.server")

# ---------------------------------------------------------------------------
# Tool registry
# ---------------------------------------------------------------------------

TOOL_DEFINITIONS: list[Tool] = [
    Tool(
        name="query_json",
        description="Query JSON data using jq notation from a specified file path",
        inputSchema={
            "type": "object",
            "properties": {
                "filePath": {
                    "type": "string",
                    "description": "Absolute path to the JSON file to query",
                },
                "query": {
                    "type": "string",
                    "description": (
                        'jq query string (e.g., ".key", ".[0].name", '
                        '".[] | select(.status == \\"active\\")")'
                    ),
                },
            },
            "required": ["query"],
            "additionalProperties": False,
        },
    ),
    Tool(
        name="generate_json_schema",
        description="Generate a JSON schema from a JSON file",
        inputSchema={
            "type": "object",
            "properties": {
                "filePath": {
                    "type": "string",
                    "description": "Absolute path to the JSON file to analyze",
                },
            },
            "required": [],
            "additionalProperties": False,
        },
    ),
    Tool(
        name="validate_json_schema",
        description="Validate that a JSON schema is properly formed and valid",
        inputSchema={
            "type": "object",
            "properties": {
                "schema": {
                    "type": "object",
                    "description": "The JSON schema object to validate",
                },
                "schemaFilePath": {
                    "type": "string",
                    "description": "Path to a JSON file containing the schema to validate",
                },
            },
            "additionalProperties": False,
        },
    ),
]


def list_tools() -> list[Tool]:
    """Static registry, always in the same order."""
    return TOOL_DEFINITIONS


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_mcp_server(dispatcher: ToolDispatcher, app_settings: Settings) -> Server:
    """Create and configure the MCP server instance."""
    server = Server(app_settings.mcp_server_name, version=app_settings.mcp_server_version)

    @server.list_tools()
    async def handle_list_tools() -> list[Tool]:
        logger.debug("Listing available tools")
        return list_tools()

    # Arguments are checked by the handlers so every failure has the same shape.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict | None) -> CallToolResult:
        return await dispatcher.dispatch(name, arguments)

    return server


def create_dispatcher(app_settings: Settings, jq_config: JqConfig) -> ToolDispatcher:
    handlers = build_tool_handlers(
        jq_config,
        default_file_path=app_settings.default_file_path,
        jq_timeout=app_settings.jq_timeout_seconds,
    )
    return ToolDispatcher(handlers)


# ---------------------------------------------------------------------------
# Entry-point: run MCP server over stdio
# ---------------------------------------------------------------------------


async def run_mcp_server(app_settings: Settings, jq_config: JqConfig) -> None:
    """Start the MCP server using stdio transport."""
    server = create_mcp_server(create_dispatcher(app_settings, jq_config), app_settings)
    logger.info(
        "Starting MCP server '%s' v%s (stdio)",
        app_settings.mcp_server_name,
        app_settings.mcp_server_version,
    )

    async with stdio_server() as (read_stream, write_stream):
        logger.debug("Server connected and ready")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry-point."""
    app_settings = build_settings(argv)

    # stdout carries the protocol; logs go to stderr only.
    logging.basicConfig(
        level=app_settings.effective_log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.debug("Verbose mode: %s", app_settings.verbose)
    logger.debug("Default file path: %s", app_settings.default_file_path or "not set")

    jq_config = resolve_or_exit(app_settings.jq_path)

    try:
        asyncio.run(run_mcp_server(app_settings, jq_config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception as exc:
        logger.exception("Server error")
        print(f"Server error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
