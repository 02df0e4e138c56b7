"""JSON tools MCP server: jq queries, schema generation and schema validation."""

__version__ = "1.0.0"
