"""MCP protocol layer: tool registry, dispatcher and handlers."""
