"""Route tool calls by name and turn every outcome into a CallToolResult."""

from __future__ import annotations

import logging
from typing import Mapping

from mcp.types import CallToolResult, TextContent

from json_mcp.mcp.tools import ToolHandler
from json_mcp.schemas.common import ErrorCode, ErrorDetail, ToolResult, error_detail

logger = logging.getLogger("mcp.dispatch")


def _response(text: str, is_error: bool) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def error_result(error: ErrorDetail) -> CallToolResult:
    return _response(f"Error: {error.message}", is_error=True)


class ToolDispatcher:
    """Name -> handler table.

    Adding a tool means adding an entry to the table; ``dispatch`` never
    changes.  ``dispatch`` never raises: unknown names, handler failures and
    unexpected exceptions all come back as ``isError=True`` results.
    """

    def __init__(self, handlers: Mapping[str, ToolHandler]) -> None:
        self._handlers = dict(handlers)

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    async def dispatch(self, name: str, arguments: dict | None) -> CallToolResult:
        logger.debug("Tool called: %s %s", name, arguments)

        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("Unknown tool requested: %s", name)
            return error_result(error_detail(ErrorCode.UNKNOWN_TOOL, f"Unknown tool: {name}"))

        try:
            result: ToolResult = await handler.execute(arguments or {})
        except Exception as exc:
            logger.exception("Tool %s raised", name)
            return error_result(error_detail(ErrorCode.INTERNAL_ERROR, str(exc) or type(exc).__name__))

        if not result.ok:
            logger.debug("Tool %s failed: %s", name, result.error.error_code.value)
            return error_result(result.error)

        return _response(result.text or "", is_error=False)
