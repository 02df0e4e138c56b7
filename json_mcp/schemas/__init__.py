"""Pydantic result schemas."""

from json_mcp.schemas.common import ErrorCode, ErrorDetail, ToolResult, error_detail

__all__ = [
    "ErrorCode",
    "ErrorDetail",
    "ToolResult",
    "error_detail",
]
