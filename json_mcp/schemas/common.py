"""Shared handler result envelope and error schema."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Recoverable, per-call failure kinds."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    PARSE_ERROR = "PARSE_ERROR"
    QUERY_ERROR = "QUERY_ERROR"
    SCHEMA_GENERATION_ERROR = "SCHEMA_GENERATION_ERROR"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    """Structured error returned when a tool fails."""

    error_code: ErrorCode
    message: str
    hint: str | None = None


class ToolResult(BaseModel):
    """Outcome of one handler invocation.

    Exactly one of ``text`` (when ``ok``) or ``error`` (when not ``ok``) is set.
    """

    ok: bool
    text: str | None = None
    error: ErrorDetail | None = None

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, error: ErrorDetail) -> "ToolResult":
        return cls(ok=False, error=error)


def error_detail(code: ErrorCode, message: str, hint: str | None = None) -> ErrorDetail:
    return ErrorDetail(error_code=code, message=message, hint=hint)
