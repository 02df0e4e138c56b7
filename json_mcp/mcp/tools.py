"""MCP tool handlers – the bridge between MCP protocol and the JSON services."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Protocol

from json_mcp.schemas.common import ErrorCode, ErrorDetail, ToolResult, error_detail
from json_mcp.services.files import load_json_file, validate_file_path
from json_mcp.services.jq_binary import JqConfig
from json_mcp.services.jq_runner import run_jq_query
from json_mcp.services.schema_service import compile_schema, generate_schema

logger = logging.getLogger("mcp.tools")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class ToolHandler(Protocol):
    """Anything the dispatcher can route a call to."""

    name: str

    async def execute(self, arguments: dict) -> ToolResult: ...


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _ok(text: str) -> ToolResult:
    return ToolResult.success(text)


def _error(error: ErrorDetail) -> ToolResult:
    return ToolResult.failure(error)


def _elapsed_ms(t0: float) -> float:
    return round((time.perf_counter() - t0) * 1000, 2)


def _load_document(path: str | None, fallback: str | None) -> tuple[Any, ErrorDetail | None]:
    """Validate the path, then read and parse it."""
    file_path, error = validate_file_path(path, fallback)
    if error is not None:
        return None, error
    return load_json_file(file_path)


# ---------------------------------------------------------------------------
# Tool implementations
# ---------------------------------------------------------------------------


class QueryJsonHandler:
    """Run a jq filter over a JSON file.

    Args:
        arguments: {"filePath": str | None, "query": str}
    """

    name = "query_json"

    def __init__(
        self,
        jq_config: JqConfig,
        default_file_path: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.jq_config = jq_config
        self.default_file_path = default_file_path
        self.timeout = timeout

    async def execute(self, arguments: dict) -> ToolResult:
        t0 = time.perf_counter()

        # Path problems are reported before a missing query.
        file_path, error = validate_file_path(arguments.get("filePath"), self.default_file_path)
        if error is not None:
            return _error(error)

        query = arguments.get("query")
        if not isinstance(query, str) or not query.strip():
            return _error(error_detail(ErrorCode.INVALID_ARGUMENT, "Query parameter is required"))

        logger.debug("Querying JSON file: %s with query: %s", file_path, query)
        document, error = load_json_file(file_path)
        if error is not None:
            return _error(error)

        result, error = await run_jq_query(self.jq_config, query, document, self.timeout)
        if error is not None:
            logger.info("query_json failed file=%s ms=%.1f", file_path, _elapsed_ms(t0))
            return _error(error)

        logger.info("query_json file=%s ms=%.1f", file_path, _elapsed_ms(t0))
        return _ok(f"Query result:\n{_pretty(result)}")


class GenerateSchemaHandler:
    """Infer a JSON Schema from a JSON file.

    Args:
        arguments: {"filePath": str | None}
    """

    name = "generate_json_schema"

    def __init__(self, default_file_path: str | None = None) -> None:
        self.default_file_path = default_file_path

    async def execute(self, arguments: dict) -> ToolResult:
        t0 = time.perf_counter()

        document, error = _load_document(arguments.get("filePath"), self.default_file_path)
        if error is not None:
            return _error(error)

        try:
            schema = generate_schema(document)
        except Exception as exc:
            logger.warning("Schema generation error: %s", exc)
            return _error(
                error_detail(ErrorCode.SCHEMA_GENERATION_ERROR, f"Schema generation failed: {exc}")
            )

        logger.info("generate_json_schema ms=%.1f", _elapsed_ms(t0))
        return _ok(f"Generated JSON Schema:\n{_pretty(schema)}")


def _summary(schema: Any) -> str:
    if isinstance(schema, dict):
        schema_type = schema.get("type") or "not specified"
        properties = schema.get("properties")
        required = schema.get("required")
    else:
        schema_type, properties, required = "not specified", None, None

    if isinstance(schema_type, list):
        schema_type = ", ".join(str(t) for t in schema_type)
    property_count = len(properties) if isinstance(properties, dict) else "none"
    required_count = len(required) if isinstance(required, list) else 0

    return (
        "Schema summary:\n"
        f"- Type: {schema_type}\n"
        f"- Properties: {property_count}\n"
        f"- Required fields: {required_count}"
    )


class ValidateSchemaHandler:
    """Check that a JSON Schema is well formed.

    An invalid schema is a normal answer, so it comes back with ``ok=True``
    and a negative verdict in the text.

    Args:
        arguments: {"schema": dict | None, "schemaFilePath": str | None}
    """

    name = "validate_json_schema"

    async def execute(self, arguments: dict) -> ToolResult:
        t0 = time.perf_counter()
        inline = arguments.get("schema")
        schema_path = arguments.get("schemaFilePath")

        if inline is not None and schema_path:
            return _error(
                error_detail(
                    ErrorCode.INVALID_ARGUMENT,
                    'Provide only one of "schema" or "schemaFilePath"',
                )
            )

        if inline is not None:
            schema = inline
            logger.debug("Using provided schema object")
        elif schema_path:
            schema, error = _load_document(schema_path, None)
            if error is not None:
                return _error(error)
            logger.debug("Loaded schema from file: %s", schema_path)
        else:
            return _error(
                error_detail(
                    ErrorCode.INVALID_ARGUMENT,
                    'Either "schema" object or "schemaFilePath" must be provided',
                )
            )

        diagnostic = compile_schema(schema)
        logger.info(
            "validate_json_schema valid=%s ms=%.1f", diagnostic is None, _elapsed_ms(t0)
        )

        if diagnostic is not None:
            return _ok(
                "❌ JSON Schema is invalid!\n\n"
                f"Error: {diagnostic}\n\n"
                f"Provided schema:\n{_pretty(schema)}"
            )

        return _ok(
            "✅ JSON Schema is valid!\n\n"
            f"{_summary(schema)}\n\n"
            f"Full validated schema:\n{_pretty(schema)}"
        )


def build_tool_handlers(
    jq_config: JqConfig,
    default_file_path: str | None = None,
    jq_timeout: float | None = None,
) -> dict[str, ToolHandler]:
    """Wire every handler with its explicit configuration, keyed by tool name."""
    handlers: list[ToolHandler] = [
        QueryJsonHandler(jq_config, default_file_path, jq_timeout),
        GenerateSchemaHandler(default_file_path),
        ValidateSchemaHandler(),
    ]
    return {handler.name: handler for handler in handlers}
