"""File access guard: path validation and JSON loading.

Both helpers return ``(value, error)`` pairs instead of raising for the
expected failure modes, so callers can return the error straight to the
dispatcher.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from json_mcp.schemas.common import ErrorCode, ErrorDetail, error_detail

logger = logging.getLogger("files")


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON.
    raise ValueError(f"Unexpected token {name}")


def validate_file_path(
    path: str | None, fallback: str | None = None
) -> tuple[str | None, ErrorDetail | None]:
    """Check that *path* (or *fallback*) is an absolute path to a regular file.

    Returns:
        (path, error) – *path* is the validated path, or ``None`` with a
        populated *error*.
    """
    candidate = path or fallback
    if not candidate:
        return None, error_detail(
            ErrorCode.INVALID_ARGUMENT,
            "File path is required",
            hint="Pass filePath or start the server with --file-path.",
        )

    # Pure string check, no filesystem access for relative paths.
    if not os.path.isabs(candidate):
        return None, error_detail(ErrorCode.INVALID_ARGUMENT, "File path must be absolute")

    target = Path(candidate)
    if not target.exists():
        return None, error_detail(ErrorCode.NOT_FOUND, f"File does not exist: {candidate}")
    if not target.is_file():
        return None, error_detail(
            ErrorCode.INVALID_ARGUMENT, f"Path must point to a file: {candidate}"
        )

    return candidate, None


def load_json_file(path: str) -> tuple[Any, ErrorDetail | None]:
    """Read *path* as UTF-8 and parse it as JSON.

    The parsed value may legitimately be ``None`` (a ``null`` document), so
    callers must test the error, not the value.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return None, error_detail(ErrorCode.NOT_FOUND, f"File not found: {path}")
    except UnicodeDecodeError as exc:
        return None, error_detail(ErrorCode.PARSE_ERROR, f"Invalid JSON in file: {path} - {exc}")

    try:
        document = json.loads(content, parse_constant=_reject_constant)
    except ValueError as exc:
        return None, error_detail(ErrorCode.PARSE_ERROR, f"Invalid JSON in file: {path} - {exc}")

    logger.debug("Loaded JSON file %s (%d bytes)", path, len(content))
    return document, None
