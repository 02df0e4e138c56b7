"""Locate and validate the jq executable once, before the server starts.

The resolved :class:`JqConfig` is immutable and handed to the query handler
by parameter.  A failed resolution is the only fatal startup error: the
remediation text goes to stderr and the process exits with status 1.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from enum import Enum
from typing import TextIO

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger("jq.binary")


class InputMode(str, Enum):
    """How documents are handed to jq."""

    JSON = "json"


class JqConfig(BaseModel):
    """Execution configuration for every jq run."""

    model_config = ConfigDict(frozen=True)

    binary_path: str
    input_mode: InputMode = InputMode.JSON


class JqBinaryError(RuntimeError):
    """Raised when jq cannot be found or is not accessible."""


def _is_windows(platform: str) -> bool:
    return platform.startswith("win")


def _detect(platform: str) -> str:
    path = shutil.which("jq")
    if path:
        logger.debug("Auto-detected jq at: %s", path)
        return path

    if _is_windows(platform):
        path = shutil.which("jq.exe")
        if path:
            logger.debug("Auto-detected jq.exe at: %s", path)
            return path

    raise JqBinaryError("not found: jq (searched PATH)")


def resolve_jq_binary(custom_path: str | None = None, platform: str | None = None) -> JqConfig:
    """Resolve the jq binary, either verbatim from *custom_path* or from ``PATH``.

    Raises:
        JqBinaryError: if nothing is found on ``PATH`` or the candidate is
            not accessible.
    """
    platform = platform or sys.platform

    if custom_path:
        jq_path = custom_path
        logger.debug("Using custom jq path: %s", jq_path)
    else:
        jq_path = _detect(platform)

    if not os.access(jq_path, os.F_OK | os.R_OK):
        raise JqBinaryError(f"jq binary not accessible: {jq_path}")

    logger.debug("jq binary found and accessible: %s", jq_path)
    return JqConfig(binary_path=jq_path, input_mode=InputMode.JSON)


def remediation_message(error: Exception, platform: str | None = None) -> str:
    """Build the multi-line install hint shown when jq cannot be resolved."""
    platform = platform or sys.platform
    lines = ["❌ Error: Local jq binary not found or not executable", ""]

    if _is_windows(platform):
        lines += [
            "Please install jq on Windows using:",
            "  • Chocolatey: choco install jq",
            "  • Scoop: scoop install jq",
            "  • Manual: Download from https://jqlang.github.io/jq/download/",
            "  • WSL: wsl -e sudo apt-get install jq",
        ]
    else:
        lines += [
            "Please install jq using:",
            "  • macOS: brew install jq",
            "  • Ubuntu/Debian: sudo apt-get install jq",
            "  • CentOS/RHEL: sudo yum install jq",
        ]

    lines += ["", "Or specify a custom path with --jq-path=/path/to/jq"]
    if _is_windows(platform):
        lines.append('Example: --jq-path="C:\\Program Files\\jq\\jq.exe"')
    lines += ["", f"Detection error: {error}"]
    return "\n".join(lines)


def resolve_or_exit(
    custom_path: str | None = None,
    platform: str | None = None,
    stream: TextIO | None = None,
) -> JqConfig:
    """Resolve jq or terminate the process with exit status 1."""
    try:
        return resolve_jq_binary(custom_path, platform)
    except JqBinaryError as exc:
        stream = stream or sys.stderr
        print(remediation_message(exc, platform), file=stream)
        raise SystemExit(1) from exc
