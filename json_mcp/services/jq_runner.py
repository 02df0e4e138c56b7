"""Run a jq query against an in-memory JSON document in a child process."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from json_mcp.schemas.common import ErrorCode, ErrorDetail, error_detail
from json_mcp.services.jq_binary import JqConfig

logger = logging.getLogger("jq.runner")


def _query_error(message: str) -> ErrorDetail:
    return error_detail(ErrorCode.QUERY_ERROR, f"jq query failed: {message}")


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        proc.kill()
    await proc.wait()


def parse_jq_output(stdout: str) -> Any:
    """Turn compact jq output (one JSON value per line) into a single value.

    No output -> ``None``; one output -> that value; several -> a list.
    """
    values = [json.loads(line) for line in stdout.splitlines() if line.strip()]
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


async def run_jq_query(
    config: JqConfig,
    query: str,
    document: Any,
    timeout: float | None = None,
) -> tuple[Any, ErrorDetail | None]:
    """Execute *query* against *document* using the configured jq binary.

    Args:
        config: Resolved jq binary configuration.
        query: jq filter, passed as a single argv entry (never through a shell).
        document: Parsed JSON value, serialised to jq's stdin.
        timeout: Seconds to wait before killing jq. ``None`` or ``0`` waits
            indefinitely.

    Returns:
        (result, error) – *error* is ``None`` on success.
    """
    payload = json.dumps(document).encode("utf-8")

    try:
        proc = await asyncio.create_subprocess_exec(
            config.binary_path,
            "-c",
            query,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        logger.warning("Could not start jq at %s: %s", config.binary_path, exc)
        return None, _query_error(str(exc))

    try:
        stdout, stderr = await asyncio.wait_for(
            proc.communicate(input=payload), timeout=timeout or None
        )
    except asyncio.TimeoutError:
        await _kill(proc)
        logger.warning("jq timed out after %ss, query=%s", timeout, query)
        return None, _query_error(f"timed out after {timeout:g}s")
    except BaseException:
        # Cancelled mid-run; never leave jq behind.
        await _kill(proc)
        raise

    if proc.returncode != 0:
        message = stderr.decode("utf-8", errors="replace").strip()
        logger.debug("jq exited with %s: %s", proc.returncode, message)
        return None, _query_error(message or f"jq exited with status {proc.returncode}")

    try:
        result = parse_jq_output(stdout.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return None, _query_error(f"unreadable jq output - {exc}")

    return result, None
