"""Application configuration loaded from environment variables and CLI flags."""

from __future__ import annotations

import argparse
from typing import Sequence

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings pulled from .env / environment (``JSON_MCP_*``)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="JSON_MCP_",
        extra="ignore",
    )

    # App
    log_level: str = "WARNING"
    verbose: bool = False
    """Force DEBUG logging on stderr."""

    # MCP
    mcp_server_name: str = "json-tools-server"
    mcp_server_version: str = "1.0.0"

    # Tools
    default_file_path: str | None = None
    """Used when a tool call omits ``filePath``."""

    jq_path: str | None = None
    """Explicit jq binary. Skips PATH auto-detection when set."""

    jq_timeout_seconds: float | None = 30.0
    """Upper bound for a single jq run. ``None`` or ``0`` waits forever."""

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.verbose else self.log_level.upper()


settings = Settings()


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-mcp-server",
        description="MCP server exposing jq queries and JSON Schema tools over stdio.",
    )
    parser.add_argument(
        "--verbose",
        nargs="?",
        const=True,
        default=None,
        type=_parse_bool,
        metavar="true|false",
        help="Enable verbose logging on stderr",
    )
    parser.add_argument(
        "--file-path",
        dest="default_file_path",
        default=None,
        help="Default file path for JSON operations",
    )
    parser.add_argument(
        "--jq-path",
        dest="jq_path",
        default=None,
        help="Path to local jq binary (auto-detected if not provided)",
    )
    parser.add_argument(
        "--jq-timeout",
        dest="jq_timeout_seconds",
        type=float,
        default=None,
        help="Seconds before a jq query is killed (0 disables the limit)",
    )
    return parser


def build_settings(argv: Sequence[str] | None = None) -> Settings:
    """Return a ``Settings`` with CLI flags layered over the environment.

    Flags that are not given on the command line leave the environment /
    ``.env`` value untouched.
    """
    args = build_arg_parser().parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if value is not None}
    return Settings(**overrides)
