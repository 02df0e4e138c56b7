"""Shared pytest fixtures – JSON files on disk and a resolved jq binary."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from json_mcp.services.jq_binary import InputMode, JqConfig


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a value as JSON under tmp_path and return the absolute path string."""

    def _write(value, name: str = "data.json") -> str:
        target = tmp_path / name
        target.write_text(json.dumps(value), encoding="utf-8")
        return str(target)

    return _write


@pytest.fixture
def sample_file(write_json) -> str:
    return write_json({"a": [1, 2, 3], "name": "alpha", "items": [{"id": 1}, {"id": 2}]})


@pytest.fixture
def broken_file(tmp_path: Path) -> str:
    target = tmp_path / "broken.json"
    target.write_text('{"a": [1, 2,', encoding="utf-8")
    return str(target)


@pytest.fixture
def jq_config() -> JqConfig:
    """Real jq from PATH; tests that need it are skipped when it is missing."""
    path = shutil.which("jq")
    if path is None:
        pytest.skip("jq is not installed")
    return JqConfig(binary_path=path, input_mode=InputMode.JSON)


@pytest.fixture
def missing_jq_config(tmp_path: Path) -> JqConfig:
    return JqConfig(binary_path=str(tmp_path / "no-such-jq"))
