"""Tests for path validation and JSON loading."""

from __future__ import annotations

import json
import os
from unittest.mock import patch

from json_mcp.schemas.common import ErrorCode
from json_mcp.services.files import load_json_file, validate_file_path


# ---------------------------------------------------------------------------
# validate_file_path
# ---------------------------------------------------------------------------


def test_valid_absolute_path(sample_file):
    path, error = validate_file_path(sample_file)
    assert error is None
    assert path == sample_file


def test_fallback_used_when_path_missing(sample_file):
    path, error = validate_file_path(None, sample_file)
    assert error is None
    assert path == sample_file


def test_empty_path_falls_back(sample_file):
    path, _ = validate_file_path("", sample_file)
    assert path == sample_file


def test_explicit_path_wins_over_fallback(sample_file, write_json):
    other = write_json([1], name="other.json")
    path, _ = validate_file_path(other, sample_file)
    assert path == other


def test_no_path_and_no_fallback():
    path, error = validate_file_path(None, None)
    assert path is None
    assert error.error_code == ErrorCode.INVALID_ARGUMENT
    assert error.message == "File path is required"


def test_relative_path_rejected_without_touching_filesystem():
    """Relative paths must fail before any filesystem access."""
    with patch("json_mcp.services.files.Path") as mock_path:
        path, error = validate_file_path("data/file.json")
    assert path is None
    assert error.error_code == ErrorCode.INVALID_ARGUMENT
    assert "absolute" in error.message
    mock_path.assert_not_called()


def test_missing_file(tmp_path):
    missing = str(tmp_path / "nope.json")
    _, error = validate_file_path(missing)
    assert error.error_code == ErrorCode.NOT_FOUND
    assert missing in error.message


def test_directory_rejected(tmp_path):
    _, error = validate_file_path(str(tmp_path))
    assert error.error_code == ErrorCode.INVALID_ARGUMENT
    assert "must point to a file" in error.message


# ---------------------------------------------------------------------------
# load_json_file
# ---------------------------------------------------------------------------


def test_load_matches_direct_parse(sample_file):
    with open(sample_file, encoding="utf-8") as fh:
        expected = json.load(fh)
    document, error = load_json_file(sample_file)
    assert error is None
    assert document == expected


def test_load_null_document(write_json):
    """A literal null is a valid document, distinguishable from a failure."""
    document, error = load_json_file(write_json(None))
    assert document is None
    assert error is None


def test_load_invalid_json(broken_file):
    document, error = load_json_file(broken_file)
    assert document is None
    assert error.error_code == ErrorCode.PARSE_ERROR
    assert error.message.startswith(f"Invalid JSON in file: {broken_file} - ")


def test_load_non_utf8(tmp_path):
    target = tmp_path / "latin1.json"
    target.write_bytes(b'{"name": "\xe9"}')
    _, error = load_json_file(str(target))
    assert error.error_code == ErrorCode.PARSE_ERROR


def test_load_file_removed_after_validation(sample_file):
    path, _ = validate_file_path(sample_file)
    os.remove(path)
    _, error = load_json_file(path)
    assert error.error_code == ErrorCode.NOT_FOUND
    assert error.message == f"File not found: {path}"


def test_load_rejects_non_json_constants(tmp_path):
    """NaN and Infinity are Python extensions, not JSON."""
    target = tmp_path / "constants.json"
    target.write_text('{"a": NaN, "b": Infinity}', encoding="utf-8")
    document, error = load_json_file(str(target))
    assert document is None
    assert error.error_code == ErrorCode.PARSE_ERROR
    assert error.message == f"Invalid JSON in file: {target} - Unexpected token NaN"


def test_load_rejects_negative_infinity(tmp_path):
    target = tmp_path / "neg.json"
    target.write_text("[-Infinity]", encoding="utf-8")
    _, error = load_json_file(str(target))
    assert error.error_code == ErrorCode.PARSE_ERROR
    assert "-Infinity" in error.message
