"""Collaborators behind the tools: file access, jq and JSON Schema."""
