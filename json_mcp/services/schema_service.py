"""JSON Schema inference (genson) and compilation checks (jsonschema)."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from genson import SchemaBuilder
from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for
from referencing import Registry, Resource
from referencing.exceptions import CannotDetermineSpecification, Unresolvable
from referencing.jsonschema import DRAFT7, UnknownDialect

logger = logging.getLogger("schema")

SCHEMA_URI = "http://json-schema.org/draft-07/schema#"

# Keywords whose values are instance data, not subschemas.
_DATA_KEYWORDS = frozenset({"enum", "const", "examples", "default"})


def generate_schema(document: Any) -> dict:
    """Infer a draft-07 JSON Schema describing *document*."""
    builder = SchemaBuilder(schema_uri=SCHEMA_URI)
    builder.add_object(document)
    return builder.to_schema()


def _iter_local_refs(node: Any, is_root: bool = True) -> Iterator[str]:
    if isinstance(node, dict):
        # A nested $id starts a new resource with its own base URI.
        if not is_root and isinstance(node.get("$id"), str):
            return
        ref = node.get("$ref")
        if isinstance(ref, str) and ref.startswith("#"):
            yield ref
        for key, value in node.items():
            if key in _DATA_KEYWORDS:
                continue
            yield from _iter_local_refs(value, is_root=False)
    elif isinstance(node, list):
        for item in node:
            yield from _iter_local_refs(item, is_root=False)


def _check_local_refs(schema: dict) -> str | None:
    try:
        resource = Resource.from_contents(schema, default_specification=DRAFT7)
    except (CannotDetermineSpecification, UnknownDialect):
        resource = DRAFT7.create_resource(schema)
    resolver = Registry().resolver_with_root(resource)

    for ref in _iter_local_refs(schema):
        seen = {ref}
        target = ref
        while True:
            try:
                contents = resolver.lookup(target).contents
            except Unresolvable as exc:
                return f"can't resolve reference {target}: {exc}"
            # Follow bare reference chains; a chain that loops never reaches a schema.
            next_ref = contents.get("$ref") if isinstance(contents, dict) else None
            if not (isinstance(next_ref, str) and next_ref.startswith("#")) or len(contents) != 1:
                break
            if next_ref in seen:
                return f"circular reference {ref} never resolves to a schema"
            seen.add(next_ref)
            target = next_ref
    return None


def compile_schema(schema: Any) -> str | None:
    """Check that *schema* is a structurally valid JSON Schema.

    Unknown keywords are ignored.  Only the schema itself is checked; no
    instance is validated against it.

    Returns:
        ``None`` when the schema compiles, otherwise the diagnostic text.
    """
    if isinstance(schema, bool):
        return None
    if not isinstance(schema, dict):
        return f"schema must be an object or boolean, got {type(schema).__name__}"

    dialect = schema.get("$schema")
    if dialect is not None and not isinstance(dialect, str):
        return "$schema must be a string URI"

    validator_cls = validator_for(schema, default=Draft7Validator)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as exc:
        location = "/" + "/".join(str(part) for part in exc.path)
        logger.debug("Schema rejected by %s: %s", validator_cls.__name__, exc.message)
        return f"{exc.message} (at {location})"

    return _check_local_refs(schema)
