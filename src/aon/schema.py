"""Schema inference.

Walks a sample document and discovers every named record shape reachable
through object fields and arrays of objects. Schemas are keyed by field
name, so two nested objects reached through the same field name share one
schema and the one processed last wins.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from aon.errors import AONInputError
from aon.types import (
    Schema,
    SchemaField,
    SchemaTable,
    is_list,
    is_object,
    is_primitive,
    kind_of,
    list_item_type,
    list_of,
)

log = logging.getLogger(__name__)

DiscoveryOrder = Literal["stack", "breadth"]

Path = tuple[str, ...]
WorkItem = tuple[str, Path, Any]

# Characters with a meaning in header lines or rows.
_RESERVED_NAME_CHARS = frozenset(",:;()[]{}\"\n\r")


def check_name(name: Any) -> str:
    """Return ``name`` if it can be written into a header, else raise.

    Raises:
        AONInputError: If the name is not a string, is empty, has surrounding
            whitespace or contains header punctuation.
    """
    if not isinstance(name, str) or not name:
        raise AONInputError(f"Invalid field name: {name!r}")
    if name != name.strip() or not _RESERVED_NAME_CHARS.isdisjoint(name):
        raise AONInputError(f"Invalid field name for an AON header: {name!r}")
    return name


def collect_objects(root: Any, path: Sequence[str]) -> list[Any]:
    """Collect every value reachable from ``root`` along ``path``.

    Arrays are expanded transparently at every segment, so
    ``["profile", "addresses"]`` over a list of users yields every address
    object of every user. With an empty path the root itself is expanded:
    a list yields its elements, an object yields itself.

    >>> collect_objects([{"a": {"x": 1}}, {"a": {"x": 2}}], ["a"])
    [{'x': 1}, {'x': 2}]
    """
    if not path:
        if is_list(root):
            return list(root)
        if is_object(root):
            return [root]
        return []

    key, rest = path[0], path[1:]
    if is_list(root):
        found: list[Any] = []
        for item in root:
            if is_object(item) and key in item:
                found.extend(collect_objects(item[key], rest))
        return found
    if is_object(root) and key in root:
        return collect_objects(root[key], rest)
    return []


def infer_field_type(
    field_name: str,
    values: Sequence[Any],
    parent_path: Path,
    pending: list[WorkItem],
) -> str:
    """Infer a field's type from its observed values.

    Nested objects and lists of objects become schema references named after
    the field, and a work item for the nested schema is appended to
    ``pending``.
    """
    path = (*parent_path, field_name)

    first_object = next((v for v in values if is_object(v)), None)
    if first_object is not None:
        _check_schema_name(field_name)
        pending.append((field_name, path, first_object))
        return field_name

    lists = [v for v in values if is_list(v)]
    if lists:
        sample = next((lst for lst in lists if any(is_object(item) for item in lst)), None)
        if sample is not None:
            _check_schema_name(field_name)
            pending.append((field_name, path, sample))
            return list_of(field_name)
        # Scalar lists are not refined further.
        return list_of("string")

    for value in values:
        if value is not None:
            return kind_of(value)
    return "null"


def _check_schema_name(name: str) -> None:
    # A nested schema named like a built-in type would be read back as that type.
    if is_primitive(name) or list_item_type(name) is not None:
        raise AONInputError(f"Nested field {name!r} clashes with a built-in type name")


def _sample_objects(root: Any, path: Path, sample: Any) -> list[Mapping[str, Any]]:
    # Nested paths re-walk the original document, not the cached sample, so
    # every object at that position contributes fields.
    candidates = collect_objects(sample if not path else root, path)
    return [obj for obj in candidates if is_object(obj)]


def _schema_for(
    name: str,
    path: Path,
    objects: list[Mapping[str, Any]],
    pending: list[WorkItem],
) -> Schema:
    observed: dict[str, list[Any]] = {}
    for obj in objects:
        for key, value in obj.items():
            observed.setdefault(check_name(key), []).append(value)

    fields = tuple(
        SchemaField(field_name, infer_field_type(field_name, values, path, pending))
        for field_name, values in observed.items()
    )
    return Schema(name, fields)


def build_schemas(root: Any, root_name: str, *, order: DiscoveryOrder = "stack") -> SchemaTable:
    """Discover all record shapes in ``root``.

    Args:
        root: An object or a list of objects.
        root_name: Name given to the schema of the top-level rows.
        order: ``"stack"`` processes discoveries last-in-first-out, so
            siblings are recorded in reverse field order. ``"breadth"``
            processes them first-in-first-out, level by level.

    Returns:
        Schema table keyed by name, in the order schemas were first recorded.
        The root schema is absent only when ``root`` holds no objects.
    """
    if order not in ("stack", "breadth"):
        raise ValueError(f"Unknown discovery order: {order!r}")
    check_name(root_name)

    schemas: SchemaTable = {}
    work: deque[WorkItem] = deque([(root_name, (), root)])

    while work:
        name, path, sample = work.pop() if order == "stack" else work.popleft()

        objects = _sample_objects(root, path, sample)
        if not objects:
            log.debug("No objects at path %s; skipping schema %r", ".".join(path), name)
            continue

        pending: list[WorkItem] = []
        schema = _schema_for(name, path, objects, pending)
        work.extend(pending)

        if name in schemas and schemas[name] != schema:
            log.debug("Schema %r redefined at path %s", name, ".".join(path))
        schemas[name] = schema
        log.debug("Recorded schema %s", schema.describe())

    return schemas
