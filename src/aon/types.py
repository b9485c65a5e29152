"""Value model, type classifier and schema types for AON.

Values are plain JSON-native Python objects. Field types are kept in their
textual header form (``number``, ``address``, ``list<tags>``) so the table
built by inference and the table parsed from a header are interchangeable.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

Value: TypeAlias = "None | bool | int | float | str | list[Value] | dict[str, Value]"

Kind = Literal["null", "boolean", "number", "string", "array", "object"]

PRIMITIVE_TYPES: frozenset[str] = frozenset({"null", "boolean", "number", "string"})

_LIST_PREFIX = "list<"
_LIST_SUFFIX = ">"


def kind_of(value: Any) -> Kind:
    """Classify a value into one of the six AON kinds.

    Booleans are checked before numbers since ``bool`` subclasses ``int``.
    Values that are not JSON-native fall through to ``string``; callers that
    need strictness validate before classifying.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return "string"


def is_object(value: Any) -> bool:
    return kind_of(value) == "object"


def is_list(value: Any) -> bool:
    return kind_of(value) == "array"


def is_primitive(field_type: str) -> bool:
    return field_type in PRIMITIVE_TYPES


def list_of(item_type: str) -> str:
    """Return the ``list<T>`` type for ``item_type``."""
    return f"{_LIST_PREFIX}{item_type}{_LIST_SUFFIX}"


def list_item_type(field_type: str) -> str | None:
    """Return ``T`` for a ``list<T>`` type, or None for any other type."""
    if field_type.startswith(_LIST_PREFIX) and field_type.endswith(_LIST_SUFFIX):
        return field_type[len(_LIST_PREFIX) : -len(_LIST_SUFFIX)]
    return None


@dataclass(frozen=True)
class SchemaField:
    """One positional slot of a schema."""

    name: str
    type: str

    def describe(self) -> str:
        return f"{self.name}:{self.type}"


@dataclass(frozen=True)
class Schema:
    """A named, ordered record shape."""

    name: str
    fields: tuple[SchemaField, ...]

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def __len__(self) -> int:
        return len(self.fields)

    def describe(self) -> str:
        """Render the schema as a header line body: ``name:(f:t,...)``."""
        return f"{self.name}:({','.join(f.describe() for f in self.fields)})"


# Keyed by schema name; insertion order is discovery order.
SchemaTable: TypeAlias = dict[str, Schema]
