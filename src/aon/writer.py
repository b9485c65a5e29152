"""AON writer.

Renders rows positionally against a schema table:

    !aon
    count:2
    schemas:{
      users:(id:number,name:string,profile:profile)
      profile:(age:number,zip:string)
    }
    data:
    1,"Alice",(30,06114020)
    2,"Bob",_
    end
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

import orjson

from aon.errors import AONEmptyInputError, AONInputError, AONSchemaError
from aon.types import Schema, SchemaTable, is_list, is_object, is_primitive, kind_of, list_item_type

MARKER = "!aon"
END = "end"
NULL = "_"
FIELD_SEP = ","
ITEM_SEP = " ; "


def encode_scalar(value: Any) -> str:
    """Encode a scalar value.

    Strings made only of ASCII digits travel unquoted so values such as
    postal codes keep their leading zeros without quoting overhead.
    """
    kind = kind_of(value)
    if kind == "null":
        return NULL
    if kind == "boolean":
        return "true" if value else "false"
    if kind == "number":
        if isinstance(value, float):
            return orjson.dumps(value).decode() if math.isfinite(value) else NULL
        return str(int(value))
    if kind == "string":
        if not isinstance(value, str):
            raise AONInputError(f"Unsupported value of type {type(value).__name__}")
        if value.isascii() and value.isdigit():
            return value
        return orjson.dumps(value).decode()
    # Containers in a scalar slot have no positional form.
    return NULL


def _is_schema_ref(field_type: str, schemas: SchemaTable) -> bool:
    return not is_primitive(field_type) and field_type in schemas


def encode_object(obj: Any, schema: Schema, schemas: SchemaTable) -> str:
    """Encode one object as a comma-joined row of its schema's fields."""
    if not is_object(obj):
        return NULL

    parts: list[str] = []
    for field in schema.fields:
        value = obj.get(field.name)
        item_type = list_item_type(field.type)

        if _is_schema_ref(field.type, schemas):
            if is_object(value):
                parts.append(f"({encode_object(value, schemas[field.type], schemas)})")
            else:
                parts.append(NULL)
        elif item_type is not None:
            parts.append(_encode_list(value, item_type, schemas))
        else:
            parts.append(encode_scalar(value))

    return FIELD_SEP.join(parts)


def _encode_list(value: Any, item_type: str, schemas: SchemaTable) -> str:
    if not is_list(value):
        return "[]"
    if _is_schema_ref(item_type, schemas):
        sub = schemas[item_type]
        items = [f"({encode_object(item, sub, schemas)})" for item in value]
    else:
        items = [encode_scalar(item) for item in value]
    return f"[{ITEM_SEP.join(items)}]"


def format_header(count: int, schemas: SchemaTable, root_name: str) -> list[str]:
    """Render header lines, root schema first and the rest in table order."""
    lines = [MARKER, f"count:{count}", "schemas:{"]
    lines.append(f"  {schemas[root_name].describe()}")
    lines.extend(f"  {schema.describe()}" for name, schema in schemas.items() if name != root_name)
    lines.extend(["}", "data:"])
    return lines


def encode_rows(rows: Sequence[Any], schemas: SchemaTable, root_name: str) -> str:
    """Encode ``rows`` as a complete AON document.

    Raises:
        AONEmptyInputError: If there are no rows.
        AONSchemaError: If ``root_name`` is not in ``schemas``.
    """
    if not rows:
        raise AONEmptyInputError("Empty input: nothing to encode")
    if root_name not in schemas:
        raise AONSchemaError(f"Root schema '{root_name}' not found")

    root = schemas[root_name]
    lines = format_header(len(rows), schemas, root_name)
    lines.extend(encode_object(row, root, schemas) for row in rows)
    lines.append(END)
    return "\n".join(lines) + "\n"


def rows_of(data: Any) -> list[Any]:
    """Normalize a document root into its list of rows.

    Raises:
        AONInputError: If the root is neither an object nor a list, or is a
            non-empty list without any objects.
    """
    if is_list(data):
        rows = list(data)
        if rows and not any(is_object(row) for row in rows):
            raise AONInputError("AON root list must contain objects")
        return rows
    if isinstance(data, Mapping):
        return [data]
    raise AONInputError("AON root must be an object or a list of objects")
