"""AON reader.

Parses the header into a schema table, buffers the data rows and decodes
each row positionally against the root schema.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

import orjson

from aon.errors import AONSchemaError, AONStructureError
from aon.types import Schema, SchemaField, SchemaTable, is_primitive, list_item_type
from aon.writer import END, NULL

log = logging.getLogger(__name__)

_OPENERS = {"(": ")", "[": "]"}
_CLOSERS = {")", "]"}


def split_top_level(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep`` outside brackets, parentheses and string literals.

    Parts are stripped. A trailing empty part is dropped, so ``""`` splits
    into ``[]``.

    >>> split_top_level('1,(2,3),"a,b",[4 ; 5]', ",")
    ['1', '(2,3)', '"a,b"', '[4 ; 5]']
    """
    parts: list[str] = []
    buf: list[str] = []
    depth = 0
    in_string = False
    escaped = False

    for ch in text:
        if in_string:
            buf.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        elif ch == sep and depth == 0:
            parts.append("".join(buf).strip())
            buf.clear()
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        parts.append(tail)
    return parts


def split_commas(text: str) -> list[str]:
    return split_top_level(text, ",")


def split_semicolons(text: str) -> list[str]:
    return split_top_level(text, ";")


def _unwrap(text: str, opener: str, closer: str) -> str | None:
    if len(text) >= 2 and text[0] == opener and text[-1] == closer:
        return text[1:-1]
    return None


def _decode_string(text: str) -> str:
    inner = _unwrap(text, '"', '"')
    if inner is None:
        return text
    try:
        decoded = orjson.loads(text)
    except orjson.JSONDecodeError:
        return inner
    return decoded if isinstance(decoded, str) else inner


def _decode_number(text: str) -> int | float | None:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def decode_object(text: str, schema: Schema, schemas: SchemaTable) -> dict[str, Any]:
    """Decode the comma-separated body of a nested object.

    Parts are paired with fields positionally; surplus parts are ignored and
    fields without a part are left out.
    """
    parts = split_commas(text)
    return {
        f.name: decode_value(f.type, part, schemas)
        for f, part in zip(schema.fields, parts, strict=False)
    }


def decode_value(field_type: str, text: str, schemas: SchemaTable) -> Any:
    """Decode one encoded value against its declared type.

    Decoding is lenient: unparsable numbers become None, malformed lists
    become ``[]``, malformed nested objects become None and unknown types
    decode as strings.
    """
    text = text.strip()
    if text == NULL:
        return None

    if field_type == "boolean":
        return text == "true"
    if field_type == "number":
        return _decode_number(text)
    if field_type == "string":
        return _decode_string(text)

    item_type = list_item_type(field_type)
    if item_type is not None:
        inner = _unwrap(text, "[", "]")
        if inner is None or not inner.strip():
            return []
        return [decode_value(item_type, item, schemas) for item in split_semicolons(inner)]

    if not is_primitive(field_type) and field_type in schemas:
        inner = _unwrap(text, "(", ")")
        if inner is None:
            return None
        return decode_object(inner, schemas[field_type], schemas)

    return _decode_string(text)


def parse_schema_line(line: str) -> Schema | None:
    """Parse a ``name:(field:type,...)`` header line.

    Returns None for lines that do not have that shape.
    """
    pos = line.find(":(")
    if pos <= 0 or not line.endswith(")"):
        return None

    name = line[:pos].strip()
    fields: list[SchemaField] = []
    for pair in split_commas(line[pos + 2 : -1]):
        field_name, colon, field_type = pair.partition(":")
        if colon:
            fields.append(SchemaField(field_name.strip(), field_type.strip()))
    return Schema(name, tuple(fields))


class _State(Enum):
    SEEKING = auto()
    IN_SCHEMAS = auto()
    IN_DATA = auto()
    DONE = auto()


@dataclass
class ParsedDocument:
    """Header and raw rows of an AON document."""

    schemas: SchemaTable = field(default_factory=dict)
    root_name: str | None = None
    rows: list[str] = field(default_factory=list)
    count: int | None = None

    @property
    def root(self) -> Schema:
        if self.root_name is None:
            raise AONSchemaError("No schemas found")
        try:
            return self.schemas[self.root_name]
        except KeyError:
            raise AONSchemaError(f"Root schema '{self.root_name}' not found") from None


def parse_document(text: str) -> ParsedDocument:
    """Scan an AON document into its schema table and undecoded rows."""
    doc = ParsedDocument()
    state = _State.SEEKING

    # str.splitlines() would also break on U+2028 and friends, which may
    # appear unescaped inside string literals.
    for raw in text.split("\n"):
        line = raw.strip()

        if line == END:
            state = _State.DONE
            break
        if line == "schemas:{":
            state = _State.IN_SCHEMAS
            continue
        if line == "}" and state is _State.IN_SCHEMAS:
            state = _State.SEEKING
            continue
        if line == "data:" and state is _State.SEEKING:
            state = _State.IN_DATA
            continue

        if state is _State.IN_SCHEMAS:
            schema = parse_schema_line(line)
            if schema is not None:
                if doc.root_name is None:
                    doc.root_name = schema.name
                doc.schemas[schema.name] = schema
        elif state is _State.IN_DATA:
            if line:
                doc.rows.append(line)
        elif line.startswith("count:"):
            count = line.removeprefix("count:").strip()
            if count.isdigit():
                doc.count = int(count)

    return doc


def decode_row(row: str, schema: Schema, schemas: SchemaTable) -> dict[str, Any]:
    """Decode one top-level data row.

    Raises:
        AONStructureError: If the row's field count differs from the schema's.
    """
    parts = split_commas(row)
    if len(parts) != len(schema):
        raise AONStructureError(
            f"Data row size mismatch: expected {len(schema)}, got {len(parts)}"
        )
    return {
        f.name: decode_value(f.type, part, schemas)
        for f, part in zip(schema.fields, parts, strict=True)
    }


def decode_document(text: str, *, unwrap_single: bool = True) -> Any:
    """Decode an AON document.

    Returns:
        The decoded object when the document holds exactly one row and
        ``unwrap_single`` is true, otherwise the list of decoded objects.

    Raises:
        AONSchemaError: If the header declares no schemas.
        AONStructureError: If a row does not match the root schema.
    """
    doc = parse_document(text)
    root = doc.root
    if doc.count is not None and doc.count != len(doc.rows):
        log.debug("Header count %d does not match %d data rows", doc.count, len(doc.rows))
    results = [decode_row(row, root, doc.schemas) for row in doc.rows]
    if unwrap_single and len(results) == 1:
        return results[0]
    return results
