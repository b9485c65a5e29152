"""AON Protocol.

AON is a compact, schema-deduplicated notation for lists of JSON objects.
A header names every record shape once; each data row is then written
positionally against its shape, so field names are never repeated.

Core features:
    - Schema inference: nested objects and lists of objects get their own
      named schemas, discovered from the data itself.
    - Positional rows: objects become comma-joined values in schema order.
    - Self-describing: the header carries everything needed to decode.
"""

from __future__ import annotations

from typing import Any

from aon.encoding import DEFAULT_ENCODING, count_tokens
from aon.reader import decode_document
from aon.schema import DiscoveryOrder, build_schemas
from aon.types import SchemaTable
from aon.writer import encode_rows, rows_of


class AON:
    """Encoder/decoder for the AON notation.

    Example:
        >>> data = [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]
        >>> text = AON.encode(data, "users")
        >>> AON.decode(text) == data
        True
    """

    @staticmethod
    def infer_schemas(
        data: Any, root_name: str, *, order: DiscoveryOrder = "stack"
    ) -> SchemaTable:
        """Infer the schema table for ``data`` without encoding it."""
        return build_schemas(data, root_name, order=order)

    @staticmethod
    def encode(data: Any, root_name: str, *, order: DiscoveryOrder = "stack") -> str:
        """Encode an object or a list of objects to AON.

        Args:
            data: An object or a list of structurally compatible objects.
            root_name: Name of the schema describing the top-level rows.
            order: Schema discovery order, ``"stack"`` (default) or
                ``"breadth"``. Only affects the order of non-root schemas
                in the header.

        Returns:
            The AON document.

        Raises:
            AONInputError: If ``data`` is not an object or a list.
            AONEmptyInputError: If ``data`` is an empty list.
            AONSchemaError: If no root schema could be inferred, e.g. when
                the list holds no objects.
        """
        rows = rows_of(data)
        schemas = build_schemas(data, root_name, order=order)
        return encode_rows(rows, schemas, root_name)

    @staticmethod
    def decode(payload: str, *, unwrap_single: bool = True) -> Any:
        """Decode an AON document.

        Args:
            payload: AON text.
            unwrap_single: Return a bare object, not a one-element list,
                when the document holds a single row.

        Raises:
            AONSchemaError: If the header declares no schemas.
            AONStructureError: If a data row does not match the root schema.
        """
        return decode_document(payload, unwrap_single=unwrap_single)

    @staticmethod
    def hint() -> str:
        """Short description of AON for LLM prompts."""
        return (
            "AON: schemas:{name:(field:type,...)} then data: rows; "
            "values by position, _=null, (..)=object, [a ; b]=list"
        )

    @staticmethod
    def count_tokens(text: str, *, encoding: str | None = DEFAULT_ENCODING) -> int:
        """Count tokens in text using the specified encoding."""
        return count_tokens(text, encoding=encoding)
