"""AON - compact, schema-deduplicated object notation.

Encodes lists of JSON objects as a header of named schemas followed by
positional data rows.
"""

from aon.bridge import ConversionResult, aon_to_json, json_to_aon
from aon.core import AON
from aon.errors import (
    AONEmptyInputError,
    AONError,
    AONInputError,
    AONSchemaError,
    AONStructureError,
)
from aon.types import Schema, SchemaField, SchemaTable, kind_of

__all__ = [
    "AON",
    "AONEmptyInputError",
    "AONError",
    "AONInputError",
    "AONSchemaError",
    "AONStructureError",
    "ConversionResult",
    "Schema",
    "SchemaField",
    "SchemaTable",
    "aon_to_json",
    "json_to_aon",
    "kind_of",
]
__version__ = "0.1.0"
