"""AON error types."""

from __future__ import annotations


class AONError(ValueError):
    """Base error for AON encoding/decoding failures."""


class AONInputError(AONError):
    """Raised when the source document cannot be encoded."""


class AONEmptyInputError(AONInputError):
    """Raised when there are no rows to encode."""


class AONSchemaError(AONError):
    """Raised when the root schema is missing from a schema table."""


class AONStructureError(AONError):
    """Raised when a data row does not match its schema's width."""
