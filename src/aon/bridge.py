"""JSON text in, JSON text out.

Host-facing conversions between JSON text and AON text. Failures are
returned inside the result rather than kept in shared state, so concurrent
callers each see their own error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import orjson
from funlog import log_calls

from aon.core import AON
from aon.errors import AONError, AONInputError


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a conversion: output text, or the error that stopped it."""

    text: str | None = None
    error: AONError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        """The failure message, or None on success."""
        return str(self.error) if self.error is not None else None

    def unwrap(self) -> str:
        """Return the text or raise the stored error."""
        if self.error is not None:
            raise self.error
        return cast("str", self.text)


@log_calls(level="debug", show_timing_only=True)
def json_to_aon(json_text: str | bytes, root_name: str) -> ConversionResult:
    """Convert a JSON document to AON text."""
    try:
        try:
            data = orjson.loads(json_text)
        except orjson.JSONDecodeError as e:
            raise AONInputError(f"Invalid JSON: {e}") from e
        return ConversionResult(text=AON.encode(data, root_name))
    except AONError as e:
        return ConversionResult(error=e)


@log_calls(level="debug", show_timing_only=True)
def aon_to_json(aon_text: str) -> ConversionResult:
    """Convert AON text to compact JSON text."""
    try:
        value = AON.decode(aon_text)
    except AONError as e:
        return ConversionResult(error=e)
    try:
        return ConversionResult(text=orjson.dumps(value).decode())
    except orjson.JSONEncodeError as e:
        return ConversionResult(error=AONInputError(f"Cannot serialize decoded value: {e}"))
