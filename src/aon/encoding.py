"""Token counting for comparing AON against JSON."""

from __future__ import annotations

import math
from functools import lru_cache

import tiktoken

DEFAULT_ENCODING = "o200k_base"


@lru_cache(maxsize=8)
def _get_encoder(name: str) -> tiktoken.Encoding:
    return tiktoken.get_encoding(name)


def count_tokens(text: str, *, encoding: str | None = DEFAULT_ENCODING) -> int:
    """Count tokens in ``text``.

    Args:
        text: Text to measure.
        encoding: Tiktoken encoding name. ``None`` skips tokenization and
            estimates one token per four UTF-8 bytes.
    """
    if encoding is None:
        return math.ceil(len(text.encode()) / 4)
    return len(_get_encoder(encoding).encode(text, disallowed_special=()))
