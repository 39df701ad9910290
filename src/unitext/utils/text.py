"""Text coercion helpers shared across modules."""
from __future__ import annotations

from typing import List

from ..codec.codepoint import encoded_width


def to_text(data: str | bytes, *, strict: bool = False) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="strict" if strict else "surrogatepass")
    return data


def byte_offsets(text: str) -> List[int]:
    """Map every character index of ``text`` (plus the end) to its byte offset."""
    offsets: List[int] = [0]
    byte_index = 0
    for char in text:
        byte_index += encoded_width(ord(char))
        offsets.append(byte_index)
    return offsets


__all__ = ["to_text", "byte_offsets"]
