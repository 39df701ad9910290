"""Byte offset to character offset translation for match results."""
from __future__ import annotations

from typing import Any, List

from ..codec.codepoint import length


class OffsetTranslator:
    """Convert byte offsets of one subject into character offsets.

    The translator remembers the last ``(bytes, chars)`` pair it produced and
    only measures the slice between that pair and the next requested offset,
    walking backwards when offsets decrease. Visiting the offsets of a whole
    match table therefore costs the bytes traversed, not matches times length.
    """

    __slots__ = ("_subject", "_last_bytes", "_last_chars")

    def __init__(self, subject: bytes) -> None:
        self._subject = subject
        self._last_bytes = 0
        self._last_chars = 0

    def to_chars(self, byte_offset: int) -> int:
        if byte_offset > self._last_bytes:
            self._last_chars += length(self._subject[self._last_bytes : byte_offset])
        elif byte_offset < self._last_bytes:
            self._last_chars -= length(self._subject[byte_offset : self._last_bytes])
        self._last_bytes = byte_offset
        return self._last_chars

    def translate(self, groups: List[Any]) -> List[Any]:
        """Return ``groups`` with every ``(value, offset)`` pair translated.

        Pairs may sit at any depth of nested lists; they are visited in list
        order. Offsets of unmatched groups (``-1``) are left as they are.
        """
        return [self._translate_item(item) for item in groups]

    def _translate_item(self, item: Any) -> Any:
        if isinstance(item, tuple):
            value, offset = item
            if offset < 0:
                return item
            return (value, self.to_chars(offset))
        if isinstance(item, list):
            return [self._translate_item(child) for child in item]
        return item


def bytes_to_chars(subject: bytes, groups: List[Any]) -> List[Any]:
    return OffsetTranslator(subject).translate(groups)


__all__ = ["OffsetTranslator", "bytes_to_chars"]
