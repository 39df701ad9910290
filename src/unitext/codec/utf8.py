"""UTF-8 well-formedness check and repair.

A sequence is kept when it decodes to a scalar value in shortest form: no
surrogates, nothing above 0x10FFFF, no overlong encodings, no stray or missing
continuation bytes. Noncharacters such as U+FFFE are valid.
"""
from __future__ import annotations

from typing import Iterator, Tuple, TypeVar

from .codepoint import MAX_CODEPOINT, SURROGATE_MAX, SURROGATE_MIN, is_continuation

T = TypeVar("T", str, bytes)


def _is_lead(byte: int) -> bool:
    return byte < 0x80 or 0xC2 <= byte <= 0xF4


def _invalid_width(data: bytes, pos: int, width: int) -> int:
    """Number of bytes to drop for a broken ``width`` byte sequence at ``pos``.

    Scanning stops at the first byte that could start a new sequence so a
    following valid character is never swallowed.
    """
    for step in range(1, width):
        if pos + step >= len(data) or _is_lead(data[pos + step]):
            return step
    return width


def iter_sequences(data: bytes) -> Iterator[Tuple[int, int, bool]]:
    """Yield ``(start, end, valid)`` for each sequence found in ``data``."""

    size = len(data)
    pos = 0
    while pos < size:
        lead = data[pos]
        if lead < 0x80:
            yield pos, pos + 1, True
            pos += 1
            continue
        if lead < 0xC2 or lead > 0xF4:
            yield pos, pos + 1, False
            pos += 1
            continue
        width = 2 if lead < 0xE0 else 3 if lead < 0xF0 else 4
        trails = data[pos + 1 : pos + width]
        if len(trails) < width - 1 or not all(is_continuation(byte) for byte in trails):
            skip = _invalid_width(data, pos, width)
            yield pos, pos + skip, False
            pos += skip
            continue
        code = lead & (0x1F if width == 2 else 0x0F if width == 3 else 0x07)
        for byte in trails:
            code = (code << 6) | (byte & 0x3F)
        valid = True
        if width == 3 and (code < 0x800 or SURROGATE_MIN <= code <= SURROGATE_MAX):
            valid = False
        elif width == 4 and (code < 0x10000 or code > MAX_CODEPOINT):
            valid = False
        yield pos, pos + width, valid
        pos += width


def _fix_bytes(data: bytes) -> bytes:
    return b"".join(data[start:end] for start, end, valid in iter_sequences(data) if valid)


def fix_utf8(data: T) -> T:
    """Remove every invalid UTF-8 sequence and keep the rest byte for byte.

    ``str`` input is processed through its ``surrogatepass`` encoding, so lone
    surrogates are dropped as well.
    """

    if isinstance(data, str):
        raw = data.encode("utf-8", errors="surrogatepass")
        return _fix_bytes(raw).decode("utf-8")
    return _fix_bytes(bytes(data))


def is_valid_utf8(data: str | bytes) -> bool:
    return fix_utf8(data) == data


__all__ = ["fix_utf8", "is_valid_utf8", "iter_sequences"]
