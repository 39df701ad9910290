"""Single code point arithmetic over UTF-8 bytes."""
from __future__ import annotations

from ..exceptions import InvalidCodepoint

MAX_CODEPOINT = 0x10FFFF
SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF

_RANGE_MESSAGE = "Code point must be in range 0x0 to 0xD7FF or 0xE000 to 0x10FFFF."


def is_continuation(byte: int) -> bool:
    return 0x80 <= byte <= 0xBF


def is_valid_codepoint(code: int) -> bool:
    return 0 <= code <= MAX_CODEPOINT and not SURROGATE_MIN <= code <= SURROGATE_MAX


def encoded_width(code: int) -> int:
    """Return the number of UTF-8 bytes needed for ``code``."""
    if code < 0x80:
        return 1
    if code < 0x800:
        return 2
    if code < 0x10000:
        return 3
    return 4


def length(data: str | bytes) -> int:
    """Count code points, not bytes and not graphemes.

    Combining marks are separate code points, so ``"man\\u0303ana"`` has 7.
    For ``bytes`` each well-formed sequence counts once and each byte of a
    malformed sequence counts as one unit.
    """
    if isinstance(data, str):
        return len(data)
    from .utf8 import iter_sequences

    return sum(1 if valid else end - start for start, end, valid in iter_sequences(data))


def encode(code: int) -> bytes:
    """Encode one code point into its 1 to 4 byte UTF-8 form.

    Raises
    ------
    InvalidCodepoint
        If ``code`` is negative, a surrogate or above 0x10FFFF.
    """

    if not is_valid_codepoint(code):
        raise InvalidCodepoint(_RANGE_MESSAGE)
    if code < 0x80:
        return bytes((code,))
    if code < 0x800:
        return bytes((0xC0 | (code >> 6), 0x80 | (code & 0x3F)))
    if code < 0x10000:
        return bytes((0xE0 | (code >> 12), 0x80 | ((code >> 6) & 0x3F), 0x80 | (code & 0x3F)))
    return bytes(
        (
            0xF0 | (code >> 18),
            0x80 | ((code >> 12) & 0x3F),
            0x80 | ((code >> 6) & 0x3F),
            0x80 | (code & 0x3F),
        )
    )


def decode(data: bytes) -> int:
    """Decode exactly one well-formed UTF-8 sequence into its code point."""

    if not data:
        raise InvalidCodepoint("Cannot decode an empty byte sequence.")
    lead = data[0]
    if lead < 0x80:
        width, code, minimum = 1, lead, 0
    elif 0xC2 <= lead <= 0xDF:
        width, code, minimum = 2, lead & 0x1F, 0x80
    elif 0xE0 <= lead <= 0xEF:
        width, code, minimum = 3, lead & 0x0F, 0x800
    elif 0xF0 <= lead <= 0xF4:
        width, code, minimum = 4, lead & 0x07, 0x10000
    else:
        raise InvalidCodepoint(f"Invalid UTF-8 lead byte 0x{lead:02X}.")
    if len(data) != width:
        raise InvalidCodepoint(f"Expected {width} byte(s) for one code point, got {len(data)}.")
    for byte in data[1:]:
        if not is_continuation(byte):
            raise InvalidCodepoint(f"Invalid UTF-8 continuation byte 0x{byte:02X}.")
        code = (code << 6) | (byte & 0x3F)
    if code < minimum:
        raise InvalidCodepoint("Overlong UTF-8 sequence.")
    if not is_valid_codepoint(code):
        raise InvalidCodepoint(_RANGE_MESSAGE)
    return code


def chr(code: int) -> str:  # noqa: A001
    """Return the character for ``code``; see :func:`encode` for the valid range."""
    return encode(code).decode("utf-8")


__all__ = [
    "MAX_CODEPOINT",
    "chr",
    "decode",
    "encode",
    "encoded_width",
    "is_continuation",
    "is_valid_codepoint",
    "length",
]
