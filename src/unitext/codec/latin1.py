"""Manual ISO-8859-1 <-> UTF-8 transcoding."""
from __future__ import annotations

REPLACEMENT = 0x3F  # "?"


def from_latin1(data: bytes) -> bytes:
    """Convert ISO-8859-1 bytes into UTF-8 bytes.

    Bytes below 0x80 are copied; 0x80..0xBF become ``C2 b``; 0xC0..0xFF become
    ``C3 b-0x40``.
    """

    out = bytearray()
    for byte in data:
        if byte < 0x80:
            out.append(byte)
        elif byte < 0xC0:
            out += bytes((0xC2, byte))
        else:
            out += bytes((0xC3, byte - 0x40))
    return bytes(out)


def to_latin1(data: str | bytes) -> bytes:
    """Convert UTF-8 into ISO-8859-1, mapping anything above 0xFF to ``?``.

    Three and four byte sequences always become ``?`` but still consume their
    full width so the scan stays aligned. Stray continuation bytes are copied.
    """

    if isinstance(data, str):
        data = data.encode("utf-8", errors="surrogatepass")
    size = len(data)
    out = bytearray()
    index = 0
    while index < size:
        byte = data[index]
        high = byte & 0xF0
        if high in (0xC0, 0xD0):
            trail = data[index + 1] if index + 1 < size else 0
            code = ((byte & 0x1F) << 6) | (trail & 0x3F)
            out.append(code if code < 0x100 else REPLACEMENT)
            index += 2
        elif high == 0xE0:
            out.append(REPLACEMENT)
            index += 3
        elif high == 0xF0:
            out.append(REPLACEMENT)
            index += 4
        else:
            out.append(byte)
            index += 1
    return bytes(out)


__all__ = ["from_latin1", "to_latin1"]
