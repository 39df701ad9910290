"""Codec package exports."""
from .codepoint import chr, decode, encode, encoded_width, length
from .latin1 import from_latin1, to_latin1
from .utf8 import fix_utf8, is_valid_utf8

__all__ = [
    "chr",
    "decode",
    "encode",
    "encoded_width",
    "length",
    "from_latin1",
    "to_latin1",
    "fix_utf8",
    "is_valid_utf8",
]
