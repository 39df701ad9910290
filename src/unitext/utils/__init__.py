"""Utility exports."""
from .arrays import (
    ArrayEntry,
    Found,
    NotAccessible,
    NotFound,
    contains,
    every,
    first,
    is_accessible,
    is_associative,
    is_list,
    key_exists,
    last,
    some,
)
from .callback import invoke_safe, shield, to_string
from .text import byte_offsets, to_text

__all__ = [
    "ArrayEntry",
    "Found",
    "NotAccessible",
    "NotFound",
    "contains",
    "every",
    "first",
    "is_accessible",
    "is_associative",
    "is_list",
    "key_exists",
    "last",
    "some",
    "invoke_safe",
    "shield",
    "to_string",
    "byte_offsets",
    "to_text",
]
