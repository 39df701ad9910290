"""Central exception hierarchy"""
from __future__ import annotations

from enum import IntEnum
from typing import Dict, Optional


class UnitextError(Exception):
    """Base exception for all failures"""


class InvalidCodepoint(UnitextError, ValueError):
    """Raised when a code point lies outside 0x0..0xD7FF or 0xE000..0x10FFFF"""


class InvalidArgument(UnitextError, ValueError):
    """Raised when caller supplied characters, offsets or lengths are unusable"""


class InvalidState(UnitextError, RuntimeError):
    """Raised when an operation is invoked with an unusable collaborator"""


class EngineErrorCode(IntEnum):
    INTERNAL = 1
    BACKTRACK_LIMIT = 2
    RECURSION_LIMIT = 3
    BAD_UTF8 = 4
    BAD_UTF8_OFFSET = 5
    JIT_STACKLIMIT = 6


MESSAGES: Dict[int, str] = {
    EngineErrorCode.INTERNAL: "Internal error",
    EngineErrorCode.BACKTRACK_LIMIT: "Backtrack limit was exhausted",
    EngineErrorCode.RECURSION_LIMIT: "Recursion limit was exhausted",
    EngineErrorCode.BAD_UTF8: "Malformed UTF-8 data",
    EngineErrorCode.BAD_UTF8_OFFSET: "Offset didn't correspond to the begin of a valid UTF-8 code point",
    EngineErrorCode.JIT_STACKLIMIT: "Failed due to limited JIT stack space",
}


class PatternError(UnitextError):
    """Raised when the regular expression engine fails to compile or execute.

    Compile failures carry the engine's own message and no ``code``; runtime
    failures carry an :class:`EngineErrorCode` and its fixed reason.
    """

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code

    @classmethod
    def from_code(cls, code: int) -> "PatternError":
        return cls(MESSAGES.get(code, "Unknown error"), code)


class EntryUnavailable(UnitextError, LookupError):
    """Raised when a nested entry does not exist"""


class EntryNotAccessible(UnitextError, TypeError):
    """Raised when a nested entry cannot be traversed"""


__all__ = [
    "UnitextError",
    "InvalidCodepoint",
    "InvalidArgument",
    "InvalidState",
    "EngineErrorCode",
    "MESSAGES",
    "PatternError",
    "EntryUnavailable",
    "EntryNotAccessible",
]
