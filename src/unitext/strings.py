"""Functions to check and manipulate Unicode strings.

Every position taken or returned here is a character (code point) offset.
Regular expression helpers report byte offsets unless ``utf8=True``.
"""
from __future__ import annotations

import unicodedata
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

import regex
from bs4 import BeautifulSoup
from bs4.element import CData, NavigableString, Script, Stylesheet, TemplateString

from .codec import chr, fix_utf8, from_latin1, is_valid_utf8, to_latin1
from .codec import length as _codepoint_length
from .config import ELLIPSIS, TRIM_CHARACTERS, get_config
from .exceptions import InvalidArgument, PatternError
from .pattern.engine import PatternLike, get_engine
from .utils.text import to_text

_CLASS_SPECIALS = frozenset("\\]^-[")
_BREAK_CLASS = r"[\s\x00-/:-@\[-`{-~]"
_TEXT_TYPES = (NavigableString, CData, Script, Stylesheet, TemplateString)


def length(text: str | bytes) -> int:
    """Number of code points in ``text``; combining marks count on their own."""
    return _codepoint_length(text)


def index_of(haystack: str | bytes, needle: str | bytes, nth: int = 1) -> Optional[int]:
    """Character position of the ``nth`` occurrence of ``needle``.

    A negative ``nth`` counts occurrences from the end. ``nth == 0`` never
    matches. An empty needle is found at 0, or at the end when searching
    backwards. Occurrences may overlap.
    """

    haystack = to_text(haystack)
    needle = to_text(needle)
    if nth == 0:
        return None
    if nth > 0:
        if needle == "":
            return 0
        pos = -1
        for _ in range(nth):
            pos = haystack.find(needle, pos + 1)
            if pos == -1:
                return None
        return pos

    if needle == "":
        return len(haystack)
    limit = len(haystack) - 1
    pos = -1
    for _ in range(-nth):
        if limit < 0:
            return None
        pos = haystack.rfind(needle, 0, limit + len(needle))
        if pos == -1:
            return None
        limit = pos - 1
    return pos


def compare(left: str | bytes, right: str | bytes, length: Optional[int] = None) -> bool:
    """Compare two strings case-insensitively after canonical decomposition.

    A non-negative ``length`` compares that many leading characters, a negative
    one compares trailing characters, ``None`` compares everything. With
    ``unicode_normalization`` disabled in the configuration NFD is skipped and
    differently composed forms compare unequal.
    """

    left = to_text(left)
    right = to_text(right)
    if get_config().text.unicode_normalization:
        left = unicodedata.normalize("NFD", left)
        right = unicodedata.normalize("NFD", right)

    if length is not None and length < 0:
        left = substring(left, length, -length)
        right = substring(right, length, -length)
    elif length is not None:
        left = substring(left, 0, length)
        right = substring(right, 0, length)

    return lower(left) == lower(right)


def substring(text: str | bytes, offset: int, length: Optional[int] = None) -> str:
    """Part of ``text`` by character ``offset`` and ``length``.

    A negative offset starts that many characters from the end. A negative
    length stops that many characters before the end instead of taking that
    many characters.
    """

    text = to_text(text)
    size = len(text)
    start = max(size + offset, 0) if offset < 0 else min(offset, size)
    if length is None:
        end = size
    elif length < 0:
        end = max(size + length, start)
    else:
        end = min(start + length, size)
    return text[start:end]


def reverse(text: str | bytes) -> str:
    return to_text(text)[::-1]


def trim(text: str | bytes, characters: Optional[str] = None) -> str:
    """Strip leading and trailing runs of ``characters``.

    Raises
    ------
    InvalidArgument
        If the subject or the characters cannot be matched, e.g. on malformed
        UTF-8 input.
    """

    if characters is None:
        characters = get_config().text.trim_characters
    if characters == "":
        return _checked_text(text)
    quoted = "".join("\\" + char if char in _CLASS_SPECIALS else char for char in characters)
    try:
        return replace(text, {f"^[{quoted}]+|[{quoted}]+\\Z": ""})
    except PatternError as exc:
        raise InvalidArgument(f"Invalid trim characters: {exc}") from exc


def truncate(text: str | bytes, max_length: int, append: Optional[str] = None) -> str:
    """Shorten ``text`` to ``max_length`` characters without splitting words.

    ``append`` (an ellipsis by default) is added only when the text was cut
    and counts towards ``max_length``.
    """

    text = to_text(text)
    if append is None:
        append = get_config().text.ellipsis
    if length(text) <= max_length:
        return text
    budget = max_length - length(append)
    if budget < 1:
        return append
    found = match(text, rf"^.{{1,{budget}}}(?={_BREAK_CLASS})", utf8=True, flags=regex.DOTALL)
    if found:
        return found[0] + append
    return substring(text, 0, budget) + append


def split(
    subject: str | bytes,
    pattern: PatternLike,
    *,
    limit: int = -1,
    capture_offsets: bool = False,
    skip_empty: bool = False,
    utf8: bool = False,
    flags: int = 0,
) -> List[Any]:
    return get_engine().split(
        subject,
        pattern,
        limit=limit,
        capture_offsets=capture_offsets,
        skip_empty=skip_empty,
        utf8=utf8,
        flags=flags,
    )


def match(
    subject: str | bytes,
    pattern: PatternLike,
    *,
    offset: int = 0,
    capture_offsets: bool = False,
    unmatched_as_null: bool = False,
    utf8: bool = False,
    flags: int = 0,
) -> Optional[List[Any]]:
    return get_engine().match(
        subject,
        pattern,
        offset=offset,
        capture_offsets=capture_offsets,
        unmatched_as_null=unmatched_as_null,
        utf8=utf8,
        flags=flags,
    )


def match_all(
    subject: str | bytes,
    pattern: PatternLike,
    *,
    offset: int = 0,
    capture_offsets: bool = False,
    unmatched_as_null: bool = False,
    pattern_order: bool = False,
    utf8: bool = False,
    flags: int = 0,
) -> List[List[Any]]:
    return get_engine().match_all(
        subject,
        pattern,
        offset=offset,
        capture_offsets=capture_offsets,
        unmatched_as_null=unmatched_as_null,
        pattern_order=pattern_order,
        utf8=utf8,
        flags=flags,
    )


def replace(
    subject: str | bytes,
    mapping: Mapping[PatternLike, str] | Iterable[Tuple[PatternLike, str]],
    *,
    limit: int = -1,
    flags: int = 0,
) -> str:
    return get_engine().replace(subject, mapping, limit=limit, flags=flags)


def replace_callback(
    subject: str | bytes,
    pattern: PatternLike | Sequence[PatternLike],
    callback: Callable[[List[Any]], Any],
    *,
    limit: int = -1,
    capture_offsets: bool = False,
    unmatched_as_null: bool = False,
    utf8: bool = False,
    flags: int = 0,
) -> str:
    return get_engine().replace_callback(
        subject,
        pattern,
        callback,
        limit=limit,
        capture_offsets=capture_offsets,
        unmatched_as_null=unmatched_as_null,
        utf8=utf8,
        flags=flags,
    )


def lower(text: str | bytes) -> str:
    return to_text(text).lower()


def lower_first(text: str | bytes) -> str:
    return lower(substring(text, 0, 1)) + substring(text, 1)


def upper(text: str | bytes) -> str:
    return to_text(text).upper()


def upper_first(text: str | bytes) -> str:
    return upper(substring(text, 0, 1)) + substring(text, 1)


def capitalize(text: str | bytes) -> str:
    """Upper-case the first letter of every word and lower-case the rest."""
    return replace_callback(text, r"\w[\w'’]*", _title_word)


def _title_word(groups: List[str]) -> str:
    word = groups[0]
    return word[:1].title() + word[1:].lower()


def strip_html(text: str | bytes) -> str:
    """Convert HTML into plain text: drop the markup, decode the entities."""
    text = to_text(text)
    if not text:
        return ""
    return BeautifulSoup(text, "html.parser").get_text(types=_TEXT_TYPES)


def normalize(text: str | bytes) -> str:
    """Canonical cleanup of user supplied text.

    NFC composition (when enabled), ``\\n`` line endings, control characters
    except tab and newline removed, tabs and spaces trimmed before each line
    end, leading and trailing blank lines removed. Other trailing whitespace
    such as U+00A0 is kept.
    """

    text = to_text(text)
    if get_config().text.unicode_normalization:
        text = unicodedata.normalize("NFC", text)
    text = normalize_newlines(text)
    text = replace(text, {r"[\x00-\x08\x0B-\x1F\x7F-\x9F]+": ""})
    text = replace(text, {r"(?m)[\t ]+$": ""})
    return text.strip("\n")


def normalize_newlines(text: str | bytes) -> str:
    return to_text(text).replace("\r\n", "\n").replace("\r", "\n")


def _checked_text(text: str | bytes) -> str:
    try:
        return to_text(text, strict=True)
    except UnicodeError:
        raise InvalidArgument("Invalid trim characters: Malformed UTF-8 data") from None


__all__ = [
    "TRIM_CHARACTERS",
    "ELLIPSIS",
    "length",
    "index_of",
    "compare",
    "chr",
    "substring",
    "reverse",
    "trim",
    "truncate",
    "split",
    "match",
    "match_all",
    "replace",
    "replace_callback",
    "lower",
    "lower_first",
    "upper",
    "upper_first",
    "capitalize",
    "strip_html",
    "normalize",
    "normalize_newlines",
    "is_valid_utf8",
    "fix_utf8",
    "from_latin1",
    "to_latin1",
]
