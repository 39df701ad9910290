"""Fail-fast adapter over the ``regex`` engine with byte and character offsets."""
from __future__ import annotations

import threading
from bisect import bisect_left
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

import regex
import structlog

from ..config import EngineConfig, get_config
from ..exceptions import EngineErrorCode, InvalidState, PatternError
from ..utils.callback import invoke_safe, shield, to_string
from ..utils.text import byte_offsets
from .offsets import OffsetTranslator

logger = structlog.get_logger(__name__)

PatternLike = str | regex.Pattern
Group = Any
MatchGroups = List[Group]


@dataclass(slots=True)
class Subject:
    """A decoded subject with lazily computed byte offsets.

    The engine runs on ``text`` but reports every position in UTF-8 bytes of
    ``encoded``, its native unit.
    """

    text: str
    encoded: bytes
    _offsets: Optional[List[int]] = field(default=None, repr=False)

    @classmethod
    def prepare(cls, data: str | bytes) -> "Subject":
        try:
            if isinstance(data, bytes):
                return cls(text=data.decode("utf-8"), encoded=data)
            return cls(text=data, encoded=data.encode("utf-8"))
        except UnicodeError:
            raise PatternError.from_code(EngineErrorCode.BAD_UTF8) from None

    @property
    def offsets(self) -> List[int]:
        if self._offsets is None:
            self._offsets = byte_offsets(self.text)
        return self._offsets

    def to_bytes(self, char_index: int) -> int:
        if char_index < 0:
            return -1
        return self.offsets[char_index]

    def to_char(self, byte_offset: int) -> int:
        index = bisect_left(self.offsets, byte_offset)
        if index >= len(self.offsets) or self.offsets[index] != byte_offset:
            raise PatternError.from_code(EngineErrorCode.BAD_UTF8_OFFSET)
        return index


class PatternEngine:
    """Run split, match, match-all and replace operations on UTF-8 subjects.

    Every result position is a byte offset unless ``utf8=True`` is passed, in
    which case start offsets are read and reported as character offsets.
    Engine failures surface as :class:`PatternError`; failures of user
    callbacks propagate unchanged.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self._compiled = lru_cache(maxsize=self.config.cache_size)(self._compile_pattern)

    # -- public operations -------------------------------------------------

    def split(
        self,
        subject: str | bytes,
        pattern: PatternLike,
        *,
        limit: int = -1,
        capture_offsets: bool = False,
        skip_empty: bool = False,
        utf8: bool = False,
        flags: int = 0,
    ) -> List[Group]:
        """Split ``subject`` by ``pattern``; captured groups are kept as pieces.

        ``limit`` caps the number of pieces (delimiters excluded); ``-1`` or
        ``0`` means no limit.
        """
        source = Subject.prepare(subject)
        compiled = self.compile(pattern, flags)
        matches = self._run(_find_all(compiled), source.text)
        pieces: List[Group] = []
        remaining = limit if limit > 0 else -1
        last = 0

        def add(value: str, char_index: int) -> None:
            if capture_offsets:
                pieces.append((value, source.to_bytes(char_index)))
            else:
                pieces.append(value)

        if remaining != 1:
            for match in matches:
                if remaining != -1 and remaining <= 1:
                    break
                start, end = match.span()
                if not skip_empty or start != last:
                    add(source.text[last:start], last)
                    if remaining != -1:
                        remaining -= 1
                for index in range(1, _matched_count(match)):
                    value = match.group(index) or ""
                    if not skip_empty or value:
                        add(value, match.start(index))
                last = end
        if not skip_empty or last < len(source.text):
            add(source.text[last:], last)

        if utf8 and capture_offsets:
            return OffsetTranslator(source.encoded).translate(pieces)
        return pieces

    def match(
        self,
        subject: str | bytes,
        pattern: PatternLike,
        *,
        offset: int = 0,
        capture_offsets: bool = False,
        unmatched_as_null: bool = False,
        utf8: bool = False,
        flags: int = 0,
    ) -> Optional[MatchGroups]:
        """Return the first match at or after ``offset``, or ``None``."""
        source = Subject.prepare(subject)
        start = self._start_position(source, offset, utf8)
        if start is None:
            return None
        compiled = self.compile(pattern, flags)
        found = self._run(compiled.search, source.text, start)
        if found is None:
            return None
        groups = _groups(found, source, capture_offsets, unmatched_as_null, trim=not unmatched_as_null)
        if utf8 and capture_offsets:
            return OffsetTranslator(source.encoded).translate([groups])[0]
        return groups

    def match_all(
        self,
        subject: str | bytes,
        pattern: PatternLike,
        *,
        offset: int = 0,
        capture_offsets: bool = False,
        unmatched_as_null: bool = False,
        pattern_order: bool = False,
        utf8: bool = False,
        flags: int = 0,
    ) -> List[MatchGroups]:
        """Return every match.

        By default each element holds one match's groups. With
        ``pattern_order`` each element holds one group across all matches,
        group 0 first.
        """
        source = Subject.prepare(subject)
        start = self._start_position(source, offset, utf8)
        if start is None:
            return []
        compiled = self.compile(pattern, flags)
        found = self._run(_find_all(compiled), source.text, start)
        if pattern_order:
            table: List[MatchGroups] = [[] for _ in range(compiled.groups + 1)]
            for match in found:
                groups = _groups(match, source, capture_offsets, unmatched_as_null, trim=False)
                for index, group in enumerate(groups):
                    table[index].append(group)
        else:
            table = [_groups(match, source, capture_offsets, unmatched_as_null, trim=not unmatched_as_null) for match in found]
        if utf8 and capture_offsets:
            return OffsetTranslator(source.encoded).translate(table)
        return table

    def replace(
        self,
        subject: str | bytes,
        mapping: Mapping[PatternLike, str] | Iterable[Tuple[PatternLike, str]],
        *,
        limit: int = -1,
        flags: int = 0,
    ) -> str:
        """Apply each ``pattern -> replacement`` pair in order.

        Replacements use the engine's template syntax (``\\1``, ``\\g<name>``).
        ``limit`` applies to every pattern separately; ``-1`` means no limit.
        """
        text = Subject.prepare(subject).text
        pairs = mapping.items() if isinstance(mapping, Mapping) else mapping
        count = limit if limit > 0 else 0
        for pattern, replacement in pairs:
            compiled = self.compile(pattern, flags)
            text = self._run(compiled.sub, replacement, text, count)
        return text

    def replace_callback(
        self,
        subject: str | bytes,
        pattern: PatternLike | Sequence[PatternLike],
        callback: Callable[[MatchGroups], Any],
        *,
        limit: int = -1,
        capture_offsets: bool = False,
        unmatched_as_null: bool = False,
        utf8: bool = False,
        flags: int = 0,
    ) -> str:
        """Replace matches with the text returned by ``callback``.

        The callback receives the same group list :meth:`match` would return
        for that match, with character offsets when ``utf8`` and
        ``capture_offsets`` are both set. Exceptions raised by the callback
        reach the caller untouched.
        """
        if not callable(callback):
            raise InvalidState(f'Callback "{to_string(callback)}" is not callable.')
        patterns = [pattern] if isinstance(pattern, (str, regex.Pattern)) else list(pattern)
        text = Subject.prepare(subject).text
        count = limit if limit > 0 else 0
        for item in patterns:
            compiled = self.compile(item, flags)
            source = Subject.prepare(text)
            translator = OffsetTranslator(source.encoded)

            def replacement(
                match: regex.Match, source: Subject = source, translator: OffsetTranslator = translator
            ) -> str:
                groups = _groups(match, source, capture_offsets, unmatched_as_null, trim=not unmatched_as_null)
                if utf8 and capture_offsets:
                    groups = translator.translate(groups)
                result = callback(groups)
                return "" if result is None else str(result)

            text = self._run(compiled.sub, shield(replacement), text, count)
        return text

    # -- engine plumbing ----------------------------------------------------

    def compile(self, pattern: PatternLike, flags: int = 0) -> regex.Pattern:
        if isinstance(pattern, regex.Pattern):
            return pattern
        return self._compiled(pattern, flags)

    def _compile_pattern(self, pattern: str, flags: int) -> regex.Pattern:
        def on_error(exc: Exception) -> None:
            if isinstance(exc, regex.error):
                logger.debug("pattern.compile_failed", pattern=pattern, error=str(exc))
                raise PatternError(str(exc)) from exc

        return invoke_safe(regex.compile, (pattern, flags), on_error)

    def _run(self, function: Callable[..., Any], *arguments: Any) -> Any:
        def on_error(exc: Exception) -> None:
            if isinstance(exc, regex.error):
                logger.debug("pattern.template_failed", error=str(exc))
                raise PatternError(str(exc)) from exc
            code = _error_code(exc)
            if code is not None:
                logger.debug("pattern.engine_failed", code=int(code), error=str(exc))
                raise PatternError.from_code(code) from exc

        return invoke_safe(lambda *args: function(*args, timeout=self.config.timeout), arguments, on_error)

    def _start_position(self, source: Subject, offset: int, utf8: bool) -> Optional[int]:
        """Resolve ``offset`` into a character index.

        Character offsets are clamped to the text; a byte offset past the end
        yields ``None``.
        """
        if utf8:
            size = len(source.text)
            return max(size + offset, 0) if offset < 0 else min(offset, size)
        size = len(source.encoded)
        if offset < 0:
            offset = max(size + offset, 0)
        if offset > size:
            return None
        return source.to_char(offset)


def _error_code(exc: Exception) -> Optional[EngineErrorCode]:
    if isinstance(exc, TimeoutError):
        return EngineErrorCode.BACKTRACK_LIMIT
    if isinstance(exc, RecursionError):
        return EngineErrorCode.RECURSION_LIMIT
    if isinstance(exc, MemoryError):
        return EngineErrorCode.INTERNAL
    if isinstance(exc, UnicodeError):
        return EngineErrorCode.BAD_UTF8
    return None


def _find_all(compiled: regex.Pattern) -> Callable[..., List[regex.Match]]:
    def find_all(*args: Any, **kwargs: Any) -> List[regex.Match]:
        return list(compiled.finditer(*args, **kwargs))

    return find_all


def _matched_count(match: regex.Match) -> int:
    """Index of the highest participating group plus one."""
    count = 1
    for index in range(1, match.re.groups + 1):
        if match.start(index) != -1:
            count = index + 1
    return count


def _groups(
    match: regex.Match,
    source: Subject,
    capture_offsets: bool,
    unmatched_as_null: bool,
    *,
    trim: bool,
) -> MatchGroups:
    total = _matched_count(match) if trim else match.re.groups + 1
    groups: MatchGroups = []
    for index in range(total):
        start = match.start(index)
        value = match.group(index)
        if value is None and not unmatched_as_null:
            value = ""
        if capture_offsets:
            groups.append((value, source.to_bytes(start)))
        else:
            groups.append(value)
    return groups


_default_engine: Optional[Tuple[EngineConfig, PatternEngine]] = None
_engine_lock = threading.Lock()


def get_engine() -> PatternEngine:
    """Return the engine built from the active configuration."""
    global _default_engine
    config = get_config().engine
    with _engine_lock:
        if _default_engine is None or _default_engine[0] != config:
            _default_engine = (config, PatternEngine(config))
        return _default_engine[1]


__all__ = ["PatternEngine", "Subject", "get_engine"]
