import pytest
import regex

from unitext.config import EngineConfig
from unitext.exceptions import EngineErrorCode, InvalidState, PatternError
from unitext.pattern import PatternEngine

CZECH = "žluťoučký kůň"


@pytest.fixture
def engine() -> PatternEngine:
    return PatternEngine(EngineConfig())


def test_split_keeps_delimiter_groups(engine: PatternEngine) -> None:
    assert engine.split("a, b, c", r"(,)\s*") == ["a", ",", "b", ",", "c"]
    assert engine.split("a, b, c", r"(,)\s*", skip_empty=True) == ["a", ",", "b", ",", "c"]
    assert engine.split("a, b, c", r"(,)\s*", limit=2) == ["a", ",", "b, c"]


def test_split_offsets(engine: PatternEngine) -> None:
    assert engine.split("a, b, c", r"(,)\s*", capture_offsets=True) == [
        ("a", 0),
        (",", 1),
        ("b", 3),
        (",", 4),
        ("c", 6),
    ]
    assert engine.split(CZECH, r"([a-z]+)\s*", capture_offsets=True) == [
        ("ž", 0),
        ("lu", 2),
        ("ť", 4),
        ("ou", 6),
        ("č", 8),
        ("k", 10),
        ("ý ", 11),
        ("k", 14),
        ("ůň", 15),
    ]
    assert engine.split(CZECH, r"([a-z]+)\s*", capture_offsets=True, utf8=True) == [
        ("ž", 0),
        ("lu", 1),
        ("ť", 3),
        ("ou", 4),
        ("č", 6),
        ("k", 7),
        ("ý ", 8),
        ("k", 10),
        ("ůň", 11),
    ]


def test_split_unicode_word_class(engine: PatternEngine) -> None:
    assert engine.split(CZECH, r"\w+", utf8=True) == ["", " ", ""]
    assert engine.split(CZECH, r"\w+", skip_empty=True) == [" "]


def test_match(engine: PatternEngine) -> None:
    assert engine.match("hello world!", r"([E-L])+") is None
    assert engine.match("hello world!", r"([e-l])+") == ["hell", "l"]
    assert engine.match("hello world!", r"[e-l]+") == ["hell"]
    assert engine.match(CZECH, r"[e-l]+", capture_offsets=True) == [("l", 2)]
    assert engine.match(CZECH, r"[e-l]+", capture_offsets=True, utf8=True) == [("l", 1)]
    assert engine.match(CZECH, r"\w+", utf8=True) == ["žluťoučký"]


def test_match_unmatched_groups(engine: PatternEngine) -> None:
    assert engine.match("hello world!", r"e(x)*", unmatched_as_null=True) == ["e", None]
    assert engine.match("hello world!", r"e(x)*") == ["e"]
    assert engine.match("hello", r"(h)(x)?(e)") == ["he", "h", "", "e"]
    assert engine.match("hello", r"(h)(x)?(e)", capture_offsets=True) == [
        ("he", 0),
        ("h", 0),
        ("", -1),
        ("e", 1),
    ]


def test_match_start_offset(engine: PatternEngine) -> None:
    assert engine.match("hello world!", r"[e-l]+", offset=2) == ["ll"]
    assert engine.match(CZECH, r"[e-l]+", offset=2) == ["l"]
    assert engine.match(CZECH, r"[e-l]+", offset=2, utf8=True) == ["k"]
    assert engine.match(CZECH, r"[e-l]+", offset=2, capture_offsets=True, utf8=True) == [("k", 7)]
    assert engine.match("hello world!", r"o", offset=-5) == ["o"]
    assert engine.match("hello world!", "", offset=50) is None
    assert engine.match("", "", offset=1) is None
    assert engine.match(CZECH, r"ň", offset=20, utf8=True) is None


def test_character_offset_past_end_is_clamped(engine: PatternEngine) -> None:
    assert engine.match("abc", r"$", offset=10, utf8=True) == [""]
    assert engine.match("abc", r"$", offset=10, capture_offsets=True, utf8=True) == [("", 3)]
    assert engine.match_all("abc", r"\z", offset=10, utf8=True) == [[""]]
    assert engine.match("abc", r"$", offset=10) is None
    assert engine.match_all("abc", r"\z", offset=10) == []


def test_match_all_set_order(engine: PatternEngine) -> None:
    assert engine.match_all("hello world!", r"([E-L])+") == []
    assert engine.match_all("hello world!", r"([e-l])+") == [["hell", "l"], ["l", "l"]]
    assert engine.match_all("hello world!", r"[e-l]+") == [["hell"], ["l"]]
    assert engine.match_all("žluťoučký kůň!", r"([a-z])([a-z]*)", capture_offsets=True) == [
        [("lu", 2), ("l", 2), ("u", 3)],
        [("ou", 6), ("o", 6), ("u", 7)],
        [("k", 10), ("k", 10), ("", 11)],
        [("k", 14), ("k", 14), ("", 15)],
    ]
    assert engine.match_all("žluťoučký kůň!", r"([a-z])([a-z]*)", capture_offsets=True, utf8=True) == [
        [("lu", 1), ("l", 1), ("u", 2)],
        [("ou", 4), ("o", 4), ("u", 5)],
        [("k", 7), ("k", 7), ("", 8)],
        [("k", 10), ("k", 10), ("", 11)],
    ]


def test_match_all_pattern_order(engine: PatternEngine) -> None:
    assert engine.match_all(
        "žluťoučký kůň!", r"([a-z])([a-z]*)", capture_offsets=True, pattern_order=True
    ) == [
        [("lu", 2), ("ou", 6), ("k", 10), ("k", 14)],
        [("l", 2), ("o", 6), ("k", 10), ("k", 14)],
        [("u", 3), ("u", 7), ("", 11), ("", 15)],
    ]
    assert engine.match_all(
        "žluťoučký kůň!", r"([a-z])([a-z]*)", capture_offsets=True, pattern_order=True, utf8=True
    ) == [
        [("lu", 1), ("ou", 4), ("k", 7), ("k", 10)],
        [("l", 1), ("o", 4), ("k", 7), ("k", 10)],
        [("u", 2), ("u", 5), ("", 8), ("", 11)],
    ]
    assert engine.match_all("hello world!", r"[e-l]+", offset=2, pattern_order=True) == [["ll", "l"]]
    assert engine.match_all("hello", r"x(y)", pattern_order=True) == [[], []]


def test_match_all_misc(engine: PatternEngine) -> None:
    assert engine.match_all(CZECH, r"[e-l]+", offset=2) == [["l"], ["k"], ["k"]]
    assert engine.match_all(CZECH, r"[e-l]+", offset=2, utf8=True) == [["k"], ["k"]]
    assert engine.match_all(CZECH, r"\w+", utf8=True) == [["žluťoučký"], ["kůň"]]
    assert engine.match_all("hello world!", r"e(x)*", unmatched_as_null=True) == [["e", None]]
    assert engine.match_all("hello world!", "", offset=50) == []


def test_replace(engine: PatternEngine) -> None:
    assert engine.replace("hello world!", {r"([E-L])+": "#"}) == "hello world!"
    assert engine.replace("hello world!", {r"\w": ""}) == " !"
    assert engine.replace("hello world!", {r"([e-l])+": "#", r"[o-w]": "@"}) == "#@ @@@#d!"
    assert engine.replace(CZECH, {r"\w+": "*"}) == "* *"
    assert engine.replace("aaa", [(r"a", "b")], limit=2) == "bba"
    assert engine.replace("hello", {r"(l+)": r"[\1]"}) == "he[ll]o"


def test_replace_callback(engine: PatternEngine) -> None:
    assert engine.replace_callback("hello world!", r"[e-l]+", lambda groups: "@") == "@o wor@d!"
    assert engine.replace_callback("hello world!", [r"[e-l]+"], lambda groups: "@") == "@o wor@d!"
    assert engine.replace_callback("hello", r"l", lambda groups: None) == "heo"
    assert engine.replace_callback(CZECH, r"\w+", lambda groups: "*", utf8=True) == "* *"


def test_replace_callback_offsets(engine: PatternEngine) -> None:
    def join(groups):
        value, offset = groups[0]
        return f"{value}{offset}"

    assert engine.replace_callback("hello world!", r"[e-l]+", join, capture_offsets=True) == "hell0o worl9d!"
    assert (
        engine.replace_callback("žluťoučký kůň!", r"[e-l]+", join, capture_offsets=True, utf8=True)
        == "žl1uťoučk7ý k10ůň!"
    )


def test_replace_callback_offsets_across_many_matches(engine: PatternEngine) -> None:
    def join(groups):
        value, offset = groups[1]
        return f"{value}{offset}"

    subject = "ťa" * 50
    expected = "".join(f"ťa{2 * index + 1}" for index in range(50))
    assert engine.replace_callback(subject, r"(a)", join, capture_offsets=True, utf8=True) == expected


def test_replace_callback_unmatched_as_null(engine: PatternEngine) -> None:
    seen = []

    def record(groups):
        seen.append(groups)
        return groups[0]

    engine.replace_callback("hello world!", r"e(x)*", record, unmatched_as_null=True)
    assert seen == [["e", None]]


def test_replace_callback_requires_callable(engine: PatternEngine) -> None:
    with pytest.raises(InvalidState, match='Callback "foo" is not callable.'):
        engine.replace_callback("hello", r"l", "foo")


def test_callback_exception_propagates_unchanged(engine: PatternEngine) -> None:
    def explode(groups):
        raise KeyError("in callback")

    with pytest.raises(KeyError, match="in callback"):
        engine.replace_callback("hello", r".+", explode)


def test_callback_engine_failure_is_not_reinterpreted(engine: PatternEngine) -> None:
    def upper(groups):
        try:
            engine.match(b"0123456789\xff", r"\d")
        except PatternError as exc:
            assert exc.code == EngineErrorCode.BAD_UTF8
        return groups[0].upper()

    assert engine.replace_callback("hello", r".+", upper) == "HELLO"

    def nested(groups):
        return engine.match(b"\xff", r"x")

    with pytest.raises(PatternError) as excinfo:
        engine.replace_callback("hello", r".+", nested)
    assert excinfo.value.code == EngineErrorCode.BAD_UTF8


def test_compile_error_carries_engine_message(engine: PatternEngine) -> None:
    with pytest.raises(PatternError) as excinfo:
        engine.match("abc", r"(")
    assert excinfo.value.code is None
    assert str(excinfo.value)


def test_bad_replacement_template(engine: PatternEngine) -> None:
    with pytest.raises(PatternError):
        engine.replace("abc", {r"b": r"\9"})


def test_malformed_subject(engine: PatternEngine) -> None:
    with pytest.raises(PatternError, match="Malformed UTF-8 data") as excinfo:
        engine.match(b"\xc2x\xa0", r"x")
    assert excinfo.value.code == EngineErrorCode.BAD_UTF8


def test_offset_inside_code_point(engine: PatternEngine) -> None:
    with pytest.raises(PatternError) as excinfo:
        engine.match(CZECH, r"l", offset=1)
    assert excinfo.value.code == EngineErrorCode.BAD_UTF8_OFFSET
    assert str(excinfo.value) == "Offset didn't correspond to the begin of a valid UTF-8 code point"


@pytest.mark.parametrize(
    "failure, code",
    [
        (TimeoutError("regex timed out"), EngineErrorCode.BACKTRACK_LIMIT),
        (RecursionError("maximum recursion depth exceeded"), EngineErrorCode.RECURSION_LIMIT),
        (MemoryError(), EngineErrorCode.INTERNAL),
    ],
)
def test_engine_failures_map_to_codes(engine: PatternEngine, failure: Exception, code: EngineErrorCode) -> None:
    def run(*args, timeout=None):
        raise failure

    with pytest.raises(PatternError) as excinfo:
        engine._run(run, "subject")
    assert excinfo.value.code == code


def test_unknown_code_message() -> None:
    assert str(PatternError.from_code(99)) == "Unknown error"
    assert str(PatternError.from_code(EngineErrorCode.JIT_STACKLIMIT)) == "Failed due to limited JIT stack space"


def test_timeout_is_forwarded_to_regex() -> None:
    engine = PatternEngine(EngineConfig(timeout=5.0))
    assert engine.match("hello", r"l+") == ["ll"]


def test_precompiled_patterns_are_accepted(engine: PatternEngine) -> None:
    compiled = regex.compile(r"[e-l]+")
    assert engine.match("hello", compiled) == ["hell"]
    assert engine.compile(compiled) is compiled


def test_flags_are_applied(engine: PatternEngine) -> None:
    assert engine.match("HELLO", r"[e-l]+", flags=regex.IGNORECASE) == ["HELL"]
