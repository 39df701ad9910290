import pytest
from hypothesis import given, strategies as st

from unitext.codec import decode, encode, fix_utf8, from_latin1, is_valid_utf8, to_latin1
from unitext.exceptions import InvalidCodepoint

_scalar_values = st.one_of(st.integers(0, 0xD7FF), st.integers(0xE000, 0x10FFFF))
_invalid_values = st.one_of(
    st.integers(max_value=-1),
    st.integers(0xD800, 0xDFFF),
    st.integers(min_value=0x110000),
)


def _decodes(data: bytes) -> bool:
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


@given(_scalar_values)
def test_decode_inverts_encode(code: int) -> None:
    encoded = encode(code)
    assert encoded == chr(code).encode("utf-8")
    assert decode(encoded) == code


@given(_invalid_values)
def test_encode_rejects_invalid_code_points(code: int) -> None:
    with pytest.raises(InvalidCodepoint):
        encode(code)


@given(st.binary(max_size=64))
def test_fix_utf8_is_idempotent_and_valid(data: bytes) -> None:
    fixed = fix_utf8(data)
    assert fix_utf8(fixed) == fixed
    assert is_valid_utf8(fixed)
    assert is_valid_utf8(data) == (fixed == data)


@given(st.binary(max_size=64))
def test_fix_utf8_agrees_with_strict_decoder(data: bytes) -> None:
    assert is_valid_utf8(data) == _decodes(data)
    assert fix_utf8(data) == data.decode("utf-8", errors="ignore").encode("utf-8")


@given(st.binary(max_size=64))
def test_latin1_round_trip(data: bytes) -> None:
    converted = from_latin1(data)
    assert converted == data.decode("latin-1").encode("utf-8")
    assert to_latin1(converted) == data


@given(st.text(max_size=32))
def test_to_latin1_replaces_wide_characters(text: str) -> None:
    expected = "".join(char if ord(char) < 0x100 else "?" for char in text)
    assert to_latin1(text) == expected.encode("latin-1")
