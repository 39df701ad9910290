import functools

import pytest
import regex

from unitext.utils.callback import invoke_safe, shield, to_string


class Sample:
    def method(self):
        return "method"

    @classmethod
    def build(cls):
        return cls()

    @staticmethod
    def helper():
        return "helper"

    def __call__(self):
        return "called"


def module_function():
    return "module"


def test_invoke_safe_without_error() -> None:
    errors = []
    assert invoke_safe(str.strip, [" x "], errors.append) == "x"
    assert errors == []


def test_invoke_safe_hands_error_over_and_reraises() -> None:
    errors = []
    with pytest.raises(regex.error):
        invoke_safe(regex.compile, ["("], errors.append)
    assert len(errors) == 1
    assert isinstance(errors[0], regex.error)


def test_invoke_safe_error_sink_may_convert() -> None:
    def convert(exc: Exception) -> None:
        raise ValueError(f"converted: {exc}") from exc

    with pytest.raises(ValueError, match="converted"):
        invoke_safe(regex.compile, ["("], convert)


def test_invoke_safe_nested_callback_exception_bypasses_sink() -> None:
    def sink(exc: Exception) -> None:
        raise AssertionError("sink must not see callback failures")

    def callback(match):
        raise LookupError("in callback")

    with pytest.raises(LookupError, match="in callback"):
        invoke_safe(regex.sub, [".", shield(callback), "x"], sink)


def test_shield_keeps_metadata() -> None:
    guarded = shield(module_function)
    assert guarded.__name__ == "module_function"
    assert guarded() == "module"


def test_to_string() -> None:
    sample = Sample()

    def local():
        return None

    assert to_string(len) == "len"
    assert to_string(module_function) == "module_function"
    assert to_string(lambda: None) == "{lambda}"
    assert to_string(local) == "{closure}"
    assert to_string(sample.method) == "Sample::method"
    assert to_string(Sample.build) == "Sample::build"
    assert to_string(Sample.helper) == "Sample::helper"
    assert to_string(sample) == "Sample::__call__"
    assert to_string((Sample, "magic")) == "Sample::magic"
    assert to_string((sample, "magic")) == "Sample::magic"
    assert to_string(functools.partial(len)) == "{partial len}"
    assert to_string("undefined") == "undefined"
