"""Helpers for invoking and describing callables."""
from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, NoReturn, Sequence, TypeVar

R = TypeVar("R")


class _CallbackFailure(Exception):
    """Carries an exception raised by a shielded user callback."""

    def __init__(self, original: Exception) -> None:
        super().__init__(original)
        self.original = original


def shield(callback: Callable[..., R]) -> Callable[..., R]:
    """Mark failures of ``callback`` as belonging to the caller.

    :func:`invoke_safe` re-raises such failures unchanged instead of handing
    them to its error sink.
    """

    @functools.wraps(callback)
    def guarded(*args: Any, **kwargs: Any) -> R:
        try:
            return callback(*args, **kwargs)
        except Exception as exc:
            raise _CallbackFailure(exc) from exc

    return guarded


def invoke_safe(
    function: Callable[..., R],
    arguments: Sequence[Any],
    on_error: Callable[[Exception], NoReturn | None],
) -> R:
    """Call ``function(*arguments)`` and route its own failures to ``on_error``.

    ``on_error`` is scoped to this single call. It usually raises a domain
    error; if it returns, the original exception propagates. Failures of
    callbacks wrapped with :func:`shield` bypass ``on_error``.
    """

    try:
        return function(*arguments)
    except _CallbackFailure as failure:
        raise failure.original from None
    except Exception as exc:
        on_error(exc)
        raise


def to_string(callback: Any) -> str:
    """Return a textual form of ``callback``; the target need not be callable."""

    if isinstance(callback, functools.partial):
        return f"{{partial {to_string(callback.func)}}}"
    if inspect.ismethod(callback):
        owner = callback.__self__
        owner_name = owner.__qualname__ if inspect.isclass(owner) else type(owner).__qualname__
        return f"{owner_name}::{callback.__func__.__name__}"
    if inspect.isfunction(callback):
        if callback.__name__ == "<lambda>":
            return "{lambda}"
        if "<locals>" in callback.__qualname__:
            return "{closure}"
        qualname = callback.__qualname__
        if "." in qualname:
            owner_name, _, name = qualname.rpartition(".")
            return f"{owner_name}::{name}"
        return qualname
    if inspect.isbuiltin(callback):
        return callback.__qualname__
    if callable(callback) and not inspect.isclass(callback):
        return f"{type(callback).__qualname__}::__call__"
    if isinstance(callback, (list, tuple)) and len(callback) == 2:
        owner, name = callback
        owner_name = owner.__qualname__ if inspect.isclass(owner) else type(owner).__qualname__
        return f"{owner_name}::{name}"
    if inspect.isclass(callback):
        return callback.__qualname__
    return str(callback)


__all__ = ["invoke_safe", "shield", "to_string"]
