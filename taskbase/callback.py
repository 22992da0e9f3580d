"""Callbacks that run once or any number of times."""

from __future__ import annotations

import threading
from typing import Any, Callable


class CallbackError(RuntimeError):
    """Raised when a callback cannot be run."""


class OnceCallback:
    """A callable that may be run at most once; running it empties it."""

    __slots__ = ("_func", "_lock")

    def __init__(self, func: Any = None) -> None:
        self._lock = threading.Lock()
        if func is None:
            self._func = None
        elif isinstance(func, OnceCallback):
            self._func = func._take()
        elif isinstance(func, RepeatingCallback):
            self._func = func._func
        elif callable(func):
            self._func = func
        else:
            raise TypeError(f"{func!r} is not callable")

    def _take(self) -> Callable | None:
        with self._lock:
            func, self._func = self._func, None
        return func

    def __bool__(self) -> bool:
        return self._func is not None

    def run(self, *args: Any) -> Any:
        """Run the callback, leaving it empty."""
        func = self._take()
        if func is None:
            raise CallbackError("cannot run an empty or already used callback")
        return func(*args)

    __call__ = run

    def then(self, then: Any) -> "OnceCallback":
        """Chain ``then`` after this callback, consuming this one.

        The result of this callback is passed to ``then``; a result of None
        means ``then`` is run with no arguments.
        """
        second = then if isinstance(then, OnceCallback) else OnceCallback(then)
        first = OnceCallback(self)

        def chained(*args: Any) -> Any:
            return _run_chain(first, second, args)

        return OnceCallback(chained)


class RepeatingCallback:
    """A callable that may be run any number of times."""

    __slots__ = ("_func",)

    def __init__(self, func: Any = None) -> None:
        if func is None:
            self._func = None
        elif isinstance(func, RepeatingCallback):
            self._func = func._func
        elif isinstance(func, OnceCallback):
            raise TypeError("a OnceCallback cannot become a RepeatingCallback")
        elif callable(func):
            self._func = func
        else:
            raise TypeError(f"{func!r} is not callable")

    def __bool__(self) -> bool:
        return self._func is not None

    def run(self, *args: Any) -> Any:
        if self._func is None:
            raise CallbackError("cannot run an empty callback")
        return self._func(*args)

    __call__ = run

    def then(self, then: Any) -> "RepeatingCallback":
        """Return a callback running this one and then ``then`` with its result.

        A result of None means ``then`` is run with no arguments.
        """
        if isinstance(then, OnceCallback):
            raise TypeError("a RepeatingCallback can only be chained with a RepeatingCallback")
        second = then if isinstance(then, RepeatingCallback) else RepeatingCallback(then)
        first = RepeatingCallback(self)

        def chained(*args: Any) -> Any:
            return _run_chain(first, second, args)

        return RepeatingCallback(chained)


def _run_chain(first, second, args: tuple) -> Any:
    result = first.run(*args)
    if result is None:
        return second.run()
    return second.run(result)


def is_once_callback(obj: Any) -> bool:
    return isinstance(obj, OnceCallback)


def is_repeating_callback(obj: Any) -> bool:
    return isinstance(obj, RepeatingCallback)


def is_callback(obj: Any) -> bool:
    return is_once_callback(obj) or is_repeating_callback(obj)