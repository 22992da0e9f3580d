"""Helpers for running, splitting and ignoring callbacks."""

from __future__ import annotations

import threading
from typing import Any

from taskbase.callback import CallbackError, OnceCallback, RepeatingCallback


def _as_once(closure: Any) -> OnceCallback:
    return closure if isinstance(closure, OnceCallback) else OnceCallback(closure)


class ScopedClosureRunner:
    """Runs a closure when the ``with`` block exits or when asked to."""

    def __init__(self, closure: Any = None) -> None:
        self._closure = _as_once(closure)

    def __enter__(self) -> "ScopedClosureRunner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.run_and_reset()

    def __bool__(self) -> bool:
        return bool(self._closure)

    def run_and_reset(self) -> None:
        """Run the held closure, if any, and hold nothing afterwards."""
        closure, self._closure = self._closure, OnceCallback()
        if closure:
            closure.run()

    def replace_closure(self, new_closure: Any) -> None:
        """Hold ``new_closure`` instead, dropping the old one without running it."""
        self._closure = _as_once(new_closure)

    def release(self) -> OnceCallback:
        """Give up the held closure without running it."""
        closure, self._closure = self._closure, OnceCallback()
        return closure


def _ignore(*args: Any) -> None:
    return None


def do_nothing_once() -> OnceCallback:
    """Return a once-callback that accepts any arguments and does nothing."""
    return OnceCallback(_ignore)


def do_nothing_repeatedly() -> RepeatingCallback:
    """Return a repeating callback that accepts any arguments and does nothing."""
    return RepeatingCallback(_ignore)


def split_once_callback(callback: Any) -> tuple[OnceCallback, OnceCallback]:
    """Split a once-callback into two, only one of which may be run.

    Running the second one after the first raises :class:`CallbackError`.
    An empty callback splits into two empty callbacks.
    """
    inner = _as_once(callback)
    if not inner:
        return OnceCallback(), OnceCallback()

    lock = threading.Lock()
    fired = False

    def run(*args: Any) -> Any:
        nonlocal fired
        with lock:
            if fired:
                raise CallbackError("Split OnceCallback invoked more than once")
            fired = True
        return inner.run(*args)

    shared = RepeatingCallback(run)
    return OnceCallback(shared), OnceCallback(shared)