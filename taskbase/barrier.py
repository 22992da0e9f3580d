"""Callbacks that fire only after being run a required number of times."""

from __future__ import annotations

import threading
from typing import Any

from taskbase.callback import CallbackError, OnceCallback, RepeatingCallback


def _as_once(callback: Any) -> OnceCallback:
    return callback if isinstance(callback, OnceCallback) else OnceCallback(callback)


def _check_count(required_run_count: int) -> None:
    if required_run_count < 0:
        raise ValueError("required_run_count must not be negative")


def barrier_callback(required_run_count: int, callback: Any) -> RepeatingCallback:
    """Collect one element per run; after the last run pass the list to ``callback``.

    With a count of zero ``callback`` runs at once with an empty list and an
    empty callback is returned.
    """
    _check_count(required_run_count)
    done = _as_once(callback)
    if required_run_count == 0:
        done.run([])
        return RepeatingCallback()

    lock = threading.Lock()
    elements: list = []
    remaining = required_run_count

    def run(element: Any) -> None:
        nonlocal remaining, elements
        with lock:
            if remaining == 0:
                raise CallbackError("barrier callback run more times than required")
            elements.append(element)
            remaining -= 1
            collected = None
            if remaining == 0:
                collected, elements = elements, []
        if collected is not None:
            done.run(collected)

    return RepeatingCallback(run)


def barrier_closure(required_run_count: int, callback: Any) -> RepeatingCallback:
    """Run ``callback`` once the returned closure has run the required number of times.

    With a count of zero ``callback`` runs at once and an empty callback is
    returned.
    """
    _check_count(required_run_count)
    done = _as_once(callback)
    if required_run_count == 0:
        done.run()
        return RepeatingCallback()

    lock = threading.Lock()
    remaining = required_run_count

    def run() -> None:
        nonlocal remaining
        with lock:
            if remaining == 0:
                raise CallbackError("barrier closure run more times than required")
            remaining -= 1
            is_last = remaining == 0
        if is_last:
            done.run()

    return RepeatingCallback(run)