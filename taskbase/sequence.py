"""Sequence identifiers, the per-thread current sequence and sequence checking."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

_counter = itertools.count()
_counter_lock = threading.Lock()
_local = threading.local()


@dataclass(frozen=True)
class SequenceId:
    """Identifies a sequence of tasks."""

    value: int


def next_sequence_id() -> SequenceId:
    """Return a fresh, process-wide unique sequence id."""
    with _counter_lock:
        return SequenceId(next(_counter))


def current_sequence_id() -> SequenceId | None:
    """Return the sequence the calling thread is running in, if any."""
    return getattr(_local, "sequence_id", None)


def is_current_sequence(sequence_id: SequenceId) -> bool:
    current = current_sequence_id()
    return current is not None and current == sequence_id


@contextmanager
def scoped_sequence_id(sequence_id: SequenceId) -> Iterator[SequenceId]:
    """Mark the calling thread as running in ``sequence_id`` for the block."""
    _local.sequence_id = sequence_id
    try:
        yield sequence_id
    finally:
        _local.sequence_id = None


class SequenceChecker:
    """Checks that calls happen on the sequence it is bound to.

    The checker binds to the sequence current at construction, or, if there
    was none, to the sequence of the first check.
    """

    def __init__(self) -> None:
        self._sequence_id: SequenceId | None = current_sequence_id()

    def called_on_valid_sequence(self) -> bool:
        current = current_sequence_id()
        if self._sequence_id is None:
            self._sequence_id = current
        if self._sequence_id is None:
            raise RuntimeError("Must run while in sequence!")
        return self._sequence_id == current

    def detach_from_sequence(self) -> None:
        """Unbind, so the next check binds to whatever sequence it runs in."""
        if self._sequence_id is None:
            return
        if not self.called_on_valid_sequence():
            raise RuntimeError("cannot detach a sequence checker from another sequence")
        self._sequence_id = None