"""Weak references that an owner can invalidate explicitly."""

from __future__ import annotations

import threading
import weakref
from typing import Generic, TypeVar

from taskbase.sequence import SequenceChecker

T = TypeVar("T")


class _ControlBlock:
    """Shared state between a factory and the weak pointers it handed out."""

    __slots__ = ("target", "alive", "weak_count", "lock", "sequence_checker", "__weakref__")

    def __init__(self, target) -> None:
        self.target = target
        self.alive = True
        self.weak_count = 0
        self.lock = threading.Lock()
        self.sequence_checker = SequenceChecker()
        self.sequence_checker.detach_from_sequence()


def _check_sequence(block: _ControlBlock) -> None:
    """Raise if the block is bound to a sequence other than the current one."""
    try:
        valid = block.sequence_checker.called_on_valid_sequence()
    except RuntimeError:
        # Neither bound to a sequence nor running in one: nothing to check.
        return
    if not valid:
        raise RuntimeError("weak pointer used on a sequence other than the one it is bound to")


class WeakPtr(Generic[T]):
    """A reference that becomes empty once its factory invalidates it or goes away."""

    def __init__(self) -> None:
        self._block_ref: weakref.ref | None = None
        self._had_target = False

    @classmethod
    def _bound(cls, block: _ControlBlock) -> "WeakPtr[T]":
        pointer = cls()
        pointer._block_ref = weakref.ref(block)
        pointer._had_target = True
        pointer._acquire()
        return pointer

    def _live_block(self) -> _ControlBlock | None:
        if self._block_ref is None:
            return None
        block = self._block_ref()
        if block is None or not block.alive:
            return None
        return block

    def _acquire(self) -> None:
        block = self._live_block()
        if block is not None:
            with block.lock:
                block.weak_count += 1

    def _release(self) -> None:
        block = self._live_block()
        if block is not None:
            with block.lock:
                block.weak_count -= 1

    def __copy__(self) -> "WeakPtr[T]":
        pointer = type(self)()
        pointer._block_ref = self._block_ref
        pointer._had_target = self._had_target
        pointer._acquire()
        return pointer

    def __del__(self) -> None:
        if getattr(self, "_block_ref", None) is not None:
            self._release()

    def get(self) -> T | None:
        """Return the target, or None if this pointer is no longer valid."""
        block = self._live_block()
        if block is None:
            return None
        _check_sequence(block)
        return block.target

    def maybe_valid(self) -> bool:
        """Return whether the pointer may still be valid; safe from any thread."""
        return self._live_block() is not None

    def was_invalidated(self) -> bool:
        """Return True if the pointer once pointed somewhere and no longer does."""
        block = self._live_block()
        if block is not None:
            _check_sequence(block)
            return False
        return self._had_target

    def __bool__(self) -> bool:
        return self.get() is not None

    def __repr__(self) -> str:
        state = "valid" if self.maybe_valid() else "empty"
        return f"WeakPtr({state})"


class WeakPtrFactory(Generic[T]):
    """Hands out weak pointers to one object and can invalidate them all."""

    def __init__(self, target: T) -> None:
        if target is None:
            raise ValueError("WeakPtrFactory needs an object to point to")
        self._block = _ControlBlock(target)

    def get_weak_ptr(self) -> WeakPtr[T]:
        if not self.has_weak_ptrs():
            self._block.sequence_checker.detach_from_sequence()
        return WeakPtr._bound(self._block)

    def invalidate_weak_ptrs(self) -> None:
        """Make every pointer handed out so far empty."""
        old = self._block
        _check_sequence(old)
        self._block = _ControlBlock(old.target)
        old.alive = False
        old.target = None

    def has_weak_ptrs(self) -> bool:
        with self._block.lock:
            return self._block.weak_count > 0