"""Temporarily replace a value and restore it afterwards."""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any


@contextmanager
def auto_reset(target: Any, name: Any, value: Any) -> Iterator[Any]:
    """Set ``target.name`` (or ``target[name]`` for mappings) to ``value``.

    The original value is yielded and put back when the block exits.
    """
    if isinstance(target, MutableMapping):
        original = target[name]
        target[name] = value
        try:
            yield original
        finally:
            target[name] = original
    else:
        original = getattr(target, name)
        setattr(target, name, value)
        try:
            yield original
        finally:
            setattr(target, name, original)