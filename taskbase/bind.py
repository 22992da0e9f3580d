"""Binding arguments to functions to make once and repeating callbacks.

Bound arguments come first and run-time arguments follow them.
A bound argument may be wrapped to say how the callback holds it:

* ``unretained(obj)`` passes ``obj`` as is.
* ``retained_ref(obj)`` passes ``obj``; the callback keeps it alive.
* ``owned(obj)`` hands ``obj`` over to the callback, which passes it on each run.
* ``owned_ref(obj)`` stores a copy of ``obj`` owned by the callback. The
  same copy is passed on every run, so changes to it persist between runs.

A :class:`~taskbase.weak_ptr.WeakPtr` given as the first bound argument
stands for the instance. If the pointer is no longer valid when the callback
runs, the call is skipped and None is returned.
"""

from __future__ import annotations

import copy
import types
from dataclasses import dataclass
from typing import Any, Callable

from taskbase.callback import OnceCallback, RepeatingCallback
from taskbase.weak_ptr import WeakPtr

# Code flag set on functions that accept *args.
_CO_VARARGS = 0x04


@dataclass(frozen=True)
class _Unretained:
    instance: Any


@dataclass(frozen=True)
class _RetainedRef:
    instance: Any


@dataclass(frozen=True)
class _Owned:
    instance: Any


@dataclass(frozen=True)
class _OwnedRef:
    instance: Any


_WRAPPERS = (_Unretained, _RetainedRef, _Owned, _OwnedRef)


class _IgnoreResult:
    """Calls a functor and discards its result."""

    __slots__ = ("functor",)

    def __init__(self, functor: Any) -> None:
        self.functor = functor

    def __call__(self, *args: Any) -> None:
        self.functor(*args)


def unretained(instance: Any) -> Any:
    """Bind ``instance`` without the callback taking any ownership of it."""
    return _Unretained(instance)


def retained_ref(instance: Any) -> Any:
    """Bind ``instance`` with the callback sharing ownership of it."""
    return _RetainedRef(instance)


def owned(instance: Any) -> Any:
    """Hand ``instance`` over to the callback."""
    return _Owned(instance)


def owned_ref(instance: Any) -> Any:
    """Bind a copy of ``instance`` that the callback owns and reuses on every run."""
    return _OwnedRef(copy.copy(instance))


def ignore_result(functor: Any) -> Callable[..., None]:
    """Wrap ``functor`` so that whatever it returns is discarded."""
    if not callable(functor):
        raise TypeError(f"{functor!r} is not callable")
    return _IgnoreResult(functor)


def _positional_capacity(target: Any) -> int | None:
    """Number of positional parameters ``target`` takes, or None if unlimited or unknown."""
    skipped = 0
    if isinstance(target, types.MethodType):
        target = target.__func__
        skipped = 1
    if not isinstance(target, types.FunctionType):
        return None
    code = target.__code__
    if code.co_flags & _CO_VARARGS:
        return None
    return code.co_argcount - skipped


def _check_arity(functor: Any, bound_count: int) -> None:
    target = functor.functor if isinstance(functor, _IgnoreResult) else functor
    if isinstance(target, (OnceCallback, RepeatingCallback)):
        return
    capacity = _positional_capacity(target)
    if capacity is not None and bound_count > capacity:
        raise TypeError("Cannot bind more arguments than the function takes")


def _unwrap(argument: Any) -> Any:
    if isinstance(argument, _WRAPPERS):
        return argument.instance
    return argument


def _make_invoker(functor: Any, bound: tuple) -> Callable[..., Any]:
    def invoke(*run_args: Any) -> Any:
        arguments = []
        for position, argument in enumerate(bound):
            if position == 0 and isinstance(argument, WeakPtr):
                target = argument.get()
                if target is None:
                    return None
                arguments.append(target)
            else:
                arguments.append(_unwrap(argument))
        return functor(*arguments, *run_args)

    return invoke


def _prepare(functor: Any, args: tuple) -> None:
    if not callable(functor):
        raise TypeError(f"{functor!r} is not callable")
    _check_arity(functor, len(args))


def bind_once(functor: Any, *args: Any) -> OnceCallback:
    """Bind ``args`` to ``functor`` and return a callback that runs once.

    A :class:`OnceCallback` given as ``functor`` is taken over and left empty.
    """
    _prepare(functor, args)
    if isinstance(functor, OnceCallback):
        functor = OnceCallback(functor)
    return OnceCallback(_make_invoker(functor, args))


def bind_repeating(functor: Any, *args: Any) -> RepeatingCallback:
    """Bind ``args`` to ``functor`` and return a callback that may run many times."""
    if isinstance(functor, OnceCallback):
        raise TypeError("a OnceCallback cannot be bound into a RepeatingCallback")
    _prepare(functor, args)
    return RepeatingCallback(_make_invoker(functor, args))