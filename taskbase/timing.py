"""Durations, wall-clock times, monotonic ticks and an elapsed-time timer."""

from __future__ import annotations

import functools
import time as _time
from numbers import Real

_NS_PER_US = 1000
_US_PER_MS = 1000
_US_PER_S = 1000 * _US_PER_MS
_US_PER_MIN = 60 * _US_PER_S
_US_PER_HOUR = 60 * _US_PER_MIN
_US_PER_DAY = 24 * _US_PER_HOUR


def _truncate(value) -> int:
    """Convert to an integer, rounding toward zero."""
    return int(value)


def _div(dividend, divisor) -> int:
    """Divide, rounding the quotient toward zero."""
    if isinstance(dividend, int) and isinstance(divisor, int):
        quotient = abs(dividend) // abs(divisor)
        return quotient if (dividend < 0) == (divisor < 0) else -quotient
    return int(dividend / divisor)


@functools.total_ordering
class TimeDelta:
    """A signed span of time with microsecond resolution."""

    __slots__ = ("_us",)

    def __init__(self) -> None:
        self._us = 0

    @classmethod
    def _from_us(cls, us: int) -> "TimeDelta":
        delta = cls.__new__(cls)
        delta._us = int(us)
        return delta

    @classmethod
    def from_timespec(cls, seconds: int, nanoseconds: int) -> "TimeDelta":
        """Build a delta from a seconds/nanoseconds pair."""
        return cls._from_us(seconds * _US_PER_S + _div(nanoseconds, _NS_PER_US))

    def is_zero(self) -> bool:
        return self._us == 0

    def is_positive(self) -> bool:
        return self._us > 0

    def is_negative(self) -> bool:
        return self._us < 0

    def in_days(self) -> int:
        return _div(self._us, _US_PER_DAY)

    def in_hours(self) -> int:
        return _div(self._us, _US_PER_HOUR)

    def in_minutes(self) -> int:
        return _div(self._us, _US_PER_MIN)

    def in_seconds_f(self) -> float:
        return self._us / _US_PER_S

    def in_seconds(self) -> int:
        return _div(self._us, _US_PER_S)

    def in_milliseconds_f(self) -> float:
        return self._us / _US_PER_MS

    def in_milliseconds(self) -> int:
        return _div(self._us, _US_PER_MS)

    def in_microseconds(self) -> int:
        return self._us

    def in_microseconds_f(self) -> float:
        return float(self._us)

    def in_nanoseconds(self) -> int:
        return self._us * _NS_PER_US

    def __add__(self, other):
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return TimeDelta._from_us(self._us + other._us)

    def __sub__(self, other):
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return TimeDelta._from_us(self._us - other._us)

    def __neg__(self) -> "TimeDelta":
        return TimeDelta._from_us(-self._us)

    def __mul__(self, factor):
        if isinstance(factor, TimeDelta) or not isinstance(factor, Real):
            return NotImplemented
        return TimeDelta._from_us(_truncate(self._us * factor))

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        if isinstance(divisor, TimeDelta) or not isinstance(divisor, Real):
            return NotImplemented
        return TimeDelta._from_us(_div(self._us, divisor))

    def __eq__(self, other):
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return self._us == other._us

    def __lt__(self, other):
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return self._us < other._us

    def __hash__(self) -> int:
        return hash((TimeDelta, self._us))

    def __repr__(self) -> str:
        return f"TimeDelta({self._us}us)"


def days(n) -> TimeDelta:
    return TimeDelta._from_us(_truncate(n * _US_PER_DAY))


def hours(n) -> TimeDelta:
    return TimeDelta._from_us(_truncate(n * _US_PER_HOUR))


def minutes(n) -> TimeDelta:
    return TimeDelta._from_us(_truncate(n * _US_PER_MIN))


def seconds(n) -> TimeDelta:
    return TimeDelta._from_us(_truncate(n * _US_PER_S))


def milliseconds(n) -> TimeDelta:
    return TimeDelta._from_us(_truncate(n * _US_PER_MS))


def microseconds(n) -> TimeDelta:
    return TimeDelta._from_us(_truncate(n))


def nanoseconds(n) -> TimeDelta:
    return TimeDelta._from_us(_div(n, _NS_PER_US))


@functools.total_ordering
class _TimePoint:
    """A point on a clock, counted in microseconds from that clock's origin."""

    __slots__ = ("_us",)

    def __init__(self) -> None:
        self._us = 0

    @classmethod
    def _from_us(cls, us: int):
        point = cls.__new__(cls)
        point._us = int(us)
        return point

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._us == other._us

    def __lt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._us < other._us

    def __hash__(self) -> int:
        return hash((type(self), self._us))

    def __add__(self, delta):
        if not isinstance(delta, TimeDelta):
            return NotImplemented
        return type(self)._from_us(self._us + delta.in_microseconds())

    def __sub__(self, other):
        if isinstance(other, TimeDelta):
            return type(self)._from_us(self._us - other.in_microseconds())
        if type(other) is type(self):
            return TimeDelta._from_us(self._us - other._us)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._us}us)"


class Time(_TimePoint):
    """Wall-clock time, measured from the Unix epoch."""

    __slots__ = ()

    @classmethod
    def now(cls) -> "Time":
        return cls._from_us(_time.time_ns() // _NS_PER_US)

    @classmethod
    def from_time_t(cls, tt: int) -> "Time":
        return cls._from_us(tt * _US_PER_S)

    def to_time_t(self) -> int:
        return _div(self._us, _US_PER_S)

    @classmethod
    def from_timespec(cls, seconds: int, nanoseconds: int) -> "Time":
        return cls._from_us(seconds * _US_PER_S + _div(nanoseconds, _NS_PER_US))

    def to_timespec(self) -> tuple[int, int]:
        """Return ``(seconds, nanoseconds)``."""
        whole = _div(self._us, _US_PER_S)
        return whole, (self._us - whole * _US_PER_S) * _NS_PER_US


class TimeTicks(_TimePoint):
    """A reading of the monotonic clock."""

    __slots__ = ()

    @classmethod
    def now(cls) -> "TimeTicks":
        return cls._from_us(_time.monotonic_ns() // _NS_PER_US)


class ElapsedTimer:
    """Measures the time passed since it was created."""

    __slots__ = ("_begin",)

    def __init__(self) -> None:
        self._begin = TimeTicks.now()

    def elapsed(self) -> TimeDelta:
        return TimeTicks.now() - self._begin

    def begin(self) -> TimeTicks:
        return self._begin