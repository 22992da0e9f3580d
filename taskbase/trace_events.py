"""Trace event records and their serialisation to the trace-event JSON format."""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any, Iterable, TextIO

StringArguments = list[tuple[str, str]]
IntegerArguments = list[tuple[str, int]]


def _pairs(args: tuple) -> Iterable[tuple[Any, Any]]:
    if len(args) % 2:
        raise ValueError("arguments must be provided in key-value pairs")
    return zip(args[::2], args[1::2])


def pack_string_arguments(*args: Any) -> StringArguments:
    """Pack ``key, value, key, value, ...`` into a list of string pairs."""
    return [(str(key), str(value)) for key, value in _pairs(args)]


def pack_integer_arguments(*args: Any) -> IntegerArguments:
    """Pack ``key, value, ...`` into a list of pairs with integer values."""
    packed: IntegerArguments = []
    for key, value in _pairs(args):
        try:
            number = operator.index(value)
        except TypeError as error:
            raise TypeError(f"argument {key!r} must be an integer, not {value!r}") from error
        packed.append((str(key), number))
    return packed


def _write_string_arguments(stream: TextIO, args: StringArguments) -> None:
    body = ",".join(f'"{key}":"{value}"' for key, value in args)
    stream.write(f'"args":{{{body}}}')


def _write_integer_arguments(stream: TextIO, args: IntegerArguments) -> None:
    body = ",".join(f'"{key}":{value}' for key, value in args)
    stream.write(f'"args":{{{body}}}')


@dataclass
class TraceEvent:
    """A duration, async, flow or metadata event."""

    name: str
    cat: str
    id: str
    ph: str
    ts: int
    pid: int
    tid: int
    args: StringArguments = field(default_factory=list)

    def write_to(self, stream: TextIO) -> None:
        stream.write("{")
        stream.write(f'"name":"{self.name}",')
        stream.write(f'"cat":"{self.cat}",')
        if self.id:
            stream.write(f'"id":"{self.id}",')
        stream.write(f'"ph":"{self.ph}",')
        stream.write(f'"ts":{self.ts},')
        stream.write(f'"pid":{self.pid},')
        stream.write(f'"tid":{self.tid},')
        _write_string_arguments(stream, self.args)
        stream.write("}")


@dataclass
class TraceCompleteEvent:
    """An event with a known start time and duration."""

    name: str
    cat: str
    ts: int
    dur: int
    pid: int
    tid: int
    args: StringArguments = field(default_factory=list)

    def write_to(self, stream: TextIO) -> None:
        stream.write("{")
        stream.write(f'"name":"{self.name}",')
        stream.write(f'"cat":"{self.cat}",')
        stream.write('"ph":"X",')
        stream.write(f'"ts":{self.ts},')
        stream.write(f'"dur":{self.dur},')
        stream.write(f'"pid":{self.pid},')
        stream.write(f'"tid":{self.tid},')
        _write_string_arguments(stream, self.args)
        stream.write("}")


@dataclass
class TraceCounter:
    """A process-wide counter sample."""

    name: str
    cat: str
    ts: int
    pid: int
    args: IntegerArguments = field(default_factory=list)

    def write_to(self, stream: TextIO) -> None:
        stream.write("{")
        stream.write(f'"name":"{self.name}",')
        stream.write(f'"cat":"{self.cat}",')
        stream.write('"ph":"C",')
        stream.write(f'"ts":{self.ts},')
        stream.write(f'"pid":{self.pid},')
        _write_integer_arguments(stream, self.args)
        stream.write("}")


@dataclass
class TraceCounterId:
    """A counter sample belonging to the object identified by ``id``."""

    name: str
    cat: str
    id: str
    ts: int
    pid: int
    args: IntegerArguments = field(default_factory=list)

    def write_to(self, stream: TextIO) -> None:
        stream.write("{")
        stream.write(f'"name":"{self.name}",')
        stream.write(f'"cat":"{self.cat}",')
        stream.write(f'"id":"{self.id}",')
        stream.write('"ph":"C",')
        stream.write(f'"ts":{self.ts},')
        stream.write(f'"pid":{self.pid},')
        _write_integer_arguments(stream, self.args)
        stream.write("}")


@dataclass
class TraceInstantEvent:
    """An instant event with scope ``s``: global, process or thread."""

    name: str
    cat: str
    s: str
    ts: int
    pid: int
    tid: int
    args: StringArguments = field(default_factory=list)

    def write_to(self, stream: TextIO) -> None:
        stream.write("{")
        stream.write(f'"name":"{self.name}",')
        stream.write(f'"cat":"{self.cat}",')
        stream.write(f'"s":"{self.s}",')
        stream.write('"ph":"i",')
        stream.write(f'"ts":{self.ts},')
        stream.write(f'"pid":{self.pid},')
        stream.write(f'"tid":{self.tid},')
        _write_string_arguments(stream, self.args)
        stream.write("}")


def write_all(
    stream: TextIO,
    generic_events: Iterable[TraceEvent],
    complete_events: Iterable[TraceCompleteEvent],
    counter_events: Iterable[TraceCounter],
    counter_id_events: Iterable[TraceCounterId],
    instant_events: Iterable[TraceInstantEvent],
) -> None:
    """Write every event, kind by kind, as one trace document."""
    stream.write('{"traceEvents":[\n')
    written = False
    for events in (generic_events, complete_events, counter_events, counter_id_events, instant_events):
        for event in events:
            if written:
                stream.write(",\n")
            event.write_to(stream)
            written = True
    stream.write("\n]}")