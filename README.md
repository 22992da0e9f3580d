# taskbase

A small toolkit for structuring concurrent Python programs around tasks and
callbacks. It has no dependencies outside the standard library.

## What is in it

| Module | Contents |
| --- | --- |
| `taskbase.callback` | `OnceCallback`, `RepeatingCallback`, `CallbackError`, `is_once_callback`, `is_repeating_callback`, `is_callback` |
| `taskbase.bind` | `bind_once`, `bind_repeating` and the argument wrappers `unretained`, `retained_ref`, `owned`, `owned_ref`, `ignore_result` |
| `taskbase.callback_helpers` | `ScopedClosureRunner`, `do_nothing_once`, `do_nothing_repeatedly`, `split_once_callback` |
| `taskbase.barrier` | `barrier_callback`, `barrier_closure` |
| `taskbase.task_runner` | `SourceLocation`, `from_here`, `TaskRunner`, `SequencedTaskRunner`, `SingleThreadTaskRunner`, `SequencedTaskRunnerHandle`, `bind_post_task` |
| `taskbase.task_runner_impl` | `TaskRunnerImpl`, `SequencedTaskRunnerImpl`, `SingleThreadTaskRunnerImpl` |
| `taskbase.message_pump` | `PendingTask`, `MessagePump`, `MessagePumpImpl` |
| `taskbase.message_loop` | `MessageLoop`, `MessageLoopImpl` |
| `taskbase.delayed_task_manager` | `DelayedTask`, `DelayedTaskManager`, `get_or_create_shared_instance` |
| `taskbase.thread` | `Thread` |
| `taskbase.thread_pool` | `ThreadPool` |
| `taskbase.weak_ptr` | `WeakPtr`, `WeakPtrFactory` |
| `taskbase.sequence` | `SequenceId`, `next_sequence_id`, `current_sequence_id`, `is_current_sequence`, `scoped_sequence_id`, `SequenceChecker` |
| `taskbase.synchronization` | `WaitableEvent`, `ResetPolicy`, `InitialState`, `AutoSignaller` |
| `taskbase.timing` | `TimeDelta`, `Time`, `TimeTicks`, `ElapsedTimer` and the constructors `days`, `hours`, `minutes`, `seconds`, `milliseconds`, `microseconds`, `nanoseconds` |
| `taskbase.auto_reset` | `auto_reset`, a context manager that swaps an attribute or mapping entry and restores it |
| `taskbase.trace_events` | trace-event records and `write_all`, which writes them as a trace-event JSON document |

## Installation

```
pip install taskbase
```

## Posting tasks

```python
from taskbase.bind import bind_once
from taskbase.synchronization import WaitableEvent
from taskbase.task_runner import from_here
from taskbase.thread_pool import ThreadPool
from taskbase.timing import milliseconds

with ThreadPool(4) as pool:
    runner = pool.create_sequenced_task_runner()
    done = WaitableEvent()

    runner.post_task(from_here(), bind_once(print, "first"))
    runner.post_delayed_task(from_here(), bind_once(done.signal), milliseconds(50))

    done.wait()
```

- `ThreadPool.get_task_runner()` gives a runner whose tasks may run on any
  worker, in any order. `create_sequenced_task_runner()` gives one whose tasks
  run one at a time in posting order; `create_single_thread_task_runner()` one
  whose tasks also all run on a single, randomly chosen worker.
- `Thread` runs one worker; `start()`, `stop()` and `task_runner()` work as
  their names say, and it can also be used as a context manager.
  `flush_for_testing()` blocks until everything posted so far has run.
- `post_task` returns whether the task was queued. A task posted with a
  positive delay is handed to a shared `DelayedTaskManager` and
  `post_delayed_task` returns `False`.
- `post_task_and_reply(location, task, reply)` runs `task` on the runner and
  then posts `reply` back to the sequence it was called from, so it must be
  called from a task running on a sequenced runner.
  `post_task_and_reply_with_result` passes the task's result to the reply.

## Callbacks

```python
from taskbase.bind import bind_once, bind_repeating
from taskbase.weak_ptr import WeakPtrFactory

add = bind_repeating(lambda a, b: a + b, 1)
assert add.run(2) == 3

twice = add.then(lambda x: x * 2)
assert twice.run(4) == 10


class Counter:
    def __init__(self):
        self.count = 0

    def bump(self):
        self.count += 1


counter = Counter()
factory = WeakPtrFactory(counter)
bump = bind_once(Counter.bump, factory.get_weak_ptr())
factory.invalidate_weak_ptrs()
bump.run()              # skipped: the weak pointer is no longer valid
assert counter.count == 0
```

A `OnceCallback` is empty after it has run; running it again raises
`CallbackError`. `then` passes the first callback's result to the second, or
calls the second with no arguments when the result is `None`.

## Trace-event records

```python
import io

from taskbase.trace_events import (
    TraceCounter,
    TraceEvent,
    pack_integer_arguments,
    pack_string_arguments,
    write_all,
)

out = io.StringIO()
write_all(
    out,
    [TraceEvent("load", "io", "", "B", 0, 1, 1, pack_string_arguments("path", "data.bin"))],
    [],
    [TraceCounter("usage", "mem", 10, 1, pack_integer_arguments("bytes", 4096))],
    [],
    [],
)
print(out.getvalue())
```

Names, categories and argument values are written as they are, without JSON
escaping.

## What it does not do

- There is no event recorder: nothing in the package stamps events with the
  time, process and thread, collects them, or flushes them to a file. You build
  the records yourself and write them with `write_all`.
- There is no logging setup or log formatter; use the standard `logging`
  module as usual.
- There is no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```