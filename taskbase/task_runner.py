"""Task runner interfaces, the current-sequence runner handle and posting helpers."""

from __future__ import annotations

import inspect
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from taskbase.bind import bind_once
from taskbase.callback import OnceCallback, RepeatingCallback
from taskbase.timing import TimeDelta


@dataclass(frozen=True)
class SourceLocation:
    """Where in the code a task was posted from."""

    file: str
    line: int


def from_here() -> SourceLocation:
    """Return the location of the caller."""
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        if caller is None:
            return SourceLocation("<unknown>", 0)
        return SourceLocation(caller.f_code.co_filename, caller.f_lineno)
    finally:
        del frame, caller


def _as_once(callback: Any) -> OnceCallback:
    return callback if isinstance(callback, OnceCallback) else OnceCallback(callback)


class TaskRunner(ABC):
    """Something tasks can be posted to."""

    def post_task(self, location: SourceLocation, task: Any) -> bool:
        """Post ``task`` to run as soon as possible."""
        return self.post_delayed_task(location, task, TimeDelta())

    @abstractmethod
    def post_delayed_task(self, location: SourceLocation, task: Any, delay: TimeDelta) -> bool:
        """Post ``task`` to run once ``delay`` has passed."""

    def post_task_and_reply(self, location: SourceLocation, task: Any, reply: Any) -> bool:
        """Run ``task`` here, then ``reply`` on the sequence this is called from."""
        if not task:
            raise ValueError("task must not be empty")
        if not reply:
            raise ValueError("reply must not be empty")
        if not SequencedTaskRunnerHandle.is_set():
            raise RuntimeError("post_task_and_reply must be called from within a sequence")

        task_callback = _as_once(task)

        def run_task() -> None:
            task_callback.run()

        post_reply = bind_post_task(SequencedTaskRunnerHandle.get(), _as_once(reply), location)
        return self.post_task(location, OnceCallback(run_task).then(post_reply))

    def post_task_and_reply_with_result(
        self, location: SourceLocation, task: Any, reply: Any
    ) -> bool:
        """Run ``task`` here, then ``reply`` with its result on the calling sequence."""
        if not task:
            raise ValueError("task must not be empty")
        if not reply:
            raise ValueError("reply must not be empty")

        task_callback = _as_once(task)
        reply_callback = _as_once(reply)
        result: Any = None

        def run_task() -> None:
            nonlocal result
            result = task_callback.run()

        def run_reply() -> None:
            reply_callback.run(result)

        return self.post_task_and_reply(location, OnceCallback(run_task), OnceCallback(run_reply))


class SequencedTaskRunner(TaskRunner):
    """A task runner whose tasks run one at a time, in posting order."""

    @abstractmethod
    def runs_tasks_in_current_sequence(self) -> bool:
        """Return whether the caller is running in this runner's sequence."""

    def delete_soon(self, location: SourceLocation, obj: Any) -> bool:
        """Hand ``obj`` over so that its last reference is dropped on this sequence."""
        holder = [obj]
        del obj

        def destroy() -> None:
            holder.clear()

        return self.post_task(location, OnceCallback(destroy))


class SingleThreadTaskRunner(SequencedTaskRunner):
    """A sequenced task runner whose tasks all run on one thread."""

    def belongs_to_current_thread(self) -> bool:
        return self.runs_tasks_in_current_sequence()


_handle_local = threading.local()


class SequencedTaskRunnerHandle:
    """Makes a runner the current thread's sequenced task runner for a ``with`` block."""

    def __init__(self, task_runner: SequencedTaskRunner) -> None:
        if task_runner is None:
            raise ValueError("SequencedTaskRunnerHandle needs a task runner")
        self._task_runner = task_runner

    @classmethod
    def get(cls) -> SequencedTaskRunner:
        """Return the current runner; only valid while one is set."""
        handle = getattr(_handle_local, "handle", None)
        if handle is None:
            raise RuntimeError("no sequenced task runner is set for this thread")
        return handle._task_runner

    @classmethod
    def is_set(cls) -> bool:
        return getattr(_handle_local, "handle", None) is not None

    def __enter__(self) -> "SequencedTaskRunnerHandle":
        if not self._task_runner.runs_tasks_in_current_sequence():
            raise RuntimeError("the task runner does not run tasks in the current sequence")
        if self.is_set():
            raise RuntimeError("a sequenced task runner is already set for this thread")
        _handle_local.handle = self
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        current = getattr(_handle_local, "handle", None)
        _handle_local.handle = None
        if current is not self:
            raise RuntimeError("sequenced task runner handles exited out of order")


def bind_post_task(task_runner: TaskRunner, callback: Any, location: SourceLocation):
    """Wrap ``callback`` so that running the wrapper posts it to ``task_runner``.

    A :class:`RepeatingCallback` gives a repeating wrapper; anything else a
    once-callback. Arguments given to the wrapper are passed on to ``callback``.
    """
    if isinstance(callback, RepeatingCallback):

        def post_repeating(*args: Any) -> None:
            task_runner.post_task(location, bind_once(callback, *args))

        return RepeatingCallback(post_repeating)

    once = _as_once(callback)

    def post_once(*args: Any) -> None:
        task_runner.post_task(location, bind_once(once, *args))

    return OnceCallback(post_once)