"""A thread running its own message loop, reached through a task runner."""

from __future__ import annotations

import threading
from typing import Any

from taskbase.delayed_task_manager import get_or_create_shared_instance
from taskbase.message_loop import MessageLoopImpl
from taskbase.message_pump import MessagePumpImpl, PendingTask
from taskbase.sequence import SequenceId, next_sequence_id
from taskbase.synchronization import InitialState, ResetPolicy, WaitableEvent
from taskbase.task_runner import SingleThreadTaskRunner, SourceLocation, from_here
from taskbase.task_runner_impl import SingleThreadTaskRunnerImpl

_EXECUTOR_ID = 0


class Thread:
    """A worker thread whose tasks are posted through :meth:`task_runner`."""

    def __init__(self) -> None:
        self._loop: MessageLoopImpl | None = None
        self._thread: threading.Thread | None = None
        self._sequence_id: SequenceId | None = None
        self._task_runner: SingleThreadTaskRunnerImpl | None = None

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("thread is already started")
        pump = MessagePumpImpl(1)
        self._loop = MessageLoopImpl(_EXECUTOR_ID, pump)
        self._thread = threading.Thread(target=self._loop.run, name="taskbase-thread", daemon=True)
        self._thread.start()
        self._sequence_id = next_sequence_id()
        self._task_runner = SingleThreadTaskRunnerImpl(
            pump, self._sequence_id, _EXECUTOR_ID, get_or_create_shared_instance()
        )

    def stop(self, location: SourceLocation | None = None, last_task: Any = None) -> None:
        """Stop the thread after its queued tasks and ``last_task`` have run."""
        if self._loop is not None:
            self._loop.stop(
                PendingTask(last_task, self._sequence_id, _EXECUTOR_ID, self._task_runner)
            )
        if self._thread is not None:
            self._thread.join()
        self._thread = None
        self._loop = None
        self._sequence_id = None
        self._task_runner = None

    def ident(self) -> int | None:
        """Return the identifier of the running thread, or None if not started."""
        return self._thread.ident if self._thread is not None else None

    def task_runner(self) -> SingleThreadTaskRunner | None:
        return self._task_runner

    def flush_for_testing(self) -> None:
        """Block until every task posted so far has run."""
        if self._thread is None:
            return
        event = WaitableEvent(ResetPolicy.AUTOMATIC, InitialState.NOT_SIGNALED)
        self._task_runner.post_task(from_here(), event.signal)
        event.wait()

    def __enter__(self) -> "Thread":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()