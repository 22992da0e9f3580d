"""A pool of worker threads sharing one message pump."""

from __future__ import annotations

import random
import threading
import weakref
from typing import NamedTuple

from taskbase.delayed_task_manager import get_or_create_shared_instance
from taskbase.message_loop import MessageLoopImpl
from taskbase.message_pump import MessagePumpImpl, PendingTask
from taskbase.sequence import next_sequence_id
from taskbase.task_runner import SequencedTaskRunner, SingleThreadTaskRunner, TaskRunner
from taskbase.task_runner_impl import (
    SequencedTaskRunnerImpl,
    SingleThreadTaskRunnerImpl,
    TaskRunnerImpl,
)


class _Worker(NamedTuple):
    loop: MessageLoopImpl
    thread: threading.Thread


class ThreadPool:
    """A fixed number of threads running the tasks posted through its runners."""

    def __init__(self, initial_size: int) -> None:
        if initial_size <= 0:
            raise ValueError("a thread pool needs at least one thread")
        self._initial_size = initial_size
        self._pump: weakref.ref | None = None
        self._workers: list[_Worker] = []
        self._task_runner: TaskRunnerImpl | None = None
        self._random = random.Random()

    def start(self) -> None:
        pump = MessagePumpImpl(self._initial_size)
        for executor_id in range(self._initial_size):
            loop = MessageLoopImpl(executor_id, pump)
            thread = threading.Thread(
                target=loop.run, name=f"taskbase-pool-{executor_id}", daemon=True
            )
            thread.start()
            self._workers.append(_Worker(loop, thread))
        self._pump = weakref.ref(pump)
        self._task_runner = TaskRunnerImpl(self._pump, get_or_create_shared_instance())

    def stop(self) -> None:
        """Stop every thread after the tasks queued so far have run."""
        for worker in self._workers:
            worker.loop.stop(PendingTask())
            worker.thread.join()
        self._workers.clear()

    def get_task_runner(self) -> TaskRunner | None:
        """Return the runner for tasks that may run on any thread, in any order."""
        return self._task_runner

    def create_sequenced_task_runner(self) -> SequencedTaskRunner:
        return SequencedTaskRunnerImpl(
            self._pump, next_sequence_id(), get_or_create_shared_instance()
        )

    def create_single_thread_task_runner(self) -> SingleThreadTaskRunner:
        """Return a runner whose tasks all run on one randomly chosen thread."""
        executor_id = self._random.randint(0, self._initial_size - 1)
        return SingleThreadTaskRunnerImpl(
            self._pump, next_sequence_id(), executor_id, get_or_create_shared_instance()
        )

    def __enter__(self) -> "ThreadPool":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()