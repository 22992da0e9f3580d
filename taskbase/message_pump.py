"""Queues of pending tasks shared by the executors of a message loop."""

from __future__ import annotations

import threading
import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from taskbase.callback import OnceCallback
from taskbase.sequence import SequenceId


@dataclass(eq=False)
class PendingTask:
    """A task waiting to be run, with the constraints on where it may run.

    ``target_task_runner`` is kept as a weak reference: call it to get the
    runner, or None once the runner is gone.
    """

    task: OnceCallback = field(default_factory=OnceCallback)
    sequence_id: SequenceId | None = None
    allowed_executor_id: int | None = None
    target_task_runner: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.task, OnceCallback):
            self.task = OnceCallback(self.task)
        runner = self.target_task_runner
        if runner is not None and not isinstance(runner, weakref.ref):
            self.target_task_runner = weakref.ref(runner)

    def __bool__(self) -> bool:
        return bool(self.task)


class MessagePump(ABC):
    """Hands pending tasks out to executors."""

    @abstractmethod
    def get_next_pending_task(self, executor_id: int) -> PendingTask:
        """Block until a task for ``executor_id`` is available or the pump stops."""

    @abstractmethod
    def queue_pending_task(self, pending_task: PendingTask) -> bool:
        """Queue a task; return False if the pump no longer accepts tasks."""

    @abstractmethod
    def stop(self, last_task: PendingTask) -> None:
        """Stop accepting tasks, queueing ``last_task`` first if it is not empty."""


class MessagePumpImpl(MessagePump):
    """A pump for a fixed number of executors.

    A task is handed to an executor only if it is not bound to another
    executor and no executor is running a task from the same sequence.
    """

    def __init__(self, executors_count: int) -> None:
        self._condition = threading.Condition()
        self._stopped = False
        self._pending: list[PendingTask] = []
        self._active_sequences: list[SequenceId | None] = [None] * executors_count

    def get_next_pending_task(self, executor_id: int) -> PendingTask:
        with self._condition:
            if not 0 <= executor_id < len(self._active_sequences):
                raise IndexError(f"executor id {executor_id} is out of range")

            # The executor asks for more work only once it finished its last
            # task, so its sequence no longer blocks other executors.
            if self._active_sequences[executor_id] is not None:
                self._active_sequences[executor_id] = None
                self._condition.notify_all()

            task = self._take_next_locked(executor_id)
            if task:
                return task

            self._condition.wait_for(
                lambda: self._stopped or self._find_allowed_locked(executor_id) is not None
            )
            return self._take_next_locked(executor_id)

    def queue_pending_task(self, pending_task: PendingTask) -> bool:
        with self._condition:
            queued = not self._stopped
            if queued:
                self._pending.append(pending_task)
            self._condition.notify_all()
        return queued

    def stop(self, last_task: PendingTask) -> None:
        with self._condition:
            if not self._stopped and last_task:
                self._pending.append(last_task)
            self._stopped = True
            self._condition.notify_all()

    def _take_next_locked(self, executor_id: int) -> PendingTask:
        index = self._find_allowed_locked(executor_id)
        if index is None:
            return PendingTask()
        task = self._pending.pop(index)
        self._active_sequences[executor_id] = task.sequence_id
        return task

    def _find_allowed_locked(self, executor_id: int) -> int | None:
        return next(
            (
                index
                for index, task in enumerate(self._pending)
                if self._is_allowed_locked(task, executor_id)
            ),
            None,
        )

    def _is_allowed_locked(self, task: PendingTask, executor_id: int) -> bool:
        if task.allowed_executor_id is not None and task.allowed_executor_id != executor_id:
            return False
        return task.sequence_id is None or task.sequence_id not in self._active_sequences