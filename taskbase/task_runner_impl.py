"""Task runners that post to a message pump, directly or after a delay.

Posting a task with a positive delay hands it to the delayed task manager
and returns False, as there is no way to know yet whether it will be queued.
"""

from __future__ import annotations

import weakref
from typing import Any

from taskbase.delayed_task_manager import DelayedTask, DelayedTaskManager
from taskbase.message_pump import MessagePump, PendingTask
from taskbase.sequence import SequenceId, is_current_sequence
from taskbase.task_runner import (
    SequencedTaskRunner,
    SingleThreadTaskRunner,
    SourceLocation,
    TaskRunner,
)
from taskbase.timing import TimeDelta, TimeTicks


def _weak_pump(pump: Any) -> weakref.ref | None:
    if pump is None or isinstance(pump, weakref.ref):
        return pump
    return weakref.ref(pump)


def _require_manager(manager: DelayedTaskManager | None) -> DelayedTaskManager:
    if manager is None:
        raise ValueError("a delayed task manager is required")
    return manager


def _post(
    task: Any,
    delay: TimeDelta,
    manager: DelayedTaskManager,
    pump_ref: weakref.ref | None,
    target: Any = None,
    sequence_id: SequenceId | None = None,
    executor_id: int | None = None,
) -> bool:
    pending_task = PendingTask(task, sequence_id, executor_id, target)
    if delay.is_zero() or delay.is_negative():
        pump: MessagePump | None = pump_ref() if pump_ref is not None else None
        if pump is not None:
            return pump.queue_pending_task(pending_task)
        return False
    manager.queue_delayed_task(DelayedTask(TimeTicks.now() + delay, pump_ref, pending_task))
    return False


class TaskRunnerImpl(TaskRunner):
    """Posts tasks that any executor of the pump may run, in any order."""

    def __init__(self, pump: Any, delayed_task_manager: DelayedTaskManager) -> None:
        self._pump = _weak_pump(pump)
        self._delayed_task_manager = _require_manager(delayed_task_manager)

    def post_delayed_task(self, location: SourceLocation, task: Any, delay: TimeDelta) -> bool:
        return _post(task, delay, self._delayed_task_manager, self._pump)


class SequencedTaskRunnerImpl(SequencedTaskRunner):
    """Posts tasks of one sequence: they run one at a time, in order."""

    def __init__(
        self, pump: Any, sequence_id: SequenceId, delayed_task_manager: DelayedTaskManager
    ) -> None:
        self._pump = _weak_pump(pump)
        self._sequence_id = sequence_id
        self._delayed_task_manager = _require_manager(delayed_task_manager)

    def post_delayed_task(self, location: SourceLocation, task: Any, delay: TimeDelta) -> bool:
        return _post(
            task, delay, self._delayed_task_manager, self._pump, self, self._sequence_id
        )

    def runs_tasks_in_current_sequence(self) -> bool:
        return is_current_sequence(self._sequence_id)


class SingleThreadTaskRunnerImpl(SingleThreadTaskRunner):
    """Posts tasks of one sequence that only one executor may run."""

    def __init__(
        self,
        pump: Any,
        sequence_id: SequenceId,
        executor_id: int,
        delayed_task_manager: DelayedTaskManager,
    ) -> None:
        self._pump = _weak_pump(pump)
        self._sequence_id = sequence_id
        self._executor_id = executor_id
        self._delayed_task_manager = _require_manager(delayed_task_manager)

    def post_delayed_task(self, location: SourceLocation, task: Any, delay: TimeDelta) -> bool:
        return _post(
            task,
            delay,
            self._delayed_task_manager,
            self._pump,
            self,
            self._sequence_id,
            self._executor_id,
        )

    def runs_tasks_in_current_sequence(self) -> bool:
        return is_current_sequence(self._sequence_id)