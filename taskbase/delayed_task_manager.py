"""Holds delayed tasks and hands them to their pumps once they are due."""

from __future__ import annotations

import heapq
import itertools
import threading
import weakref
from dataclasses import dataclass, field
from typing import Any, Callable

from taskbase.message_pump import PendingTask
from taskbase.timing import TimeTicks


@dataclass(eq=False)
class DelayedTask:
    """A pending task that becomes due at ``start_time``.

    ``message_pump`` is kept as a weak reference (or None); the task is
    dropped if its pump is gone when it becomes due.
    """

    start_time: TimeTicks
    message_pump: Any = None
    pending_task: PendingTask = field(default_factory=PendingTask)

    def __post_init__(self) -> None:
        pump = self.message_pump
        if pump is not None and not isinstance(pump, weakref.ref):
            self.message_pump = weakref.ref(pump)

    def __lt__(self, other: "DelayedTask") -> bool:
        if not isinstance(other, DelayedTask):
            return NotImplemented
        return self.start_time < other.start_time


def _dispatch(delayed_task: DelayedTask) -> None:
    pump_ref = delayed_task.message_pump
    pump = pump_ref() if pump_ref is not None else None
    if pump is not None:
        pump.queue_pending_task(delayed_task.pending_task)


class _Scheduler:
    """The state shared between a manager and its scheduler thread."""

    def __init__(self, clock: Callable[[], TimeTicks]) -> None:
        self._clock = clock
        self._condition = threading.Condition()
        self._stopped = False
        self._heap: list[tuple[TimeTicks, int, DelayedTask]] = []
        self._order = itertools.count()

    def queue(self, delayed_task: DelayedTask) -> None:
        with self._condition:
            if self._stopped:
                return
            if delayed_task.start_time < self._clock():
                _dispatch(delayed_task)
                return
            wake = not self._heap or delayed_task.start_time < self._heap[0][0]
            heapq.heappush(self._heap, (delayed_task.start_time, next(self._order), delayed_task))
            if wake:
                self._condition.notify_all()
            self._dispatch_ready_locked()

    def dispatch_ready(self) -> None:
        with self._condition:
            self._dispatch_ready_locked()

    def run(self) -> None:
        with self._condition:
            while not self._stopped:
                self._dispatch_ready_locked()
                self._wait_locked()

    def stop(self) -> None:
        with self._condition:
            self._stopped = True
            self._condition.notify_all()

    def _dispatch_ready_locked(self) -> None:
        while self._heap and self._heap[0][0] <= self._clock():
            _, _, delayed_task = heapq.heappop(self._heap)
            _dispatch(delayed_task)

    def _wait_locked(self) -> None:
        previous_count = len(self._heap)

        def can_resume() -> bool:
            return self._stopped or len(self._heap) != previous_count

        if self._heap:
            remaining = self._heap[0][0] - self._clock()
            self._condition.wait_for(can_resume, timeout=max(remaining.in_seconds_f(), 0.0))
        else:
            self._condition.wait_for(can_resume)


class DelayedTaskManager:
    """Runs a scheduler thread that queues delayed tasks on their pumps when due."""

    def __init__(self, time_ticks_provider: Callable[[], TimeTicks] = TimeTicks.now) -> None:
        self._scheduler = _Scheduler(time_ticks_provider)
        self._thread = threading.Thread(
            target=self._scheduler.run, name="taskbase-delayed-tasks", daemon=True
        )
        self._thread.start()

    def queue_delayed_task(self, delayed_task: DelayedTask) -> None:
        """Queue a task; one that is already overdue goes to its pump at once."""
        self._scheduler.queue(delayed_task)

    def schedule_all_ready_tasks_for_tests(self) -> None:
        self._scheduler.dispatch_ready()

    def shutdown(self) -> None:
        """Stop the scheduler thread; tasks queued afterwards are dropped."""
        self._scheduler.stop()
        if self._thread is not threading.current_thread() and self._thread.is_alive():
            self._thread.join()

    def __enter__(self) -> "DelayedTaskManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def __del__(self) -> None:
        if getattr(self, "_thread", None) is None:
            return
        try:
            self.shutdown()
        except RuntimeError:
            pass


_shared_lock = threading.Lock()
_shared_manager: weakref.ref | None = None


def get_or_create_shared_instance() -> DelayedTaskManager:
    """Return the manager in use by others, creating one if none is alive."""
    global _shared_manager
    with _shared_lock:
        manager = _shared_manager() if _shared_manager is not None else None
        if manager is None:
            manager = DelayedTaskManager()
            _shared_manager = weakref.ref(manager)
        return manager