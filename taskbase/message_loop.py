"""Message loops that pull pending tasks from a pump and run them."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from taskbase.message_pump import MessagePump, PendingTask
from taskbase.sequence import scoped_sequence_id
from taskbase.task_runner import SequencedTaskRunnerHandle


def _run_task(pending_task: PendingTask) -> None:
    """Run a task inside its sequence, with its runner as the current handle."""
    if pending_task.sequence_id is None:
        pending_task.task.run()
        return

    runner_ref = pending_task.target_task_runner
    runner = runner_ref() if runner_ref is not None else None
    with scoped_sequence_id(pending_task.sequence_id):
        if runner is None:
            pending_task.task.run()
        else:
            with SequencedTaskRunnerHandle(runner):
                pending_task.task.run()


class MessageLoop(ABC):
    """Runs the tasks a pump hands to one executor."""

    @abstractmethod
    def run_once(self) -> bool:
        """Run one task; return False if there was none to run."""

    @abstractmethod
    def run_until_idle(self) -> None:
        """Run tasks until none is available."""

    @abstractmethod
    def run(self) -> None:
        """Run tasks until stopped, then run whatever is left."""

    @abstractmethod
    def stop(self, last_task: PendingTask) -> None:
        """Stop the loop, queueing ``last_task`` as the final task."""


class MessageLoopImpl(MessageLoop):
    """A message loop acting as executor ``executor_id`` of a pump.

    ``run_once`` blocks while the pump is running and has nothing for this
    executor.
    """

    def __init__(self, executor_id: int, message_pump: MessagePump) -> None:
        self._executor_id = executor_id
        self._pump = message_pump
        self._stopped = threading.Event()

    def run_once(self) -> bool:
        pending_task = self._pump.get_next_pending_task(self._executor_id)
        if not pending_task:
            return False
        _run_task(pending_task)
        return True

    def run_until_idle(self) -> None:
        while self.run_once():
            pass

    def run(self) -> None:
        while not self._stopped.is_set():
            self._run_until_idle_or_stop()
        self.run_until_idle()

    def stop(self, last_task: PendingTask | None = None) -> None:
        self._stopped.set()
        self._pump.stop(last_task if last_task is not None else PendingTask())

    def _run_until_idle_or_stop(self) -> None:
        while not self._stopped.is_set() and self.run_once():
            pass