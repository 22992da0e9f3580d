import threading

import pytest

from taskbase.message_loop import MessageLoop, MessageLoopImpl
from taskbase.message_pump import MessagePumpImpl, PendingTask
from taskbase.sequence import current_sequence_id, is_current_sequence, next_sequence_id
from taskbase.task_runner import SequencedTaskRunner, SequencedTaskRunnerHandle


class _StubRunner(SequencedTaskRunner):
    def __init__(self, sequence_id):
        self.sequence_id = sequence_id

    def post_delayed_task(self, location, task, delay):
        return False

    def runs_tasks_in_current_sequence(self):
        return is_current_sequence(self.sequence_id)


def _make_loop():
    pump = MessagePumpImpl(1)
    return pump, MessageLoopImpl(0, pump)


def test_message_loop_is_abstract():
    with pytest.raises(TypeError):
        MessageLoop()


def test_run_once_runs_a_queued_task():
    pump, loop = _make_loop()
    ran = []
    pump.queue_pending_task(PendingTask(lambda: ran.append("done")))
    assert loop.run_once() is True
    assert ran == ["done"]


def test_run_until_idle_after_stop_runs_tasks_in_order():
    pump, loop = _make_loop()
    ran = []
    for index in range(3):
        pump.queue_pending_task(PendingTask(lambda index=index: ran.append(index)))
    loop.stop(PendingTask())
    loop.run_until_idle()
    assert ran == [0, 1, 2]
    assert loop.run_once() is False


def test_run_after_stop_runs_last_task_after_pending_ones():
    pump, loop = _make_loop()
    ran = []
    pump.queue_pending_task(PendingTask(lambda: ran.append("first")))
    loop.stop(PendingTask(lambda: ran.append("last")))
    loop.run()
    assert ran == ["first", "last"]


def test_stopped_loop_rejects_new_tasks():
    pump, loop = _make_loop()
    loop.stop(PendingTask())
    assert pump.queue_pending_task(PendingTask(lambda: None)) is False


def test_sequenced_task_runs_with_sequence_and_handle():
    pump, loop = _make_loop()
    sequence_id = next_sequence_id()
    runner = _StubRunner(sequence_id)
    seen = {}

    def task():
        seen["sequence"] = current_sequence_id()
        seen["runner"] = SequencedTaskRunnerHandle.get()

    pump.queue_pending_task(PendingTask(task, sequence_id, None, runner))
    assert loop.run_once() is True
    assert seen["sequence"] == sequence_id
    assert seen["runner"] is runner
    assert current_sequence_id() is None
    assert SequencedTaskRunnerHandle.is_set() is False


def test_unsequenced_task_runs_outside_any_sequence():
    pump, loop = _make_loop()
    seen = {}

    def task():
        seen["sequence"] = current_sequence_id()
        seen["handle"] = SequencedTaskRunnerHandle.is_set()

    pump.queue_pending_task(PendingTask(task))
    assert loop.run_once() is True
    assert seen == {"sequence": None, "handle": False}


def test_run_processes_tasks_until_stopped():
    pump, loop = _make_loop()
    worker = threading.Thread(target=loop.run, daemon=True)
    worker.start()
    done = threading.Event()
    pump.queue_pending_task(PendingTask(done.set))
    assert done.wait(5)
    loop.stop(PendingTask())
    worker.join(5)
    assert not worker.is_alive()