import threading

import pytest

from taskbase.barrier import barrier_callback, barrier_closure
from taskbase.callback import CallbackError, OnceCallback


def test_barrier_callback_collects_in_order():
    results = []
    barrier = barrier_callback(3, results.append)
    barrier.run("a")
    barrier.run("b")
    assert results == []
    barrier.run("c")
    assert results == [["a", "b", "c"]]


def test_barrier_callback_zero_runs_immediately():
    results = []
    barrier = barrier_callback(0, OnceCallback(results.append))
    assert results == [[]]
    assert bool(barrier) is False


def test_barrier_callback_overrun_raises():
    results = []
    barrier = barrier_callback(1, results.append)
    barrier.run("a")
    with pytest.raises(CallbackError):
        barrier.run("b")
    assert results == [["a"]]


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        barrier_callback(-1, print)
    with pytest.raises(ValueError):
        barrier_closure(-1, print)


def test_barrier_callback_from_threads():
    results = []
    count = 50
    barrier = barrier_callback(count, results.append)
    threads = [threading.Thread(target=barrier.run, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(results) == 1
    assert sorted(results[0]) == list(range(count))


def test_barrier_closure_fires_on_last_run():
    calls = []
    closure = barrier_closure(2, lambda: calls.append("done"))
    closure.run()
    assert calls == []
    closure.run()
    assert calls == ["done"]


def test_barrier_closure_zero_runs_immediately():
    calls = []
    closure = barrier_closure(0, lambda: calls.append("done"))
    assert calls == ["done"]
    assert bool(closure) is False


def test_barrier_closure_overrun_raises():
    calls = []
    closure = barrier_closure(1, lambda: calls.append("done"))
    closure.run()
    with pytest.raises(CallbackError):
        closure.run()
    assert calls == ["done"]