import gc
import weakref

import pytest

from taskbase.bind import (
    bind_once,
    bind_repeating,
    ignore_result,
    owned,
    owned_ref,
    retained_ref,
    unretained,
)
from taskbase.callback import CallbackError, OnceCallback, RepeatingCallback
from taskbase.weak_ptr import WeakPtrFactory


class Counter:
    def __init__(self):
        self.count = 0

    def add(self, amount):
        self.count += amount
        return self.count


def collect(a, b, c):
    return (a, b, c)


def test_bind_once_bound_arguments_come_first():
    callback = bind_once(collect, "x", "y")
    assert callback.run("z") == ("x", "y", "z")


def test_bind_once_runs_only_once():
    callback = bind_once(collect, 1, 2, 3)
    assert callback.run() == (1, 2, 3)
    assert not callback
    with pytest.raises(CallbackError):
        callback.run()


def test_bind_repeating_runs_many_times():
    counter = Counter()
    callback = bind_repeating(Counter.add, unretained(counter), 2)
    callback.run()
    callback.run()
    callback.run()
    assert counter.count == 6
    assert bool(callback) is True


def test_bind_too_many_arguments_raises():
    with pytest.raises(TypeError):
        bind_once(collect, 1, 2, 3, 4)
    with pytest.raises(TypeError):
        bind_repeating(lambda: None, 1)


def test_bind_non_callable_raises():
    with pytest.raises(TypeError):
        bind_once(42)


def test_bind_repeating_rejects_once_callback():
    with pytest.raises(TypeError):
        bind_repeating(OnceCallback(lambda: None))


def test_bind_once_takes_over_once_callback():
    inner = OnceCallback(lambda a, b: a + b)
    callback = bind_once(inner, 10)
    assert not inner
    assert callback.run(5) == 15


def test_bind_repeating_of_repeating_callback():
    inner = RepeatingCallback(lambda a, b: a * b)
    callback = bind_repeating(inner, 3)
    assert callback.run(4) == 12
    assert callback.run(5) == 15
    assert inner.run(2, 2) == 4


def test_retained_ref_passes_instance():
    counter = Counter()
    callback = bind_once(Counter.add, retained_ref(counter))
    assert callback.run(7) == 7
    assert counter.count == 7


def test_owned_keeps_instance_alive_until_callback_dropped():
    counter = Counter()
    ref = weakref.ref(counter)
    callback = bind_repeating(Counter.add, owned(counter))
    del counter
    gc.collect()
    assert ref() is not None
    assert callback.run(1) == 1
    assert callback.run(1) == 2
    del callback
    gc.collect()
    assert ref() is None


def test_owned_ref_state_persists_and_original_untouched():
    def append(items, value):
        items.append(value)
        return list(items)

    original = []
    callback = bind_repeating(append, owned_ref(original))
    assert callback.run("a") == ["a"]
    assert callback.run("b") == ["a", "b"]
    assert original == []


def test_weak_ptr_instance_skips_call_after_invalidation():
    counter = Counter()
    factory = WeakPtrFactory(counter)
    callback = bind_repeating(Counter.add, factory.get_weak_ptr(), 1)
    assert callback.run() == 1
    factory.invalidate_weak_ptrs()
    assert callback.run() is None
    assert counter.count == 1


def test_weak_ptr_not_first_is_passed_through():
    counter = Counter()
    factory = WeakPtrFactory(counter)
    pointer = factory.get_weak_ptr()
    callback = bind_once(lambda a, p: (a, p.get()), 1, pointer)
    assert callback.run() == (1, counter)


def test_ignore_result_discards_return_value():
    calls = []

    def work(value):
        calls.append(value)
        return value

    callback = bind_once(ignore_result(work), "v")
    assert callback.run() is None
    assert calls == ["v"]


def test_ignore_result_checks_arity_of_wrapped():
    with pytest.raises(TypeError):
        bind_once(ignore_result(lambda a: a), 1, 2)


def test_ignore_result_rejects_non_callable():
    with pytest.raises(TypeError):
        ignore_result("not callable")


def test_bind_with_no_arguments_forwards_run_arguments():
    callback = bind_repeating(collect)
    assert callback.run(1, 2, 3) == (1, 2, 3)
    assert callback.run("a", "b", "c") == ("a", "b", "c")