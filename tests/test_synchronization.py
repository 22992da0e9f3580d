import threading

import pytest

from taskbase.synchronization import (
    AutoSignaller,
    InitialState,
    ResetPolicy,
    WaitableEvent,
)


def test_default_event_starts_not_signaled():
    event = WaitableEvent()
    assert event.is_signaled() is False


def test_manual_event_stays_signaled_until_reset():
    event = WaitableEvent(ResetPolicy.MANUAL)
    event.signal()
    assert event.is_signaled() is True
    assert event.is_signaled() is True
    event.reset()
    assert event.is_signaled() is False


def test_automatic_event_resets_after_observation():
    event = WaitableEvent(ResetPolicy.AUTOMATIC)
    event.signal()
    assert event.is_signaled() is True
    assert event.is_signaled() is False


def test_initially_signaled_event():
    event = WaitableEvent(ResetPolicy.MANUAL, InitialState.SIGNALED)
    assert event.is_signaled() is True


def test_wait_on_signaled_manual_event_keeps_signal():
    event = WaitableEvent(ResetPolicy.MANUAL, InitialState.SIGNALED)
    event.wait()
    assert event.is_signaled() is True


def test_wait_on_automatic_event_consumes_signal():
    event = WaitableEvent(ResetPolicy.AUTOMATIC, InitialState.SIGNALED)
    event.wait()
    assert event.is_signaled() is False


def test_wait_returns_after_signal_from_other_thread():
    event = WaitableEvent()
    started = threading.Event()
    finished = []

    def waiter():
        started.set()
        event.wait()
        finished.append(True)

    thread = threading.Thread(target=waiter)
    thread.start()
    started.wait()
    event.signal()
    thread.join(timeout=5)
    assert finished == [True]
    assert not thread.is_alive()
    assert event.is_signaled() is True


def test_auto_signaller_signals_on_exit():
    event = WaitableEvent()
    with AutoSignaller(event):
        assert event.is_signaled() is False
    assert event.is_signaled() is True


def test_auto_signaller_cancel_prevents_signal():
    event = WaitableEvent()
    with AutoSignaller(event) as signaller:
        signaller.cancel()
    assert event.is_signaled() is False


def test_signal_and_reset_signals_only_once():
    event = WaitableEvent(ResetPolicy.AUTOMATIC)
    with AutoSignaller(event) as signaller:
        signaller.signal_and_reset()
        assert event.is_signaled() is True
    assert event.is_signaled() is False


def test_auto_signaller_signals_when_block_raises():
    event = WaitableEvent()
    with pytest.raises(KeyError):
        with AutoSignaller(event):
            raise KeyError("boom")
    assert event.is_signaled() is True


def test_auto_signaller_rejects_none():
    with pytest.raises(TypeError):
        AutoSignaller(None)