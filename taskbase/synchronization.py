"""Waitable events and a helper that signals one when a block exits."""

from __future__ import annotations

import threading
from enum import Enum


class ResetPolicy(Enum):
    """When a signaled event returns to the not-signaled state.

    ``MANUAL`` events stay signaled until :meth:`WaitableEvent.reset` is called.
    ``AUTOMATIC`` events reset as soon as one waiter has observed the signal.
    """

    MANUAL = "manual"
    AUTOMATIC = "automatic"


class InitialState(Enum):
    """Whether an event starts out signaled."""

    SIGNALED = "signaled"
    NOT_SIGNALED = "not_signaled"


class WaitableEvent:
    """An event that threads can signal and wait on."""

    def __init__(
        self,
        reset_policy: ResetPolicy = ResetPolicy.MANUAL,
        initial_state: InitialState = InitialState.NOT_SIGNALED,
    ) -> None:
        self._reset_policy = reset_policy
        self._signaled = initial_state is InitialState.SIGNALED
        self._condition = threading.Condition()

    def reset(self) -> None:
        """Put the event into the not-signaled state."""
        with self._condition:
            self._signaled = False

    def signal(self) -> None:
        """Put the event into the signaled state, waking waiters."""
        with self._condition:
            self._signaled = True
            self._condition.notify_all()

    def is_signaled(self) -> bool:
        """Return whether the event is signaled.

        For an automatically resetting event this consumes the signal.
        """
        with self._condition:
            return self._consume_locked()

    def wait(self) -> None:
        """Block until the event is signaled."""
        with self._condition:
            self._condition.wait_for(self._consume_locked)

    def _consume_locked(self) -> bool:
        signaled = self._signaled
        if signaled and self._reset_policy is ResetPolicy.AUTOMATIC:
            self._signaled = False
        return signaled


class AutoSignaller:
    """Signals an event when the ``with`` block exits, unless cancelled."""

    def __init__(self, event: WaitableEvent) -> None:
        if event is None:
            raise TypeError("AutoSignaller needs an event to signal")
        self._event: WaitableEvent | None = event

    def __enter__(self) -> "AutoSignaller":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.signal_and_reset()

    def signal_and_reset(self) -> None:
        """Signal the event now and forget it."""
        event, self._event = self._event, None
        if event is not None:
            event.signal()

    def cancel(self) -> None:
        """Forget the event without signaling it."""
        self._event = None