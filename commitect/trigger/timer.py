"""Debounce Timer - One cancellable pending callback at a time."""

import threading
from typing import Callable


class DebounceTimer:
    """
    Holds at most one pending timer.

    schedule() cancels whatever is pending and arms a new timer, so in a
    burst of calls only the last callback ever runs. The timer factory
    is injectable so tests can fire timers by hand.
    """

    def __init__(self, timer_factory: Callable[..., threading.Timer] = threading.Timer):
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(self, delay: float, fn: Callable[[], object]) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()

            timer = None

            def fire():
                with self._lock:
                    # A newer schedule() replaced us after we were released
                    if self._pending is not timer:
                        return
                    self._pending = None
                fn()

            timer = self._timer_factory(delay, fire)
            timer.daemon = True
            self._pending = timer
            timer.start()

    def cancel_pending(self) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
