"""
Timer scheduling for debounced autosave.

EditSession only needs "call this later, unless cancelled". ThreadingScheduler does
that with real timers; tests pass a scheduler they advance by hand.
"""

import threading
from typing import Callable

from typing_extensions import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay seconds; the handle cancels it."""
        ...


class ThreadingScheduler:
    """Scheduler backed by daemon threading.Timer objects."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer
