"""Cancellable periodic timers for timed drills."""

import threading
from typing import Callable, Optional

from ..logger import get_logger
from .interfaces import ICountdown

logger = get_logger(__name__)

CountdownFactory = Callable[[Callable[[], None], float], ICountdown]


class Countdown(ICountdown):
    """Calls ``callback`` every ``interval`` seconds on a daemon timer thread.

    Each tick schedules the next one, so cancelling between ticks leaves no
    pending timer behind.
    """

    def __init__(self, callback: Callable[[], None], interval: float = 1.0):
        self._callback = callback
        self._interval = interval
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._running = False

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._schedule()
        logger.debug("Countdown started (interval %.2fs)", self._interval)

    def cancel(self) -> None:
        with self._lock:
            was_running = self._running
            self._running = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if was_running:
            logger.debug("Countdown cancelled")

    @property
    def is_running(self) -> bool:
        return self._running

    def _schedule(self) -> None:
        self._timer = threading.Timer(self._interval, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            if not self._running:
                return
        self._callback()
        with self._lock:
            if self._running:
                self._schedule()


class ManualCountdown(ICountdown):
    """Countdown whose ticks are driven explicitly with :meth:`fire`.

    Used by tests and by callers that own their own event loop.
    """

    def __init__(self, callback: Callable[[], None], interval: float = 1.0):
        self._callback = callback
        self.interval = interval
        self._running = False

    def start(self) -> None:
        self._running = True

    def cancel(self) -> None:
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def fire(self, times: int = 1) -> None:
        """Deliver up to ``times`` ticks, stopping early once cancelled."""
        for _ in range(times):
            if not self._running:
                return
            self._callback()
