"""Cancellable single-shot timer."""

import threading
from collections.abc import Callable


class CancellableTimer:
    """A single-shot timer that can be re-armed.

    Arming an armed timer cancels the pending callback first, so at most one
    callback is pending at any time.
    """

    def __init__(self) -> None:
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def arm(self, duration: float, callback: Callable[[], None]) -> None:
        """Schedule callback after duration seconds, replacing any pending one."""
        timer = threading.Timer(duration, callback)
        timer.daemon = True
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        """Drop the pending callback, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()
