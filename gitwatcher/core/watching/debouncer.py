"""Change debouncing.

Coalesces bursts of filesystem and git metadata events into a single refresh
after a quiet period.
"""

import logging
import threading
from collections.abc import Callable

from gitwatcher.core.watching.timer import CancellableTimer

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.5


class ChangeDebouncer:
    """Triggers one refresh per quiet period.

    Every notify() (re)arms a single-shot timer. When it expires, on_quiet is
    called with whether the index was marked stale since the last expiry; the
    stale flag is consumed atomically.

    Args:
        on_quiet: Refresh callback, receives the consumed stale flag.
        delay: Quiet period in seconds.
        timer: Timer implementation (injected in tests).
    """

    def __init__(
        self,
        on_quiet: Callable[[bool], None],
        delay: float = DEFAULT_DELAY_SECONDS,
        timer: CancellableTimer | None = None,
    ) -> None:
        self._on_quiet = on_quiet
        self.delay = delay
        self._timer = timer if timer is not None else CancellableTimer()
        self._lock = threading.Lock()
        self._index_stale = False
        self._closed = False

    def notify(self) -> None:
        """Arm or re-arm the quiet period timer."""
        with self._lock:
            if self._closed:
                return
            self._timer.arm(self.delay, self._expire)

    def mark_index_stale(self) -> None:
        """Request an index refresh before the next status build."""
        with self._lock:
            self._index_stale = True

    def cancel(self) -> None:
        """Drop a pending refresh without closing the debouncer."""
        self._timer.cancel()

    def close(self) -> None:
        """Cancel the pending refresh and ignore notifications until reopen()."""
        with self._lock:
            self._closed = True
        self._timer.cancel()

    def reopen(self) -> None:
        """Accept notifications again after close(), starting from a clean slate."""
        with self._lock:
            self._closed = False
            self._index_stale = False

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def _expire(self) -> None:
        with self._lock:
            if self._closed:
                return
            refresh_index = self._index_stale
            self._index_stale = False
        logger.debug(f"Quiet period elapsed (refresh_index={refresh_index})")
        self._on_quiet(refresh_index)
