"""Watch backend built on watchdog.

Every watched directory gets its own non-recursive watch, so ignored
subtrees never cost an OS watch handle.
"""

import logging
import os
import threading
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import ObservedWatch

from gitwatcher.ports.watching import EventCallback

logger = logging.getLogger(__name__)

# Open/close events fire on plain reads (including git's own) and are skipped
RELEVANT_EVENT_TYPES = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED}
)

OBSERVER_JOIN_TIMEOUT = 5.0


class _CallbackHandler(FileSystemEventHandler):
    """Forwards the paths touched by an event to one callback."""

    def __init__(self, callback: EventCallback) -> None:
        super().__init__()
        self._callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in RELEVANT_EVENT_TYPES:
            return
        self._callback(Path(os.fsdecode(event.src_path)))
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            self._callback(Path(os.fsdecode(dest_path)))


class WatchdogBackend:
    """WatchBackend adapter running one watchdog Observer.

    Callbacks run on the observer thread. Watches may be scheduled before
    start(); a stopped backend can be started again.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._observer = Observer()
        self._started = False

    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self._observer.start()
            self._started = True

    def stop(self) -> None:
        with self._lock:
            observer = self._observer
            started = self._started
            self._observer = Observer()
            self._started = False
        observer.unschedule_all()
        if started:
            observer.stop()
            observer.join(timeout=OBSERVER_JOIN_TIMEOUT)

    def schedule(self, path: Path, callback: EventCallback) -> ObservedWatch:
        """Watch the direct children of path.

        Raises:
            OSError: If the directory cannot be watched.
        """
        with self._lock:
            observer = self._observer
        return observer.schedule(_CallbackHandler(callback), str(path), recursive=False)

    def unschedule(self, handle: ObservedWatch) -> None:
        with self._lock:
            observer = self._observer
        try:
            observer.unschedule(handle)
        except KeyError:
            # Already gone, e.g. the backend was stopped meanwhile
            logger.debug(f"Watch already removed: {handle.path}")
