"""Watch backend port interface.

Abstracts non-recursive directory watching so watchers can be driven by
watchdog in production and by a fake backend in tests.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

# Called with the absolute path of every entry an event touched.
EventCallback = Callable[[Path], None]


class WatchBackend(Protocol):
    """Protocol for per-directory filesystem watching."""

    def start(self) -> None:
        """Start delivering events."""
        ...

    def stop(self) -> None:
        """Stop delivering events and detach every watch."""
        ...

    def schedule(self, path: Path, callback: EventCallback) -> Any:
        """Watch the direct children of a directory.

        Args:
            path: Directory to watch (not recursive).
            callback: Invoked with the affected path of every event.

        Returns:
            Opaque handle for unschedule().

        Raises:
            OSError: If the watch cannot be registered.
        """
        ...

    def unschedule(self, handle: Any) -> None:
        """Detach a watch previously returned by schedule()."""
        ...
