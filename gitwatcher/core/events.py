"""Typed notification channels.

Watchers publish to explicit channels (change, merge, error) and consumers
subscribe handlers to the ones they care about.
"""

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventChannel(Generic[T]):
    """A thread-safe publish/subscribe channel for one payload type.

    Handlers run synchronously on the publishing thread, in subscription
    order. A failing handler is logged and does not prevent the remaining
    handlers from receiving the payload.

    Args:
        name: Channel name used in log messages.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: list[Callable[[T], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: Callable[[T], None]) -> Callable[[], None]:
        """Register a handler.

        Args:
            handler: Called with every published payload.

        Returns:
            A function that removes the handler again.
        """
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    def publish(self, payload: T) -> None:
        """Deliver a payload to every subscribed handler."""
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                logger.exception(f"Handler for '{self.name}' event failed")

    def clear(self) -> None:
        """Remove every handler."""
        with self._lock:
            self._handlers.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)
