"""Recursive working tree watcher.

Keeps one non-recursive watch on every directory of the working tree that is
neither ignored by the repository nor the root of a nested repository, adding
watches for new directories and pruning deleted ones as events arrive.
"""

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from gitwatcher.core.events import EventChannel
from gitwatcher.domain.exceptions import GitWatcherError
from gitwatcher.ports.fs import FileSystem
from gitwatcher.ports.repository import Repository
from gitwatcher.ports.watching import WatchBackend

logger = logging.getLogger(__name__)


class DirectoryTreeWatcher:
    """Maintains the set of watched working tree directories.

    Every raw event re-evaluates the touched path and then calls on_change.
    Failures on individual paths are published on the errors channel and do
    not stop the other watches.

    Args:
        root: Absolute path of the working tree root.
        repository: Repository used for ignore checks.
        backend: Directory watch backend.
        fs: File system port.
        on_change: Called after every event (usually ChangeDebouncer.notify).
        errors: Channel receiving per-path failures.
    """

    def __init__(
        self,
        root: Path,
        repository: Repository,
        backend: WatchBackend,
        fs: FileSystem,
        on_change: Callable[[], None],
        errors: EventChannel[Exception],
    ) -> None:
        self.root = root
        self._repository = repository
        self._backend = backend
        self._fs = fs
        self._on_change = on_change
        self._errors = errors
        self._watches: dict[Path, Any] = {}
        self._lock = threading.Lock()
        self._stopped = False

    @property
    def watched_paths(self) -> frozenset[Path]:
        """Snapshot of the directories currently under watch."""
        with self._lock:
            return frozenset(self._watches)

    def start(self) -> None:
        """Watch the root and, recursively, every eligible subdirectory."""
        with self._lock:
            self._stopped = False
        self._watch_tree(self.root)

    def stop(self) -> None:
        """Detach every watch and clear the watched set."""
        with self._lock:
            self._stopped = True
            handles = list(self._watches.values())
            self._watches.clear()
        for handle in handles:
            self._backend.unschedule(handle)

    def handle_event(self, path: Path) -> None:
        """Process one raw filesystem event for a watched directory.

        Args:
            path: Absolute path of the entry the event touched.
        """
        logger.debug(f"File changed: {path}")
        self._remove_watch_if_necessary(path)
        if self._is_eligible(path):
            self._watch_tree(path)
        self._on_change()

    def _watch_tree(self, start: Path) -> None:
        pending = [start]
        while pending:
            directory = pending.pop()
            if not self._watch_dir(directory):
                continue
            try:
                children = self._fs.list_dir(directory)
            except OSError as e:
                self._report(e, directory)
                continue
            pending.extend(child for child in children if self._is_eligible(child))

    def _watch_dir(self, directory: Path) -> bool:
        """Register a watch on directory; return False if nothing was added."""
        with self._lock:
            if self._stopped or directory in self._watches:
                return False
        try:
            handle = self._backend.schedule(directory, self.handle_event)
        except OSError as e:
            self._report(e, directory)
            return False

        with self._lock:
            duplicate = self._stopped or directory in self._watches
            if not duplicate:
                self._watches[directory] = handle
        if duplicate:
            self._backend.unschedule(handle)
            return False
        logger.debug(f"Watching directory: {directory}")
        return True

    def _is_eligible(self, path: Path) -> bool:
        """Whether path is an unwatched, non-ignored, non-nested directory."""
        with self._lock:
            if path in self._watches:
                return False
        try:
            if not self._fs.is_dir(path):
                return False
            if self._is_nested_repository(path):
                return False
            relative_path = self._repository.relativize(str(path))
            if self._repository.is_ignored(relative_path):
                logger.debug(f"Ignoring path: {path}")
                return False
        except (OSError, GitWatcherError) as e:
            self._report(e, path)
            return False
        return True

    def _is_nested_repository(self, path: Path) -> bool:
        return path != self.root and self._fs.exists(path / ".git")

    def _remove_watch_if_necessary(self, path: Path) -> None:
        if self._fs.exists(path):
            return
        with self._lock:
            removed = [
                watched
                for watched in self._watches
                if watched == path or path in watched.parents
            ]
            handles = [self._watches.pop(watched) for watched in removed]
        for watched, handle in zip(removed, handles):
            logger.debug(f"Removing from watch list: {watched}")
            self._backend.unschedule(handle)

    def _report(self, error: Exception, path: Path) -> None:
        logger.warning(f"Cannot watch {path}: {error}")
        self._errors.publish(error)
