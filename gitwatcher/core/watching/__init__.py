"""Watching module: filesystem and git metadata change detection.

Contains the working tree and control directory watchers and the debouncer
that turns their events into one refresh per quiet period.
"""

from gitwatcher.core.watching.debouncer import ChangeDebouncer
from gitwatcher.core.watching.git_metadata_watcher import (
    WATCHED_CONTROL_FILES,
    GitMetadataWatcher,
    read_gitdir_pointer,
)
from gitwatcher.core.watching.timer import CancellableTimer
from gitwatcher.core.watching.tree_watcher import DirectoryTreeWatcher

__all__ = [
    "CancellableTimer",
    "ChangeDebouncer",
    "DirectoryTreeWatcher",
    "GitMetadataWatcher",
    "WATCHED_CONTROL_FILES",
    "read_gitdir_pointer",
]
