"""Git control directory watcher.

Watches the handful of files in the repository control directory whose
changes mean the index, HEAD or merge state moved, and reports merges in
progress.
"""

import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

from gitwatcher.core.events import EventChannel
from gitwatcher.domain.entities import MergeNotice
from gitwatcher.domain.exceptions import ControlDirectoryError
from gitwatcher.ports.fs import FileSystem
from gitwatcher.ports.watching import WatchBackend

logger = logging.getLogger(__name__)

MERGE_MSG = "MERGE_MSG"

# Control files whose changes affect the status snapshot
WATCHED_CONTROL_FILES = frozenset(
    {"index", "HEAD", "COMMIT_EDITMSG", "ORIG_HEAD", MERGE_MSG, "MERGE_HEAD"}
)

_GITDIR_LINE = re.compile(r"^gitdir:\s*(.+)$")


def read_gitdir_pointer(git_file: Path, root: Path, fs: FileSystem) -> Path:
    """Resolve the control directory a ``.git`` file points to.

    Submodules (and worktrees) replace the ``.git`` directory with a file
    containing a single ``gitdir: <path>`` line, relative to the root.

    Args:
        git_file: Path of the ``.git`` file.
        root: Working tree root the pointer is relative to.
        fs: File system port.

    Returns:
        Absolute path of the referenced control directory.

    Raises:
        ControlDirectoryError: If the file does not contain a gitdir line.
        OSError: If the file cannot be read.
    """
    contents = fs.read_text(git_file).strip()
    match = _GITDIR_LINE.match(contents)
    if match is None:
        raise ControlDirectoryError(
            f"Unrecognized .git file at {git_file}",
            hint="Expected a single 'gitdir: <path>' line",
        )
    return (root / match.group(1).strip()).resolve()


class GitMetadataWatcher:
    """Watches index/HEAD/merge control files of one repository.

    Args:
        root: Working tree root.
        backend: Directory watch backend.
        fs: File system port.
        on_change: Called for every relevant control file change, after the
            index has been marked stale through on_index_stale.
        on_index_stale: Called before on_change to request an index refresh.
        merges: Channel receiving merge-in-progress notices.
        errors: Channel receiving failures to set up the watch.
    """

    def __init__(
        self,
        root: Path,
        backend: WatchBackend,
        fs: FileSystem,
        on_change: Callable[[], None],
        on_index_stale: Callable[[], None],
        merges: EventChannel[MergeNotice],
        errors: EventChannel[Exception],
    ) -> None:
        self.root = root
        self._backend = backend
        self._fs = fs
        self._on_change = on_change
        self._on_index_stale = on_index_stale
        self._merges = merges
        self._errors = errors
        self._handle: Any = None
        self.control_dir: Path | None = None

    def resolve_control_dir(self) -> Path:
        """Find the control directory of the repository.

        Returns:
            ``<root>/.git`` if it is a directory, otherwise the directory its
            gitdir pointer references.

        Raises:
            ControlDirectoryError: If the pointer file is malformed.
            OSError: If ``.git`` is missing or unreadable.
        """
        git_path = self.root / ".git"
        if self._fs.is_dir(git_path):
            return git_path
        if not self._fs.exists(git_path):
            raise FileNotFoundError(f"No .git entry in {self.root}")
        return read_gitdir_pointer(git_path, self.root, self._fs)

    def start(self) -> None:
        """Resolve the control directory and start watching it.

        Failures are published on the errors channel.
        """
        try:
            self.control_dir = self.resolve_control_dir()
            self._handle = self._backend.schedule(self.control_dir, self.handle_event)
        except (OSError, ControlDirectoryError) as e:
            logger.warning(f"Cannot watch repository metadata of {self.root}: {e}")
            self._errors.publish(e)
            return
        logger.debug(f"Watching repository: {self.control_dir}")

    def stop(self) -> None:
        """Detach the control directory watch."""
        if self._handle is not None:
            self._backend.unschedule(self._handle)
            self._handle = None

    def handle_event(self, path: Path) -> None:
        """Process one raw event inside the control directory."""
        if path.name not in WATCHED_CONTROL_FILES:
            return
        logger.debug(f"Git file changed: {path}")
        if path.name == MERGE_MSG:
            self._emit_merge_if_necessary(path)
        self._on_index_stale()
        self._on_change()

    def _emit_merge_if_necessary(self, merge_msg_file: Path) -> None:
        try:
            contents = self._fs.read_text(merge_msg_file)
        except OSError:
            # Merge message removed again (merge committed or aborted)
            return
        message = contents.strip()
        if message:
            self._merges.publish(MergeNotice(msg=message))
