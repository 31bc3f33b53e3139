"""In-memory fakes of the gitwatcher ports.

The fakes record the calls they receive so tests can assert on the
interaction, and expose hooks to inject failures.
"""

import threading
from collections.abc import Callable
from pathlib import Path

from gitwatcher.domain.entities import ChangedFile, EditChange
from gitwatcher.domain.exceptions import GitCommandError
from gitwatcher.ports.watching import EventCallback


class ManualTimer:
    """Timer whose callback only runs when the test calls fire()."""

    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.duration: float | None = None
        self.arm_count = 0

    def arm(self, duration: float, callback: Callable[[], None]) -> None:
        self.duration = duration
        self.callback = callback
        self.arm_count += 1

    def cancel(self) -> None:
        self.callback = None

    @property
    def armed(self) -> bool:
        return self.callback is not None

    def fire(self) -> None:
        """Run the pending callback as if the quiet period elapsed."""
        callback = self.callback
        self.callback = None
        assert callback is not None, "timer is not armed"
        callback()


class FakeWatchBackend:
    """Records scheduled directories and lets tests emit raw events."""

    def __init__(self, failing_paths: set[Path] | None = None) -> None:
        self.callbacks: dict[Path, EventCallback] = {}
        self.failing_paths = failing_paths or set()
        self.started = False
        self.stopped = False
        self.unscheduled: list[Path] = []
        self._lock = threading.Lock()

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True
        with self._lock:
            self.callbacks.clear()

    def schedule(self, path: Path, callback: EventCallback) -> Path:
        if path in self.failing_paths:
            raise PermissionError(f"Permission denied: '{path}'")
        with self._lock:
            self.callbacks[path] = callback
        return path

    def unschedule(self, handle: Path) -> None:
        with self._lock:
            self.callbacks.pop(handle, None)
        self.unscheduled.append(handle)

    @property
    def watched(self) -> set[Path]:
        with self._lock:
            return set(self.callbacks)

    def emit(self, path: Path) -> None:
        """Deliver an event for path to the watch on its parent directory."""
        with self._lock:
            callback = self.callbacks[path.parent]
        callback(path)


class FakeRepository:
    """Repository fake backed by dictionaries.

    Edit scripts are looked up per (relpath, use_index); an unknown key with
    a known baseline yields an empty script.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.ignored: set[str] = set()
        self.head: dict[str, bytes] = {}
        self.index: dict[str, bytes] = {}
        self.edit_scripts: dict[tuple[str, bool], list[EditChange]] = {}
        self.failing_paths: set[str] = set()
        self.refresh_count = 0
        self.edit_script_calls: list[tuple[str, str, bool]] = []
        self.on_edit_script: Callable[[str], None] | None = None

    def relativize(self, path: str) -> str:
        try:
            relpath = Path(path).relative_to(self.root).as_posix()
        except ValueError:
            return path
        return "" if relpath == "." else relpath

    def is_ignored(self, relpath: str) -> bool:
        if ".git" in Path(relpath).parts:
            return True
        return relpath in self.ignored

    def get_head_blob(self, relpath: str) -> bytes | None:
        return self.head.get(relpath)

    def get_index_blob(self, relpath: str) -> bytes | None:
        return self.index.get(relpath)

    def compute_edit_script(
        self,
        relpath: str,
        content: str,
        use_index: bool = False,
        ignore_eol_whitespace: bool = False,
    ) -> list[EditChange] | None:
        self.edit_script_calls.append((relpath, content, use_index))
        if self.on_edit_script is not None:
            self.on_edit_script(relpath)
        if relpath in self.failing_paths:
            raise GitCommandError(f"Failed to diff '{relpath}'", returncode=128)
        baseline = self.index if use_index else self.head
        if relpath not in baseline:
            return None
        return self.edit_scripts.get((relpath, use_index), [])

    def refresh_index(self) -> None:
        self.refresh_count += 1


class FakeStatusParser:
    """StatusParser fake returning preset changed files."""

    def __init__(self, files: list[ChangedFile] | None = None) -> None:
        self.files = files or []
        self.summaries: dict[str, str] = {}
        self.submodules: list[str] = []
        self.error: Exception | None = None
        self.calls = 0

    def list_changed_files(self) -> list[ChangedFile]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.files)

    def get_submodule_summary(self, relpath: str) -> str:
        return self.summaries.get(relpath, "")

    def list_submodules(self) -> list[str]:
        return list(self.submodules)


class FakeHistory:
    """History fake returning preset raw output."""

    def __init__(self, branch_output: str = "## main\n", log_output: str = "") -> None:
        self.branch_output = branch_output
        self.log_output = log_output
        self.limits: list[int] = []

    def branch_summary(self) -> str:
        return self.branch_output

    def recent_commits(self, limit: int = 10) -> str:
        self.limits.append(limit)
        return self.log_output
