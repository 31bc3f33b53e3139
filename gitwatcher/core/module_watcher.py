"""Module watcher: live status of one working tree.

Wires the tree and metadata watchers to the debouncer and the status
assembler, and publishes results on the change, merge and error channels.

Refresh cycles and forced status builds are serialized under one build lock,
so the index refresh always happens before (never during) a status build and
consumers observe results in the order they were built.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path

from gitwatcher.core.events import EventChannel
from gitwatcher.core.status.history import parse_branch, parse_commit_log
from gitwatcher.core.status.status_assembler import StatusAssembler
from gitwatcher.core.use_case_errors import log_use_case_error
from gitwatcher.core.watching.debouncer import ChangeDebouncer
from gitwatcher.core.watching.git_metadata_watcher import GitMetadataWatcher
from gitwatcher.core.watching.timer import CancellableTimer
from gitwatcher.core.watching.tree_watcher import DirectoryTreeWatcher
from gitwatcher.domain.config import GitWatcherConfig
from gitwatcher.domain.entities import Branch, CommitEntry, MergeNotice, Status
from gitwatcher.ports.fs import FileSystem
from gitwatcher.ports.history import History
from gitwatcher.ports.repository import Repository
from gitwatcher.ports.status_parser import StatusParser
from gitwatcher.ports.watching import WatchBackend

logger = logging.getLogger(__name__)


class ModuleWatcher:
    """Watches one repository (or submodule) and publishes status snapshots.

    Channels:
        changes: Status after every quiet period following a change.
        merges: MergeNotice when a merge message appears.
        errors: Per-path watch failures and failed refresh cycles.

    Args:
        root: Working tree root of the module.
        repository: Repository adapter.
        status_parser: Changed file enumeration adapter.
        history: Branch and log adapter.
        fs: File system port.
        backend: Directory watch backend, owned by this watcher.
        config: Configuration (defaults if omitted).
        timer: Debounce timer (injected in tests).
    """

    def __init__(
        self,
        root: Path,
        repository: Repository,
        status_parser: StatusParser,
        history: History,
        fs: FileSystem,
        backend: WatchBackend,
        config: GitWatcherConfig | None = None,
        timer: CancellableTimer | None = None,
    ) -> None:
        self.path = Path(root)
        self.config = config or GitWatcherConfig.default()
        self._repository = repository
        self._status_parser = status_parser
        self._history = history
        self._backend = backend

        self.changes: EventChannel[Status] = EventChannel("change")
        self.merges: EventChannel[MergeNotice] = EventChannel("merge")
        self.errors: EventChannel[Exception] = EventChannel("error")

        self._assembler = StatusAssembler(
            self.path,
            repository,
            status_parser,
            fs,
            diff_config=self.config.diff,
            max_workers=self.config.watch.max_workers,
        )
        self._debouncer = ChangeDebouncer(
            self._on_quiet_period,
            delay=self.config.watch.debounce_seconds,
            timer=timer,
        )
        self._tree_watcher = DirectoryTreeWatcher(
            self.path,
            repository,
            backend,
            fs,
            on_change=self._debouncer.notify,
            errors=self.errors,
        )
        self._metadata_watcher = GitMetadataWatcher(
            self.path,
            backend,
            fs,
            on_change=self._debouncer.notify,
            on_index_stale=self._debouncer.mark_index_stale,
            merges=self.merges,
            errors=self.errors,
        )

        self._build_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        self._running = False
        self._cycle_queued = False
        self._queued_refresh_index = False

    @property
    def running(self) -> bool:
        with self._state_lock:
            return self._running

    @property
    def watched_paths(self) -> frozenset[Path]:
        """Directories of the working tree currently under watch."""
        return self._tree_watcher.watched_paths

    def init(self) -> None:
        """Start watching the working tree and the control directory."""
        logger.info(f"Initializing module: {self.path}")
        with self._state_lock:
            self._running = True
            # close() may have cancelled a queued cycle before it ran
            self._cycle_queued = False
            self._queued_refresh_index = False
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix=f"gitwatcher-{self.get_name()}"
            )
        self._debouncer.reopen()
        self._backend.start()
        self._tree_watcher.start()
        self._metadata_watcher.start()

    def close(self) -> None:
        """Stop watching; results of in-flight refreshes are discarded."""
        logger.info(f"Closing module: {self.path}")
        with self._state_lock:
            self._running = False
            executor = self._executor
            self._executor = None
        self._debouncer.close()
        self._tree_watcher.stop()
        self._metadata_watcher.stop()
        self._backend.stop()
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)

    def get_name(self) -> str:
        return self.path.name

    def get_status(self) -> Status:
        """Build a status immediately, bypassing the debounce window.

        Returns:
            Status with branch and, if configured, the recent commit log.

        Raises:
            GitWatcherError: If any collaborator fails (no partial status).
        """
        self._debouncer.cancel()
        with self._build_lock:
            return self._build_full_status()

    def get_branch(self) -> Branch | None:
        """Query the current branch and its tracking state.

        Raises:
            GitCommandError: If the branch query fails.
        """
        return parse_branch(self._history.branch_summary())

    def get_commit_log(self) -> list[CommitEntry]:
        """Query the most recent commits.

        Raises:
            GitCommandError: If the log query fails.
        """
        return parse_commit_log(
            self._history.recent_commits(self.config.status.commit_log_limit)
        )

    def refresh_index(self) -> None:
        """Refresh the index, serialized against status builds."""
        with self._build_lock:
            self._repository.refresh_index()

    def status_changed(self) -> None:
        """Request a debounced refresh (e.g. after running a git command)."""
        self._debouncer.notify()

    def list_submodules(self) -> list[str]:
        return self._status_parser.list_submodules()

    def _build_full_status(self) -> Status:
        status = self._assembler.build()
        log = None
        if self.config.status.show_commit_log:
            log = tuple(self.get_commit_log())
        return replace(status, branch=self.get_branch(), log=log)

    def _on_quiet_period(self, refresh_index: bool) -> None:
        """Queue one refresh cycle; merges into a cycle that has not started yet."""
        with self._state_lock:
            if not self._running or self._executor is None:
                return
            self._queued_refresh_index = self._queued_refresh_index or refresh_index
            if self._cycle_queued:
                return
            self._cycle_queued = True
            self._executor.submit(self._run_refresh_cycle)

    def _run_refresh_cycle(self) -> None:
        with self._state_lock:
            self._cycle_queued = False
            refresh_index = self._queued_refresh_index
            self._queued_refresh_index = False

        try:
            with self._build_lock:
                if refresh_index:
                    self._repository.refresh_index()
                status = self._build_full_status()
        except Exception as e:
            log_use_case_error(e, "status refresh")
            if self.running:
                self.errors.publish(e)
            return

        if not self.running:
            logger.debug(f"{self.get_name()}: discarding status of closed module")
            return
        logger.debug(f"{self.get_name()}: emitting change...")
        self.changes.publish(status)
