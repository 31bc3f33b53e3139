"""Status assembly.

Builds one Status snapshot: lists the changed files, classifies each file's
content and, for text files, builds the staged and unstaged diffs. Files are
processed concurrently; each file's own pipeline (classify, then diff) is
sequential. The first failure aborts the whole build.
"""

import logging
import mimetypes
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from gitwatcher.core.diff.binary import SCAN_WINDOW, is_binary
from gitwatcher.core.diff.hunk_builder import DiffHunkBuilder, split_lines
from gitwatcher.domain.config import DiffConfig
from gitwatcher.domain.entities import (
    ChangedFile,
    EditChange,
    FileChange,
    FileInfo,
    Hunk,
    ItemType,
    Status,
)
from gitwatcher.ports.fs import FileSystem
from gitwatcher.ports.repository import Repository
from gitwatcher.ports.status_parser import StatusParser

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def _decode(content: bytes | None) -> str:
    # Same decoding as the working tree side, so unchanged lines compare equal
    return (content or b"").decode("utf-8", errors="surrogateescape")


def _sort_key(change: FileChange) -> str:
    return change.name


class StatusAssembler:
    """Assembles diff-annotated status snapshots of a working tree.

    Args:
        root: Absolute path of the working tree root.
        repository: Repository for blobs and edit scripts.
        status_parser: Enumerates changed files.
        fs: File system port for working tree reads.
        diff_config: Context size and whitespace handling.
        max_workers: Upper bound of files processed concurrently.
    """

    def __init__(
        self,
        root: Path,
        repository: Repository,
        status_parser: StatusParser,
        fs: FileSystem,
        diff_config: DiffConfig | None = None,
        max_workers: int = 8,
    ) -> None:
        self.root = root
        self._repository = repository
        self._status_parser = status_parser
        self._fs = fs
        self.diff_config = diff_config or DiffConfig()
        self.max_workers = max_workers
        self._builder = DiffHunkBuilder(self.diff_config.context_lines)

    def build(self) -> Status:
        """Build a fresh status snapshot.

        Returns:
            Status with both lists sorted by file name. Branch and log are
            left unset.

        Raises:
            GitWatcherError: If a collaborator call fails.
            OSError: If a working tree read fails.
        """
        changed_files = self._status_parser.list_changed_files()
        unstaged: list[FileChange] = []
        staged: list[FileChange] = []

        if changed_files:
            workers = min(self.max_workers, len(changed_files))
            with ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="gitwatcher-status"
            ) as executor:
                futures = [executor.submit(self._process_file, f) for f in changed_files]
                try:
                    for future in as_completed(futures):
                        unstaged_change, staged_change = future.result()
                        if unstaged_change is not None:
                            unstaged.append(unstaged_change)
                        if staged_change is not None:
                            staged.append(staged_change)
                except BaseException:
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise

        unstaged.sort(key=_sort_key)
        staged.sort(key=_sort_key)
        logger.debug(
            f"Built status of {self.root}: {len(unstaged)} unstaged, {len(staged)} staged"
        )
        return Status(unstaged=tuple(unstaged), staged=tuple(staged))

    def _process_file(
        self, changed_file: ChangedFile
    ) -> tuple[FileChange | None, FileChange | None]:
        """Run the classify-then-diff pipeline of one file.

        Returns:
            (unstaged entry, staged entry); None for a side the file is not on.
        """
        name = changed_file.name
        path = self.root / name
        item_type = self._get_item_type(path)
        info = self._get_file_info(name, path)

        needs_diff = item_type is ItemType.FILE and info is not None and not info.is_binary
        unstaged_diff = None
        staged_diff = None
        if needs_diff and changed_file.unstaged:
            unstaged_diff = self._get_unstaged_diff(name, path, changed_file.staged)
        if needs_diff and changed_file.staged:
            staged_diff = self._get_staged_diff(name)

        summary = None
        if item_type is ItemType.SUBMODULE:
            summary = self._status_parser.get_submodule_summary(name)

        def make_change(status: str | None, diff: tuple[Hunk, ...] | None) -> FileChange:
            return FileChange(
                name=name,
                path=path,
                item_type=item_type,
                status=status or "",
                diff=diff,
                staged=changed_file.staged,
                unstaged=changed_file.unstaged,
                unmerged=changed_file.unmerged,
                summary=summary or None,
                info=info,
            )

        unstaged_change = (
            make_change(changed_file.unstaged_status, unstaged_diff)
            if changed_file.unstaged
            else None
        )
        staged_change = (
            make_change(changed_file.staged_status, staged_diff)
            if changed_file.staged
            else None
        )
        return unstaged_change, staged_change

    def _get_item_type(self, path: Path) -> ItemType:
        if self._fs.exists(path / ".git"):
            return ItemType.SUBMODULE
        return ItemType.FILE

    def _get_latest_contents(self, name: str, path: Path) -> bytes | None:
        """Read the start of the working tree file, or its HEAD blob if deleted.

        Returns:
            Up to SCAN_WINDOW bytes, or None for directories.
        """
        if self._fs.exists(path):
            if self._fs.is_dir(path):
                return None
            try:
                return self._fs.read_prefix(path, SCAN_WINDOW)
            except FileNotFoundError:
                logger.debug(f"{path} disappeared while reading, using HEAD blob")
        return (self._repository.get_head_blob(name) or b"")[:SCAN_WINDOW]

    def _get_file_info(self, name: str, path: Path) -> FileInfo | None:
        contents = self._get_latest_contents(name, path)
        if contents is None:
            return None
        mime_type = mimetypes.guess_type(path.name)[0] or DEFAULT_MIME_TYPE
        return FileInfo(is_binary=is_binary(contents), mime_type=mime_type)

    def _get_staged_diff(self, name: str) -> tuple[Hunk, ...] | None:
        """Diff the index blob against the HEAD blob."""
        new_contents = _decode(self._repository.get_index_blob(name))
        old_contents = _decode(self._repository.get_head_blob(name))
        edit_script = self._repository.compute_edit_script(
            name,
            new_contents,
            use_index=False,
            ignore_eol_whitespace=self.diff_config.ignore_eol_whitespace,
        )
        return self._build_hunks(edit_script, old_contents, new_contents)

    def _get_unstaged_diff(
        self, name: str, path: Path, is_staged: bool
    ) -> tuple[Hunk, ...] | None:
        """Diff the working tree file against the index (if staged) or HEAD."""
        if self._fs.exists(path) and not self._fs.is_dir(path):
            new_contents = self._fs.read_text(path)
        else:
            new_contents = ""
        if is_staged:
            old_contents = _decode(self._repository.get_index_blob(name))
        else:
            old_contents = _decode(self._repository.get_head_blob(name))
        edit_script = self._repository.compute_edit_script(
            name,
            new_contents,
            use_index=is_staged,
            ignore_eol_whitespace=self.diff_config.ignore_eol_whitespace,
        )
        return self._build_hunks(edit_script, old_contents, new_contents)

    def _build_hunks(
        self, edit_script: list[EditChange] | None, old_contents: str, new_contents: str
    ) -> tuple[Hunk, ...] | None:
        hunks = self._builder.build(
            edit_script, split_lines(old_contents), split_lines(new_contents)
        )
        return tuple(hunks) if hunks is not None else None
