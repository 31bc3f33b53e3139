"""Domain entities and value objects.

Core domain models representing the status snapshot gitwatcher produces.
These are pure Python dataclasses with no dependencies on infrastructure.
Sequences are stored as tuples so a Status is immutable once delivered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class LineKind(str, Enum):
    """Kind of a single diff line."""

    ADDED = "added"
    DELETED = "deleted"
    CONTEXT = "context"
    SEPARATOR = "separator"  # Elided region marker, never part of a final Hunk


class ItemType(str, Enum):
    """Kind of item a changed path refers to."""

    FILE = "file"
    SUBMODULE = "submodule"


@dataclass(frozen=True)
class EditChange:
    """One contiguous replace operation of an edit script.

    Line numbers follow unified diff conventions (1-based). A zero count means
    the change is a pure insertion (old side) or pure deletion (new side), and
    the start then refers to the line after which the change applies.

    Attributes:
        old_start: First affected line in the old sequence.
        old_line_count: Number of old lines replaced.
        new_start: First affected line in the new sequence.
        new_line_count: Number of new lines inserted.
    """

    old_start: int
    old_line_count: int
    new_start: int
    new_line_count: int

    def __post_init__(self) -> None:
        if self.old_line_count < 0 or self.new_line_count < 0:
            raise ValueError("Line counts cannot be negative")


@dataclass(frozen=True)
class DiffLine:
    """A single display line of a diff.

    Attributes:
        kind: Whether the line was added, deleted, or is unchanged context.
        old_line_number: 1-based line number in the old content, if any.
        new_line_number: 1-based line number in the new content, if any.
        content: Line text without its terminator (None for separators).
    """

    kind: LineKind
    old_line_number: int | None = None
    new_line_number: int | None = None
    content: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "old_line_number": self.old_line_number,
            "new_line_number": self.new_line_number,
            "content": self.content,
        }


# A contiguous, display-ready block of diff lines.
Hunk = tuple[DiffLine, ...]


@dataclass(frozen=True)
class FileInfo:
    """Content classification of a changed file.

    Attributes:
        is_binary: Whether the content looks binary.
        mime_type: Mime type guessed from the file name.
    """

    is_binary: bool
    mime_type: str

    def to_dict(self) -> dict[str, Any]:
        return {"is_binary": self.is_binary, "mime_type": self.mime_type}


@dataclass(frozen=True)
class ChangedFile:
    """Raw entry produced by the status parser for one changed path.

    Attributes:
        name: Path relative to the repository root (POSIX separators).
        staged: Whether the path has changes recorded in the index.
        unstaged: Whether the path has changes only in the working tree.
        unmerged: Whether the path has unresolved merge conflicts.
        staged_status: Human readable status of the staged side (e.g. "modified").
        unstaged_status: Human readable status of the unstaged side (e.g. "new").
    """

    name: str
    staged: bool = False
    unstaged: bool = False
    unmerged: bool = False
    staged_status: str | None = None
    unstaged_status: str | None = None


@dataclass(frozen=True)
class FileChange:
    """A changed file as it appears in one of the Status lists.

    Attributes:
        name: Path relative to the repository root.
        path: Absolute path of the file.
        item_type: File or submodule.
        status: Status string of the side this entry belongs to.
        diff: Display hunks, or None for binary files, submodules and
            brand-new empty files.
        staged: Whether the file also participates in the staged list.
        unstaged: Whether the file also participates in the unstaged list.
        unmerged: Whether the file has unresolved conflicts.
        summary: Submodule summary text, None for plain files.
        info: Content classification, None when it could not be determined
            (directories such as submodules).
    """

    name: str
    path: Path
    item_type: ItemType
    status: str
    diff: tuple[Hunk, ...] | None = None
    staged: bool = False
    unstaged: bool = False
    unmerged: bool = False
    summary: str | None = None
    info: FileInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": str(self.path),
            "type": self.item_type.value,
            "status": self.status,
            "diff": (
                [[line.to_dict() for line in hunk] for hunk in self.diff]
                if self.diff is not None
                else None
            ),
            "staged": self.staged,
            "unstaged": self.unstaged,
            "unmerged": self.unmerged,
            "summary": self.summary,
            "info": self.info.to_dict() if self.info else {},
        }


@dataclass(frozen=True)
class Branch:
    """Current branch and its tracking state.

    Attributes:
        name: Branch name, empty when HEAD is detached.
        remote: Upstream branch (e.g. "origin/main"), empty if none.
        ahead: Commits ahead of the upstream.
        behind: Commits behind the upstream.
    """

    name: str
    remote: str = ""
    ahead: int = 0
    behind: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "remote": self.remote,
            "ahead": self.ahead,
            "behind": self.behind,
        }


@dataclass(frozen=True)
class CommitEntry:
    """One line of the recent commit log."""

    hash: str
    subject: str

    def to_dict(self) -> dict[str, Any]:
        return {"hash": self.hash, "subject": self.subject}


@dataclass(frozen=True)
class Status:
    """Complete status snapshot of a working tree.

    Produced fresh on every refresh. Both lists are sorted by file name.

    Attributes:
        unstaged: Working tree changes.
        staged: Index changes.
        branch: Current branch, attached by the module watcher.
        log: Recent commits, attached only when configured.
    """

    unstaged: tuple[FileChange, ...] = field(default_factory=tuple)
    staged: tuple[FileChange, ...] = field(default_factory=tuple)
    branch: Branch | None = None
    log: tuple[CommitEntry, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "unstaged": [change.to_dict() for change in self.unstaged],
            "staged": [change.to_dict() for change in self.staged],
            "branch": self.branch.to_dict() if self.branch else None,
        }
        if self.log is not None:
            data["log"] = [entry.to_dict() for entry in self.log]
        return data


@dataclass(frozen=True)
class MergeNotice:
    """Notification that a merge is in progress.

    Attributes:
        msg: Trimmed content of the merge message file.
    """

    msg: str

    def to_dict(self) -> dict[str, Any]:
        return {"msg": self.msg}


@dataclass(frozen=True)
class ModuleChange:
    """Status change of one module (root repository or submodule)."""

    module: str
    status: Status

    def to_dict(self) -> dict[str, Any]:
        return {"module": self.module, "status": self.status.to_dict()}
