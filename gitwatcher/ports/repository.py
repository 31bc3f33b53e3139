"""Repository port interface.

Defines the read-mostly view of a git repository the status pipeline needs:
ignore rules, blob contents and line-level edit scripts.
"""

from typing import Protocol

from gitwatcher.domain.entities import EditChange


class Repository(Protocol):
    """Protocol for repository queries (ignore rules, blobs, edit scripts).

    Implementations must be safe under concurrent reads. refresh_index() is
    the only mutation and callers serialize it against status builds.
    """

    def relativize(self, path: str) -> str:
        """Convert an absolute path to a path relative to the repository root.

        Args:
            path: Absolute filesystem path.

        Returns:
            POSIX-style path relative to the root, or the input unchanged if
            it lies outside the repository.
        """
        ...

    def is_ignored(self, relpath: str) -> bool:
        """Check whether a repository-relative path is ignored.

        Args:
            relpath: Path relative to the repository root.

        Returns:
            True if ignore rules (or the control directory) exclude the path.
        """
        ...

    def get_head_blob(self, relpath: str) -> bytes | None:
        """Get file content as committed in HEAD.

        Returns:
            Blob content, or None if the path is not in HEAD.
        """
        ...

    def get_index_blob(self, relpath: str) -> bytes | None:
        """Get file content as recorded in the index.

        Returns:
            Blob content, or None if the path is not in the index.
        """
        ...

    def compute_edit_script(
        self,
        relpath: str,
        content: str,
        use_index: bool = False,
        ignore_eol_whitespace: bool = False,
    ) -> list[EditChange] | None:
        """Compute the line edit script from a baseline blob to content.

        Args:
            relpath: Path relative to the repository root.
            content: New content to compare.
            use_index: Compare against the index blob instead of HEAD.
            ignore_eol_whitespace: Ignore whitespace changes at end of line.

        Returns:
            Ordered list of changes, or None if the baseline has no such file.
        """
        ...

    def refresh_index(self) -> None:
        """Refresh cached stat information of the index."""
        ...
