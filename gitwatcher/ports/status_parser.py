"""Status parser port interface.

Enumerates changed files of a working tree with their per-side status.
"""

from typing import Protocol

from gitwatcher.domain.entities import ChangedFile


class StatusParser(Protocol):
    """Protocol for enumerating changed files and submodules."""

    def list_changed_files(self) -> list[ChangedFile]:
        """List every changed path of the working tree.

        Returns:
            One entry per changed path, in no particular order.

        Raises:
            GitCommandError: If the status query fails.
            StatusParseError: If the output has an unexpected shape.
        """
        ...

    def get_submodule_summary(self, relpath: str) -> str:
        """Summarize the commits a submodule moved by.

        Args:
            relpath: Submodule path relative to the repository root.

        Returns:
            Summary text (may be empty).
        """
        ...

    def list_submodules(self) -> list[str]:
        """List initialized submodules, recursively.

        Returns:
            Submodule paths relative to the repository root.
        """
        ...
