"""History port interface.

Raw branch and commit log queries. Parsing of the returned text happens in
gitwatcher.core.status.history so adapters stay thin.
"""

from typing import Protocol


class History(Protocol):
    """Protocol for branch and recent commit queries."""

    def branch_summary(self) -> str:
        """Return the porcelain branch header (``git status -sb`` output).

        Raises:
            GitCommandError: If the query fails.
        """
        ...

    def recent_commits(self, limit: int = 10) -> str:
        """Return one ``<hash> <subject>`` line per recent commit.

        Args:
            limit: Maximum number of commits.

        Raises:
            GitCommandError: If the query fails.
        """
        ...
