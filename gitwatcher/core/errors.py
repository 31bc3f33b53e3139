"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all gitwatcher CLI commands.
"""

from typing import NoReturn

import click


class GitWatcherCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise GitWatcherCliError(
            "Not a git repository: /tmp",
            hint="Run gitwatcher from inside a git working tree",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def repo_not_found_error(path: str) -> NoReturn:
    """Raise error when the path is not inside a git working tree.

    Raises:
        GitWatcherCliError: Always raises with a repository hint.
    """
    raise GitWatcherCliError(
        f"Not a git repository: {path}",
        hint="Run gitwatcher inside a git working tree or pass its path",
    )


def config_exists_error(path: str) -> NoReturn:
    """Raise error when a config file would be overwritten.

    Raises:
        GitWatcherCliError: Always raises with a --force hint.
    """
    raise GitWatcherCliError(
        f"Config file already exists: {path}",
        hint="Use --force to overwrite it",
    )
