"""Domain exceptions for gitwatcher.

These exceptions represent failures of the status pipeline and its
collaborators. They should be caught at the application boundary (CLI,
event channels) and converted to appropriate user-facing error messages.
"""


class GitWatcherError(Exception):
    """Base exception for all gitwatcher errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class NotARepositoryError(GitWatcherError):
    """Raised when a path is not the root of a git working tree."""

    pass


class GitCommandError(GitWatcherError):
    """Raised when a git invocation fails.

    Attributes:
        returncode: Exit code of the git process.
        stderr: Decoded error output of the git process.
    """

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stderr: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.returncode = returncode
        self.stderr = stderr


class StatusParseError(GitWatcherError):
    """Raised when git output does not have the expected shape."""

    pass


class ControlDirectoryError(GitWatcherError):
    """Raised when the repository control directory cannot be resolved."""

    pass
