"""Error formatting and logging utilities.

Provides consistent handling of failures that end a status build, a branch
or log query, or a CLI command.

Design principles:
1. KeyboardInterrupt and SystemExit are never caught by callers
2. GitWatcherError subclasses carry user-friendly messages and hints
3. OSError means a filesystem problem on a single path
4. Unexpected exceptions are logged with a traceback
"""

import logging

from gitwatcher.domain.exceptions import GitWatcherError

logger = logging.getLogger(__name__)


def format_error_message(exception: BaseException, operation_name: str) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exception: The exception that was caught.
        operation_name: Name of the operation (e.g., "status refresh").

    Returns:
        User-friendly error message string.
    """
    if isinstance(exception, GitWatcherError):
        message = exception.message
        if exception.hint:
            message += f" ({exception.hint})"
        return message
    elif isinstance(exception, OSError):
        return (
            f"I/O error: {exception}. "
            "Check file permissions and that the repository still exists."
        )
    elif isinstance(exception, (ValueError, RuntimeError)):
        return f"{operation_name.capitalize()} error: {exception}"
    else:
        return f"Internal error during {operation_name}. Check logs for details."


def log_use_case_error(exception: BaseException, operation_name: str) -> None:
    """Log an exception with a severity matching its type.

    - GitWatcherError: ERROR level (expected collaborator failures)
    - OSError/ValueError/RuntimeError: ERROR level
    - Other exceptions: EXCEPTION level (includes traceback)

    Args:
        exception: The exception that was caught.
        operation_name: Name of the operation for log messages.
    """
    if isinstance(exception, GitWatcherError):
        logger.error(f"{operation_name.capitalize()} failed: {exception}")
    elif isinstance(exception, OSError):
        logger.error(f"I/O error during {operation_name}: {exception}")
    elif isinstance(exception, (ValueError, RuntimeError)):
        logger.error(f"Error during {operation_name}: {exception}")
    else:
        logger.exception(f"Unexpected error during {operation_name}")
