"""Config domain models for gitwatcher.

Configuration is read from ~/.config/gitwatcher/config.toml and
<repo>/.gitwatcher.toml and represents user preferences for diffing,
status assembly and watching. This module defines the domain models that
represent validated configuration state.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DiffConfig:
    """Configuration for diff construction.

    Attributes:
        context_lines: Unchanged lines shown around each change (default: 3).
            0 shows the changed lines only; it is not a request for the default.
        ignore_eol_whitespace: Ignore whitespace changes at end of line

    Raises:
        ValueError: If context_lines is negative.
    """

    context_lines: int = 3
    ignore_eol_whitespace: bool = False

    def __post_init__(self) -> None:
        """Validate diff config after initialization."""
        if self.context_lines < 0:
            raise ValueError(
                f"context_lines cannot be negative, got {self.context_lines}"
            )


@dataclass(frozen=True)
class StatusConfig:
    """Configuration for status snapshots.

    Attributes:
        show_commit_log: Attach the recent commit log to every status
        commit_log_limit: Number of commits in the attached log (default: 10)

    Raises:
        ValueError: If commit_log_limit is not positive.
    """

    show_commit_log: bool = False
    commit_log_limit: int = 10

    def __post_init__(self) -> None:
        """Validate status config after initialization."""
        if self.commit_log_limit <= 0:
            raise ValueError(
                f"commit_log_limit must be positive, got {self.commit_log_limit}"
            )


@dataclass(frozen=True)
class WatchConfig:
    """Configuration for filesystem watching.

    Attributes:
        debounce_ms: Quiet period before a refresh is triggered (default: 500)
        max_workers: Threads used to diff changed files concurrently

    Raises:
        ValueError: If debounce_ms is negative or max_workers is not positive.
    """

    debounce_ms: int = 500
    max_workers: int = 8

    def __post_init__(self) -> None:
        """Validate watch config after initialization."""
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms cannot be negative, got {self.debounce_ms}")
        if self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


@dataclass(frozen=True)
class GitWatcherConfig:
    """Complete gitwatcher configuration.

    Attributes:
        diff: Diff construction configuration
        status: Status snapshot configuration
        watch: Filesystem watching configuration
    """

    diff: DiffConfig = field(default_factory=DiffConfig)
    status: StatusConfig = field(default_factory=StatusConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    @staticmethod
    def default() -> "GitWatcherConfig":
        """Create a config with all default values."""
        return GitWatcherConfig(
            diff=DiffConfig(),
            status=StatusConfig(),
            watch=WatchConfig(),
        )
