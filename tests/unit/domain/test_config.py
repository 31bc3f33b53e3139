"""Tests for configuration domain models."""

import pytest

from gitwatcher.domain.config import (
    DiffConfig,
    GitWatcherConfig,
    StatusConfig,
    WatchConfig,
)


class TestDiffConfig:
    """Tests for DiffConfig validation."""

    def test_defaults(self) -> None:
        config = DiffConfig()
        assert config.context_lines == 3
        assert config.ignore_eol_whitespace is False

    def test_zero_context_is_allowed(self) -> None:
        assert DiffConfig(context_lines=0).context_lines == 0

    def test_negative_context_raises(self) -> None:
        with pytest.raises(ValueError, match="context_lines cannot be negative"):
            DiffConfig(context_lines=-1)


class TestStatusConfig:
    """Tests for StatusConfig validation."""

    def test_defaults(self) -> None:
        config = StatusConfig()
        assert config.show_commit_log is False
        assert config.commit_log_limit == 10

    @pytest.mark.parametrize("limit", [0, -5])
    def test_non_positive_limit_raises(self, limit: int) -> None:
        with pytest.raises(ValueError, match="commit_log_limit must be positive"):
            StatusConfig(commit_log_limit=limit)


class TestWatchConfig:
    """Tests for WatchConfig validation."""

    def test_debounce_seconds(self) -> None:
        """The quiet period is configured in milliseconds."""
        assert WatchConfig().debounce_seconds == 0.5
        assert WatchConfig(debounce_ms=0).debounce_seconds == 0

    def test_negative_debounce_raises(self) -> None:
        with pytest.raises(ValueError, match="debounce_ms cannot be negative"):
            WatchConfig(debounce_ms=-1)

    def test_non_positive_workers_raises(self) -> None:
        with pytest.raises(ValueError, match="max_workers must be positive"):
            WatchConfig(max_workers=0)


class TestGitWatcherConfig:
    """Tests for the aggregate configuration."""

    def test_default_matches_constructor_defaults(self) -> None:
        assert GitWatcherConfig.default() == GitWatcherConfig()

    def test_is_frozen(self) -> None:
        config = GitWatcherConfig.default()
        with pytest.raises(AttributeError):
            config.diff = DiffConfig(context_lines=5)  # type: ignore[misc]
