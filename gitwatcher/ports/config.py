"""Configuration provider port."""

from pathlib import Path
from typing import Protocol

from gitwatcher.domain.config import GitWatcherConfig


class ConfigProvider(Protocol):
    """Resolves the effective configuration of a repository."""

    def load(self, repo_root: Path) -> GitWatcherConfig:
        """Return the configuration for repo_root.

        Missing or unusable config files never fail the load; the layers that
        could be read still apply on top of the built-in defaults.
        """
        ...
