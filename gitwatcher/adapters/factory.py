"""Factory classes for watcher and adapter instantiation.

This module centralizes the creation of watchers and their dependencies,
keeping the CLI layer free from direct adapter imports.

The factories use lazy imports so commands that only read configuration
never load watchdog.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitwatcher.core.module_watcher import ModuleWatcher
    from gitwatcher.core.repository_watcher import RepositoryWatcher
    from gitwatcher.domain.config import GitWatcherConfig
    from gitwatcher.ports.config import ConfigProvider


class ConfigFactory:
    """Factory for creating configuration-related instances."""

    def create_config_provider(self) -> ConfigProvider:
        """Create the TOML-backed config provider."""
        from gitwatcher.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider()


class WatcherFactory:
    """Factory for creating module and repository watchers.

    Every module watcher gets its own git adapters and its own watch
    backend; the local file system adapter is shared.

    Args:
        config: Configuration for every created watcher.
    """

    def __init__(self, config: GitWatcherConfig | None = None) -> None:
        self._config = config

    def create_module_watcher(self, root: Path) -> ModuleWatcher:
        """Create a ModuleWatcher for one working tree.

        Args:
            root: Working tree root of the repository or submodule.

        Returns:
            ModuleWatcher ready for init() or get_status().

        Raises:
            NotARepositoryError: If root is not a working tree root.
        """
        from gitwatcher.adapters.fs.local import LocalFileSystem
        from gitwatcher.adapters.fswatch.watchdog_backend import WatchdogBackend
        from gitwatcher.adapters.git_cmd import (
            GitCli,
            GitHistory,
            GitRepository,
            GitStatusParser,
        )
        from gitwatcher.core.module_watcher import ModuleWatcher

        git = GitCli(root)
        return ModuleWatcher(
            git.repo_root,
            repository=GitRepository(git.repo_root, git=git),
            status_parser=GitStatusParser(git),
            history=GitHistory(git),
            fs=LocalFileSystem(),
            backend=WatchdogBackend(),
            config=self._config,
        )

    def create_repository_watcher(self, root: Path) -> RepositoryWatcher:
        """Create a RepositoryWatcher covering root and its submodules.

        Raises:
            NotARepositoryError: If root is not a working tree root.
        """
        from gitwatcher.adapters.git_cmd import GitCli
        from gitwatcher.core.repository_watcher import RepositoryWatcher

        return RepositoryWatcher(GitCli(root).repo_root, self.create_module_watcher)
