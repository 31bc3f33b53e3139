"""TOML-based configuration provider.

Loads configuration from <repo>/.gitwatcher.toml with global config fallback.

Config loading priority (highest to lowest):
1. Local: <repo>/.gitwatcher.toml (repo-specific)
2. Global: ~/.config/gitwatcher/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from gitwatcher.domain.config import GitWatcherConfig
from gitwatcher.shared.config_io import (
    config_data_to_config,
    config_to_data,
    get_global_config_path,
    get_local_config_path,
    load_config_data,
    merge_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Implements config cascade:
    1. Start from built-in defaults
    2. Apply the global config if present
    3. Apply the local config if present (key-level merge per section)

    A file that cannot be parsed or holds invalid values is logged and
    skipped; the remaining layers still apply.

    Args:
        global_path: Override for the global config location.
    """

    def __init__(self, global_path: Path | None = None) -> None:
        self._global_path = global_path

    def load(self, repo_root: Path) -> GitWatcherConfig:
        """Load configuration with global fallback.

        Args:
            repo_root: Repository root that may contain .gitwatcher.toml

        Returns:
            GitWatcherConfig instance with merged global/local values or defaults
        """
        global_path = self._global_path or get_global_config_path()
        local_path = get_local_config_path(repo_root)

        data = config_to_data(GitWatcherConfig.default())
        config = GitWatcherConfig.default()
        for label, path in (("global", global_path), ("local", local_path)):
            if not path.exists():
                continue
            try:
                layered = merge_config_data(data, load_config_data(path))
                config = config_data_to_config(layered)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to load %s config at %s: %s. Ignoring it.",
                    label,
                    path,
                    e,
                )
                continue
            data = layered
            logger.debug("Loaded %s config from %s", label, path)

        return config
