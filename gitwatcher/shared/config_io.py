"""Reading and writing gitwatcher TOML config files.

Files are read with the standard library ``tomllib`` and written with
``tomli_w``. Raw data is kept as plain dictionaries until the layers are
merged; only then is it converted to a validated GitWatcherConfig.
"""

import os
import platform
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from gitwatcher.domain.config import (
    DiffConfig,
    GitWatcherConfig,
    StatusConfig,
    WatchConfig,
)

LOCAL_CONFIG_NAME = ".gitwatcher.toml"
SECTIONS = ("diff", "status", "watch")


def get_global_config_path() -> Path:
    """Location of the per-user config file (may not exist).

    ``%APPDATA%`` on Windows, ``$XDG_CONFIG_HOME`` elsewhere, falling back
    to ``~/.config`` when the variable is unset.
    """
    variable = "APPDATA" if platform.system() == "Windows" else "XDG_CONFIG_HOME"
    base = os.environ.get(variable)
    config_home = Path(base) if base else Path.home() / ".config"
    return config_home / "gitwatcher" / "config.toml"


def get_local_config_path(repo_root: Path) -> Path:
    """Path of the repository-specific config file (may not exist)."""
    return repo_root / LOCAL_CONFIG_NAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Parse a TOML config file into raw sections.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid TOML.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Config file not found: {path}") from e
    try:
        return tomllib.loads(raw.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e


def merge_config_data(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Layer override on top of base.

    Tables merge key by key, so an override that sets one key of a section
    keeps the other keys of the base section. Non-table values are replaced.
    """
    merged = dict(base)
    for section, value in override.items():
        current = merged.get(section)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[section] = {**current, **value}
        else:
            merged[section] = value
    return merged


def config_data_to_config(data: dict[str, Any]) -> GitWatcherConfig:
    """Validate raw sections and build a GitWatcherConfig.

    Raises:
        ValueError: If a section is not a table, has unknown keys, or holds
            invalid values.
    """
    for name in SECTIONS:
        if not isinstance(data.get(name, {}), dict):
            raise ValueError(f"Config section [{name}] must be a table")

    try:
        return GitWatcherConfig(
            diff=DiffConfig(**data.get("diff", {})),
            status=StatusConfig(**data.get("status", {})),
            watch=WatchConfig(**data.get("watch", {})),
        )
    except TypeError as e:
        # Unknown keys surface as unexpected keyword arguments
        raise ValueError(f"Invalid config keys: {e}") from e


def config_to_data(config: GitWatcherConfig) -> dict[str, Any]:
    """Convert a GitWatcherConfig to TOML-serializable sections."""
    return {
        "diff": {
            "context_lines": config.diff.context_lines,
            "ignore_eol_whitespace": config.diff.ignore_eol_whitespace,
        },
        "status": {
            "show_commit_log": config.status.show_commit_log,
            "commit_log_limit": config.status.commit_log_limit,
        },
        "watch": {
            "debounce_ms": config.watch.debounce_ms,
            "max_workers": config.watch.max_workers,
        },
    }


def load_config(path: Path) -> GitWatcherConfig:
    """Read one config file on its own (no layering).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is malformed or holds invalid values.
    """
    return config_data_to_config(load_config_data(path))


def save_config(config: GitWatcherConfig, path: Path) -> None:
    """Write every section of config to path, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(config_to_data(config)), encoding="utf-8")
