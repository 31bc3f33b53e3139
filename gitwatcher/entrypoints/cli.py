"""gitwatcher CLI entrypoint.

Command-line interface for live git working tree status.
"""

from __future__ import annotations

import functools
import json
import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

if TYPE_CHECKING:
    from gitwatcher.core.module_watcher import ModuleWatcher
    from gitwatcher.domain.config import GitWatcherConfig
    from gitwatcher.domain.entities import FileChange, Status

from gitwatcher.core.errors import (
    GitWatcherCliError,
    config_exists_error,
    repo_not_found_error,
)
from gitwatcher.domain.entities import LineKind
from gitwatcher.domain.exceptions import GitWatcherError
from gitwatcher.version import __version__

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    GitWatcherCliError is re-raised to use its built-in formatting, domain
    errors are converted with their hint, and anything else becomes a generic
    error (with a traceback in verbose mode).

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except GitWatcherCliError:
                raise
            except GitWatcherError as e:
                raise GitWatcherCliError(e.message, hint=e.hint) from e
            except OSError as e:
                raise GitWatcherCliError(
                    f"I/O error in {command_name}: {e}",
                    hint="Check file permissions and that the repository still exists",
                ) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise GitWatcherCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _resolve_repo_root(path: str | None) -> Path:
    """Find the working tree root containing path (default: CWD).

    Raises:
        GitWatcherCliError: If path is not inside a git working tree.
    """
    from gitwatcher.core.repo_utils import find_git_root

    start = Path(path) if path else Path.cwd()
    repo_root = find_git_root(start)
    if repo_root is None:
        repo_not_found_error(str(start))
    return repo_root


def _load_config(repo_root: Path) -> GitWatcherConfig:
    """Load the effective configuration (defaults, global, local)."""
    from gitwatcher.adapters.factory import ConfigFactory

    return ConfigFactory().create_config_provider().load(repo_root)


def _create_module_watcher(repo_root: Path) -> ModuleWatcher:
    from gitwatcher.adapters.factory import WatcherFactory

    return WatcherFactory(_load_config(repo_root)).create_module_watcher(repo_root)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data))


def _count_changes(change: FileChange) -> tuple[int, int]:
    """Count added and deleted lines over all hunks of a file change."""
    added = deleted = 0
    for hunk in change.diff or ():
        for line in hunk:
            if line.kind is LineKind.ADDED:
                added += 1
            elif line.kind is LineKind.DELETED:
                deleted += 1
    return added, deleted


def _format_file_change(change: FileChange) -> str:
    label = f"{change.status or 'changed'}:"
    line = f"  {label:<12}{change.name}"
    if change.info is not None and change.info.is_binary:
        return f"{line} (binary)"
    if change.diff:
        added, deleted = _count_changes(change)
        line += f" (+{added} -{deleted})"
    if change.summary:
        line += f"\n{click.style(change.summary, dim=True)}"
    return line


def _display_status(status: Status) -> None:
    """Display a status snapshot in a human-readable layout."""
    if status.branch is not None:
        branch = status.branch
        header = f"On branch {branch.name or '(detached HEAD)'}"
        if branch.remote:
            header += f" tracking {branch.remote}"
        tracking = []
        if branch.ahead:
            tracking.append(f"ahead {branch.ahead}")
        if branch.behind:
            tracking.append(f"behind {branch.behind}")
        if tracking:
            header += f" [{', '.join(tracking)}]"
        click.echo(header)

    if not status.staged and not status.unstaged:
        click.echo("Nothing changed, working tree clean")
    if status.staged:
        click.echo(click.style("Changes to be committed:", fg="green"))
        for change in status.staged:
            click.echo(_format_file_change(change))
    if status.unstaged:
        click.echo(click.style("Changes not staged for commit:", fg="red"))
        for change in status.unstaged:
            click.echo(_format_file_change(change))

    if status.log:
        click.echo("Recent commits:")
        for entry in status.log:
            click.echo(f"  {click.style(entry.hash, fg='yellow')} {entry.subject}")


@click.group()
@click.version_option(version=__version__, prog_name="gitwatcher")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """gitwatcher - Live status of git working trees.

    Watches the working tree and repository metadata and reports
    diff-annotated status snapshots.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


@cli.command()
@click.argument("path", type=str, required=False, default=None)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output the status as JSON.",
)
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context, path: str | None, json_output: bool) -> None:
    """Show the diff-annotated status of a working tree.

    PATH defaults to the current directory.
    """
    repo_root = _resolve_repo_root(path)
    result = _create_module_watcher(repo_root).get_status()
    if json_output:
        _echo_json(result.to_dict())
    else:
        _display_status(result)


@cli.command()
@click.argument("path", type=str, required=False, default=None)
@click.pass_context
@handle_cli_errors("watch")
def watch(ctx: click.Context, path: str | None) -> None:
    """Watch a repository and its submodules until interrupted.

    Prints one JSON document per line for every status change, merge in
    progress and error.
    """
    from gitwatcher.adapters.factory import WatcherFactory

    repo_root = _resolve_repo_root(path)
    watcher = WatcherFactory(_load_config(repo_root)).create_repository_watcher(repo_root)

    watcher.changes.subscribe(
        lambda change: _echo_json({"event": "change", **change.to_dict()})
    )
    watcher.merges.subscribe(
        lambda notice: _echo_json({"event": "merge", **notice.to_dict()})
    )
    watcher.errors.subscribe(
        lambda error: _echo_json({"event": "error", "message": str(error)})
    )

    watcher.init()
    try:
        if not ctx.obj.get("quiet", False):
            modules = ", ".join(watcher.get_modules())
            click.echo(f"Watching {modules} (Ctrl+C to stop)", err=True)
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        watcher.close()


@cli.command()
@click.argument("path", type=str, required=False, default=None)
@click.pass_context
@handle_cli_errors("branch")
def branch(ctx: click.Context, path: str | None) -> None:
    """Show the current branch and its tracking state as JSON."""
    repo_root = _resolve_repo_root(path)
    result = _create_module_watcher(repo_root).get_branch()
    _echo_json(result.to_dict() if result is not None else None)


@cli.command()
@click.argument("path", type=str, required=False, default=None)
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Number of commits (default: status.commit_log_limit).",
)
@click.pass_context
@handle_cli_errors("log")
def log(ctx: click.Context, path: str | None, limit: int | None) -> None:
    """Show the most recent commits."""
    from dataclasses import replace

    from gitwatcher.adapters.factory import WatcherFactory

    repo_root = _resolve_repo_root(path)
    watcher_config = _load_config(repo_root)
    if limit is not None:
        watcher_config = replace(
            watcher_config,
            status=replace(watcher_config.status, commit_log_limit=limit),
        )
    watcher = WatcherFactory(watcher_config).create_module_watcher(repo_root)
    for entry in watcher.get_commit_log():
        click.echo(f"{click.style(entry.hash, fg='yellow')} {entry.subject}")


@cli.group()
def config() -> None:
    """Manage gitwatcher configuration files.

    gitwatcher uses a two-tier configuration system:
    - Local: <repo>/.gitwatcher.toml (repo-specific settings)
    - Global: ~/.config/gitwatcher/config.toml (user defaults)

    Local settings override global settings. Missing values use built-in defaults.
    """
    pass


def _display_path_status(path: Path, label: str) -> None:
    """Display a config path with its existence status."""
    status = "exists" if path.exists() else "not created"
    color = "green" if path.exists() else "yellow"
    click.echo(f"{label}{path}")
    click.echo(f"  Status: {click.style(status, fg=color)}")


@config.command(name="init")
@click.argument("path", type=str, required=False, default=None)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing config file.")
@click.option(
    "--global",
    "-g",
    "global_config",
    is_flag=True,
    help="Write the global config instead of the repository one.",
)
@click.pass_context
@handle_cli_errors("config init")
def config_init(
    ctx: click.Context, path: str | None, force: bool, global_config: bool
) -> None:
    """Write a config file with default settings."""
    from gitwatcher.domain.config import GitWatcherConfig
    from gitwatcher.shared.config_io import (
        get_global_config_path,
        get_local_config_path,
        save_config,
    )

    if global_config:
        config_path = get_global_config_path()
    else:
        config_path = get_local_config_path(_resolve_repo_root(path))

    if config_path.exists() and not force:
        config_exists_error(str(config_path))

    save_config(GitWatcherConfig.default(), config_path)
    if not ctx.obj.get("quiet", False):
        click.echo(f"Wrote {config_path}")


@config.command(name="show")
@click.argument("path", type=str, required=False, default=None)
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context, path: str | None) -> None:
    """Show configuration file locations and the effective settings."""
    import tomli_w

    from gitwatcher.shared.config_io import (
        config_to_data,
        get_global_config_path,
        get_local_config_path,
    )

    repo_root = _resolve_repo_root(path)
    _display_path_status(get_global_config_path(), "Global config: ")
    _display_path_status(get_local_config_path(repo_root), "Local config:  ")

    click.echo("\nEffective configuration (merged global + local):")
    click.echo(tomli_w.dumps(config_to_data(_load_config(repo_root))))


if __name__ == "__main__":
    cli()
