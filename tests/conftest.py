"""Pytest configuration and shared fixtures.

Integration tests build throwaway repositories with the real git CLI; unit
tests use the in-memory fakes from tests.helpers.fakes.
"""

import subprocess
from pathlib import Path

import pytest

from tests.helpers.fakes import (
    FakeHistory,
    FakeRepository,
    FakeStatusParser,
    FakeWatchBackend,
    ManualTimer,
)

GIT_TIMEOUT_SECONDS = 10


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch):
    """Point the global config lookup at an empty directory.

    Keeps the user's ~/.config/gitwatcher/config.toml out of every test.
    Returns the (not yet existing) global config path.
    """
    config_home = tmp_path_factory.mktemp("xdg_config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home / "gitwatcher" / "config.toml"


# ============================================================================
# Git repository helpers
# ============================================================================


def run_git(path: Path, *args: str) -> str:
    """Run git inside path and return stdout (raises CalledProcessError)."""
    return subprocess.run(
        ["git", *args],
        cwd=path,
        check=True,
        capture_output=True,
        text=True,
        timeout=GIT_TIMEOUT_SECONDS,
    ).stdout


def init_git_repo(path: Path) -> None:
    """Initialize a repository on branch main with a fixed identity.

    The branch name and signing settings are pinned so the user's global git
    configuration cannot change test output.
    """
    run_git(path, "init", "--quiet")
    run_git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    for key, value in [
        ("user.name", "Test User"),
        ("user.email", "test@example.com"),
        ("commit.gpgsign", "false"),
    ]:
        run_git(path, "config", key, value)


def git_add_and_commit(path: Path, message: str = "Initial commit") -> None:
    """Stage everything and commit."""
    run_git(path, "add", "--all")
    run_git(path, "commit", "--quiet", "-m", message)


def create_test_files(path: Path, files: dict[str, str | bytes]) -> None:
    """Write files below path; bytes are written as-is, str as text.

    Example:
        create_test_files(repo, {
            "main.py": "def main(): pass\\n",
            "assets/logo.png": b"\\x89PNG\\r\\n\\x1a\\n\\x00",
        })
    """
    for relpath, content in files.items():
        target = path / relpath
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content)


def create_git_repo(
    path: Path,
    files: dict[str, str | bytes] | None = None,
    commit_message: str = "Initial commit",
) -> Path:
    """Create a repository at path, committing files if any are given."""
    path.mkdir(parents=True, exist_ok=True)
    init_git_repo(path)
    if files:
        create_test_files(path, files)
        git_add_and_commit(path, message=commit_message)
    return path


def numbered_lines(count: int, prefix: str = "line") -> str:
    """Text of count lines "<prefix> 1" .. "<prefix> count", newline terminated."""
    return "".join(f"{prefix} {i}\n" for i in range(1, count + 1))


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A repository with a committed 100-line file and a README."""
    return create_git_repo(
        tmp_path / "project",
        files={
            "numbers.txt": numbered_lines(100),
            "README.md": "# Project\n",
        },
    )


# ============================================================================
# Port fakes
# ============================================================================


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """A plain working tree directory (no git) for fake-driven tests."""
    root = tmp_path / "worktree"
    (root / ".git").mkdir(parents=True)
    return root


@pytest.fixture
def fake_repository(repo_root: Path) -> FakeRepository:
    return FakeRepository(repo_root)


@pytest.fixture
def fake_status_parser() -> FakeStatusParser:
    return FakeStatusParser()


@pytest.fixture
def fake_history() -> FakeHistory:
    return FakeHistory()


@pytest.fixture
def fake_backend() -> FakeWatchBackend:
    return FakeWatchBackend()


@pytest.fixture
def manual_timer() -> ManualTimer:
    return ManualTimer()
