"""Subprocess runner shared by the git CLI adapters."""

import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from gitwatcher.domain.exceptions import GitCommandError, NotARepositoryError

logger = logging.getLogger(__name__)


def decode_output(output: bytes | None) -> str:
    """Decode git output, keeping undecodable path bytes round-trippable."""
    return (output or b"").decode("utf-8", errors="surrogateescape")


class GitCli:
    """Runs git commands against one working tree.

    Args:
        repo_root: Working tree root.
        verify: Check that repo_root is the top level of a working tree.

    Raises:
        NotARepositoryError: If verify is set and repo_root is not a working
            tree root.
    """

    def __init__(self, repo_root: Path, verify: bool = True) -> None:
        self.repo_root = Path(repo_root).resolve()
        if verify and not self._is_working_tree_root():
            raise NotARepositoryError(
                f"Not a git repository: {self.repo_root}",
                hint="Pass the top-level directory of a git working tree",
            )

    def _is_working_tree_root(self) -> bool:
        try:
            result = self.run(["rev-parse", "--show-toplevel"], check=True)
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False
        toplevel = decode_output(result.stdout).strip()
        return bool(toplevel) and Path(toplevel).resolve() == self.repo_root

    def run(
        self,
        args: Iterable[str],
        check: bool = True,
        no_optional_locks: bool = False,
    ) -> subprocess.CompletedProcess[bytes]:
        """Run a git command in the repository.

        Args:
            args: Git command arguments (without 'git' prefix).
            check: Whether to raise CalledProcessError on non-zero exit.
            no_optional_locks: Skip opportunistic index writes (read-only
                queries that may run concurrently with other git commands).

        Returns:
            CompletedProcess with captured stdout/stderr.

        Raises:
            subprocess.CalledProcessError: If check=True and command fails.
        """
        cmd = ["git", "-C", str(self.repo_root)]
        if no_optional_locks:
            cmd.append("--no-optional-locks")
        cmd.extend(args)
        logger.debug(f"Running: {' '.join(cmd)}")
        return subprocess.run(cmd, capture_output=True, check=check)

    def run_checked(
        self,
        args: Iterable[str],
        context: str,
        ok_returncodes: tuple[int, ...] = (0,),
        no_optional_locks: bool = False,
    ) -> subprocess.CompletedProcess[bytes]:
        """Run a git command, converting failures to GitCommandError.

        Args:
            args: Git command arguments.
            context: Human-readable description of what was being done.
            ok_returncodes: Exit codes that do not indicate failure.
            no_optional_locks: See run().

        Raises:
            GitCommandError: If git exits with another code or cannot start.
        """
        try:
            result = self.run(args, check=False, no_optional_locks=no_optional_locks)
        except FileNotFoundError as e:
            raise GitCommandError(
                f"{context}: git executable not found",
                hint="Install git and make sure it is on PATH",
            ) from e
        if result.returncode not in ok_returncodes:
            raise self.command_error(result, context)
        return result

    def command_error(
        self, result: subprocess.CompletedProcess[bytes], context: str
    ) -> GitCommandError:
        """Build a GitCommandError with exit code and stderr context."""
        stderr = decode_output(result.stderr).strip()
        msg = f"{context} (git exit code {result.returncode})"
        if stderr:
            msg += f": {stderr}"
        else:
            msg += " (no error output from git)"
        return GitCommandError(msg, returncode=result.returncode, stderr=stderr)
