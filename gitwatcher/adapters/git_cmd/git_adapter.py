"""Git adapter implementing the Repository port using subprocess git commands."""

import logging
import re
import tempfile
from pathlib import Path, PurePosixPath

from gitwatcher.adapters.git_cmd.runner import GitCli, decode_output
from gitwatcher.domain.entities import EditChange
from gitwatcher.domain.exceptions import StatusParseError

logger = logging.getLogger(__name__)

CONTROL_DIR_NAME = ".git"

# Unified diff hunk header: "@@ -old_start[,old_count] +new_start[,new_count] @@"
_HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

# cat-file error fragments meaning "no such blob" rather than a failure
_MISSING_BLOB_MARKERS = (
    "does not exist",
    "exists on disk, but not in",
    "not a valid object name",
    "but not at stage 0",
)


def parse_edit_script(diff_output: str) -> list[EditChange]:
    """Parse the hunk headers of a zero-context unified diff.

    Args:
        diff_output: Output of ``git diff -U0``.

    Returns:
        One EditChange per hunk, in order. Omitted counts default to 1.

    Raises:
        StatusParseError: If a hunk header line is malformed.
    """
    changes: list[EditChange] = []
    for line in diff_output.splitlines():
        if not line.startswith("@@"):
            continue
        match = _HUNK_HEADER.match(line)
        if match is None:
            raise StatusParseError(f"Malformed diff hunk header: {line!r}")
        old_start, old_count, new_start, new_count = match.groups()
        changes.append(
            EditChange(
                old_start=int(old_start),
                old_line_count=int(old_count) if old_count is not None else 1,
                new_start=int(new_start),
                new_line_count=int(new_count) if new_count is not None else 1,
            )
        )
    return changes


class GitRepository:
    """Repository adapter using subprocess calls to the git CLI.

    Every query is a separate read-only git invocation, so concurrent calls
    are safe. refresh_index() is the only command that writes.

    Args:
        repo_root: Absolute path to the working tree root.
        git: Runner to use (created for repo_root if omitted).

    Raises:
        NotARepositoryError: If repo_root is not a working tree root.
    """

    def __init__(self, repo_root: Path, git: GitCli | None = None) -> None:
        self._git = git or GitCli(repo_root)
        self.repo_root = self._git.repo_root

    def relativize(self, path: str) -> str:
        try:
            relative = Path(path).relative_to(self.repo_root)
        except ValueError:
            return path
        relpath = relative.as_posix()
        return "" if relpath == "." else relpath

    def is_ignored(self, relpath: str) -> bool:
        """Check ignore rules; the control directory is always ignored.

        Raises:
            GitCommandError: If git check-ignore fails.
        """
        if not relpath:
            return False
        if CONTROL_DIR_NAME in PurePosixPath(relpath).parts:
            return True
        result = self._git.run_checked(
            ["check-ignore", "-q", "--", relpath],
            f"Failed to check ignore rules for '{relpath}'",
            ok_returncodes=(0, 1),
        )
        return result.returncode == 0

    def get_head_blob(self, relpath: str) -> bytes | None:
        return self._read_blob(f"HEAD:{relpath}")

    def get_index_blob(self, relpath: str) -> bytes | None:
        return self._read_blob(f":{relpath}")

    def _read_blob(self, object_name: str) -> bytes | None:
        """Read a blob by ``<rev>:<path>`` object name; None if it does not exist.

        Raises:
            GitCommandError: For failures other than a missing blob.
        """
        result = self._git.run(["cat-file", "blob", object_name], check=False)
        if result.returncode == 0:
            return result.stdout
        stderr = decode_output(result.stderr).lower()
        if any(marker in stderr for marker in _MISSING_BLOB_MARKERS):
            return None
        raise self._git.command_error(result, f"Failed to read blob '{object_name}'")

    def compute_edit_script(
        self,
        relpath: str,
        content: str,
        use_index: bool = False,
        ignore_eol_whitespace: bool = False,
    ) -> list[EditChange] | None:
        """Compute the edit script from the HEAD (or index) blob to content.

        The baseline and content are written to temporary files and compared
        with ``git diff --no-index -U0``, so git's own diff algorithm and
        configuration apply.

        Returns:
            Ordered changes, or None if the baseline has no such file.

        Raises:
            GitCommandError: If git diff fails.
            StatusParseError: If the diff output is malformed.
        """
        baseline = self.get_index_blob(relpath) if use_index else self.get_head_blob(relpath)
        if baseline is None:
            return None

        with tempfile.TemporaryDirectory(prefix="gitwatcher-") as tmp:
            old_file = Path(tmp) / "old"
            new_file = Path(tmp) / "new"
            old_file.write_bytes(baseline)
            new_file.write_bytes(content.encode("utf-8", errors="surrogateescape"))

            args = ["diff", "--no-index", "--no-color", "--no-ext-diff", "--text", "-U0"]
            if ignore_eol_whitespace:
                args.append("--ignore-space-at-eol")
            args.extend(["--", str(old_file), str(new_file)])
            # Exit code 1 only means the files differ
            result = self._git.run_checked(
                args,
                f"Failed to diff '{relpath}'",
                ok_returncodes=(0, 1),
            )

        return parse_edit_script(decode_output(result.stdout))

    def refresh_index(self) -> None:
        """Refresh index stat information (``git update-index --refresh``).

        Raises:
            GitCommandError: If the index cannot be refreshed (e.g. locked).
        """
        logger.debug(f"Refreshing index of {self.repo_root}")
        # Exit code 1 reports files that need updating, which is expected
        self._git.run_checked(
            ["update-index", "-q", "--refresh"],
            "Failed to refresh index",
            ok_returncodes=(0, 1),
        )
