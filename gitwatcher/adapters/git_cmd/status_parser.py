"""Status parser adapter built on ``git status --porcelain=v1 -z``."""

import logging
import re

from gitwatcher.adapters.git_cmd.runner import GitCli, decode_output
from gitwatcher.domain.entities import ChangedFile
from gitwatcher.domain.exceptions import StatusParseError

logger = logging.getLogger(__name__)

STATUS_CODES = {
    "M": "modified",
    "A": "new",
    "D": "deleted",
    "R": "renamed",
    "C": "copied",
    "T": "typechange",
    "U": "unmerged",
}

UNMERGED_PAIRS = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

# "<flag><sha1> <path>[ (<describe>)]"; flag '-' means not initialized
_SUBMODULE_LINE = re.compile(r"^([ +\-U])([0-9a-f]+) (.+?)(?: \(.*\))?$")


def _status_name(code: str) -> str | None:
    if code in (" ", "?"):
        return None
    return STATUS_CODES.get(code, "modified")


def parse_porcelain_status(output: str) -> list[ChangedFile]:
    """Parse NUL-separated porcelain v1 status output.

    Renames and copies carry the original path as an extra entry, which is
    consumed. Untracked files are reported as unstaged "new" files and
    ignored files are skipped.

    Args:
        output: Output of ``git status --porcelain=v1 -z``.

    Returns:
        One ChangedFile per entry, in output order.

    Raises:
        StatusParseError: If an entry is malformed.
    """
    entries = output.split("\0")
    changed: list[ChangedFile] = []
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if not entry:
            continue
        if len(entry) < 4 or entry[2] != " ":
            raise StatusParseError(f"Malformed status entry: {entry!r}")

        xy, name = entry[:2], entry[3:]
        x, y = xy[0], xy[1]
        if x in "RC" or y in "RC":
            # Original path of a rename or copy follows as its own entry
            i += 1

        if xy == "!!":
            continue
        if xy == "??":
            changed.append(
                ChangedFile(name=name, staged=False, unstaged=True, unstaged_status="new")
            )
            continue
        if xy in UNMERGED_PAIRS:
            changed.append(
                ChangedFile(
                    name=name,
                    staged=False,
                    unstaged=True,
                    unmerged=True,
                    unstaged_status="unmerged",
                )
            )
            continue

        changed.append(
            ChangedFile(
                name=name,
                staged=x not in " ?",
                unstaged=y not in " ?",
                staged_status=_status_name(x),
                unstaged_status=_status_name(y),
            )
        )
    return changed


def parse_submodule_status(output: str) -> list[str]:
    """Parse ``git submodule status`` output into initialized submodule paths."""
    paths = []
    for line in output.splitlines():
        match = _SUBMODULE_LINE.match(line)
        if match is None:
            if line.strip():
                logger.warning(f"Unrecognized submodule status line: {line!r}")
            continue
        flag, _sha, path = match.groups()
        if flag == "-":
            continue
        paths.append(path)
    return paths


class GitStatusParser:
    """StatusParser adapter using the git CLI.

    Args:
        git: Runner bound to the working tree.
    """

    def __init__(self, git: GitCli) -> None:
        self._git = git

    def list_changed_files(self) -> list[ChangedFile]:
        result = self._git.run_checked(
            ["status", "--porcelain=v1", "-z", "--untracked-files=all"],
            "Failed to get working tree status",
            no_optional_locks=True,
        )
        return parse_porcelain_status(decode_output(result.stdout))

    def get_submodule_summary(self, relpath: str) -> str:
        result = self._git.run_checked(
            ["submodule", "summary", "--", relpath],
            f"Failed to summarize submodule '{relpath}'",
        )
        return decode_output(result.stdout).strip()

    def list_submodules(self) -> list[str]:
        result = self._git.run_checked(
            ["submodule", "status", "--recursive"],
            "Failed to list submodules",
        )
        return parse_submodule_status(decode_output(result.stdout))
