"""Parsing of branch and commit log output."""

import re

from gitwatcher.domain.entities import Branch, CommitEntry

_BRANCH_HEADER = re.compile(
    r"^## (?P<name>.+?)(?:\.\.\.(?P<remote>\S+))?(?: \[(?P<tracking>[^\]]*)\])?$",
    re.MULTILINE,
)
_TRACKING_COUNT = re.compile(r"(ahead|behind) (\d+)")
_UNBORN_PREFIXES = ("No commits yet on ", "Initial commit on ")
_DETACHED = "HEAD (no branch)"

_COMMIT_LINE = re.compile(r"^(\w+)\s+(.+)$", re.MULTILINE)


def parse_branch(output: str) -> Branch | None:
    """Parse the ``## ...`` header of ``git status -sb``.

    Handles ``## name``, ``## name...remote``, tracking suffixes such as
    ``[ahead 2]``, ``[behind 1]`` and ``[ahead 2, behind 1]``, unborn branches
    and detached HEADs (empty name).

    Args:
        output: Raw porcelain status output with branch header.

    Returns:
        Parsed branch, or None if the output has no branch header.
    """
    match = _BRANCH_HEADER.search(output)
    if match is None:
        return None

    name = match.group("name").strip()
    for prefix in _UNBORN_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix):]
            break
    if name == _DETACHED:
        name = ""

    counts = {"ahead": 0, "behind": 0}
    for direction, count in _TRACKING_COUNT.findall(match.group("tracking") or ""):
        counts[direction] = int(count)

    return Branch(
        name=name,
        remote=(match.group("remote") or "").strip(),
        ahead=counts["ahead"],
        behind=counts["behind"],
    )


def parse_commit_log(output: str) -> list[CommitEntry]:
    """Parse ``git log --pretty=format:'%h %s'`` output.

    Args:
        output: One ``<hash> <subject>`` pair per line.

    Returns:
        Commit entries in output order (newest first).
    """
    return [
        CommitEntry(hash=commit_hash, subject=subject.strip())
        for commit_hash, subject in _COMMIT_LINE.findall(output)
    ]
