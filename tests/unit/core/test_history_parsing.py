"""Tests for branch header and commit log parsing."""

import pytest

from gitwatcher.core.status.history import parse_branch, parse_commit_log
from gitwatcher.domain.entities import Branch, CommitEntry


class TestParseBranch:
    """Tests for parse_branch()."""

    @pytest.mark.parametrize(
        ("output", "expected"),
        [
            ("## main\n", Branch(name="main")),
            (
                "## main...origin/main\n",
                Branch(name="main", remote="origin/main"),
            ),
            (
                "## main...origin/main [ahead 2]\n",
                Branch(name="main", remote="origin/main", ahead=2),
            ),
            (
                "## dev...upstream/dev [behind 5]\n",
                Branch(name="dev", remote="upstream/dev", behind=5),
            ),
            (
                "## feature/x...origin/feature/x [ahead 1, behind 3]\n",
                Branch(name="feature/x", remote="origin/feature/x", ahead=1, behind=3),
            ),
            ("## No commits yet on main\n", Branch(name="main")),
            ("## Initial commit on master\n", Branch(name="master")),
            ("## HEAD (no branch)\n", Branch(name="")),
        ],
    )
    def test_header_variants(self, output: str, expected: Branch) -> None:
        assert parse_branch(output) == expected

    def test_gone_upstream(self) -> None:
        """A deleted upstream has no counts."""
        assert parse_branch("## main...origin/main [gone]\n") == Branch(
            name="main", remote="origin/main"
        )

    def test_header_followed_by_entries(self) -> None:
        """Only the header line is parsed; file entries are ignored."""
        output = "## main...origin/main [ahead 1]\n M file.txt\n?? new.txt\n"
        assert parse_branch(output) == Branch(name="main", remote="origin/main", ahead=1)

    def test_no_header(self) -> None:
        assert parse_branch("") is None
        assert parse_branch(" M file.txt\n") is None


class TestParseCommitLog:
    """Tests for parse_commit_log()."""

    def test_entries_in_order(self) -> None:
        output = "a1b2c3d Fix parser\ne4f5a6b Add watcher support\n0123abc Initial commit"

        assert parse_commit_log(output) == [
            CommitEntry(hash="a1b2c3d", subject="Fix parser"),
            CommitEntry(hash="e4f5a6b", subject="Add watcher support"),
            CommitEntry(hash="0123abc", subject="Initial commit"),
        ]

    def test_subject_keeps_inner_spaces(self) -> None:
        assert parse_commit_log("abc1234 Merge branch 'a b' into main") == [
            CommitEntry(hash="abc1234", subject="Merge branch 'a b' into main")
        ]

    def test_empty_log(self) -> None:
        """An empty repository yields an empty log."""
        assert parse_commit_log("") == []
