"""Integration tests for the git CLI adapters against real repositories."""

from pathlib import Path

import pytest

from gitwatcher.adapters.git_cmd import GitCli, GitHistory, GitRepository, GitStatusParser
from gitwatcher.domain.entities import ChangedFile, EditChange
from gitwatcher.domain.exceptions import GitCommandError, NotARepositoryError
from tests.conftest import (
    create_git_repo,
    create_test_files,
    git_add_and_commit,
    numbered_lines,
    run_git,
)


@pytest.fixture
def git(git_repo: Path) -> GitCli:
    return GitCli(git_repo)


@pytest.fixture
def repository(git: GitCli) -> GitRepository:
    return GitRepository(git.repo_root, git=git)


class TestGitCli:
    """Tests for runner setup."""

    def test_non_repository_raises(self, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()

        with pytest.raises(NotARepositoryError, match="Not a git repository"):
            GitCli(plain)

    def test_subdirectory_is_not_a_root(self, git_repo: Path) -> None:
        """Only the top level of a working tree is accepted."""
        (git_repo / "sub").mkdir()

        with pytest.raises(NotARepositoryError):
            GitCli(git_repo / "sub")

    def test_failed_command_carries_stderr(self, git: GitCli) -> None:
        with pytest.raises(GitCommandError) as exc_info:
            git.run_checked(["rev-parse", "--verify", "no-such-ref"], "Failed to resolve ref")

        assert exc_info.value.returncode != 0
        assert "Failed to resolve ref (git exit code" in exc_info.value.message


class TestGitRepository:
    """Tests for GitRepository."""

    def test_relativize(self, repository: GitRepository) -> None:
        root = repository.repo_root
        assert repository.relativize(str(root / "src" / "app.py")) == "src/app.py"
        assert repository.relativize(str(root)) == ""

    def test_is_ignored(self, repository: GitRepository, git_repo: Path) -> None:
        create_test_files(git_repo, {".gitignore": "build/\n*.log\n", "build/out.o": b"\0"})

        assert repository.is_ignored("build")
        assert repository.is_ignored("debug.log")
        assert repository.is_ignored(".git")
        assert repository.is_ignored(".git/objects")
        assert not repository.is_ignored("numbers.txt")
        assert not repository.is_ignored("")

    def test_head_blob(self, repository: GitRepository) -> None:
        assert repository.get_head_blob("README.md") == b"# Project\n"

    def test_missing_head_blob_is_none(self, repository: GitRepository) -> None:
        assert repository.get_head_blob("never-committed.txt") is None

    def test_index_blob_of_staged_file(self, repository: GitRepository, git_repo: Path) -> None:
        create_test_files(git_repo, {"staged.txt": "staged\n"})
        run_git(git_repo, "add", "staged.txt")

        assert repository.get_index_blob("staged.txt") == b"staged\n"
        assert repository.get_head_blob("staged.txt") is None

    def test_head_blob_in_unborn_repository(self, tmp_path: Path) -> None:
        """A repository without commits has no HEAD baseline."""
        root = create_git_repo(tmp_path / "empty")
        create_test_files(root, {"a.txt": "a\n"})

        assert GitRepository(root).get_head_blob("a.txt") is None

    def test_edit_script_of_modified_lines(self, repository: GitRepository) -> None:
        lines = numbered_lines(100).splitlines(keepends=True)
        lines[9] = "changed 10\n"
        lines[10] = "changed 11\n"

        script = repository.compute_edit_script("numbers.txt", "".join(lines))

        assert script == [EditChange(old_start=10, old_line_count=2, new_start=10, new_line_count=2)]

    def test_edit_script_of_unchanged_content(self, repository: GitRepository) -> None:
        assert repository.compute_edit_script("README.md", "# Project\n") == []

    def test_edit_script_against_index(self, repository: GitRepository, git_repo: Path) -> None:
        create_test_files(git_repo, {"README.md": "# Project\nstaged\n"})
        run_git(git_repo, "add", "README.md")

        script = repository.compute_edit_script(
            "README.md", "# Project\nstaged\nunstaged\n", use_index=True
        )

        assert script == [EditChange(old_start=2, old_line_count=0, new_start=3, new_line_count=1)]

    def test_edit_script_without_baseline(self, repository: GitRepository) -> None:
        assert repository.compute_edit_script("untracked.txt", "content\n") is None

    def test_edit_script_ignoring_eol_whitespace(self, repository: GitRepository) -> None:
        assert (
            repository.compute_edit_script(
                "README.md", "# Project   \n", ignore_eol_whitespace=True
            )
            == []
        )

    def test_refresh_index_after_touch(self, repository: GitRepository, git_repo: Path) -> None:
        """Refreshing after a content-preserving rewrite succeeds."""
        (git_repo / "README.md").write_text("# Project\n")

        repository.refresh_index()


class TestGitStatusParser:
    """Tests for GitStatusParser against real status output."""

    def test_lists_changed_files(self, git: GitCli, git_repo: Path) -> None:
        create_test_files(
            git_repo,
            {
                "numbers.txt": "rewritten\n",
                "added.txt": "added\n",
                "dir/untracked.txt": "untracked\n",
            },
        )
        run_git(git_repo, "add", "added.txt")
        (git_repo / "README.md").unlink()

        files = {change.name: change for change in GitStatusParser(git).list_changed_files()}

        assert files["numbers.txt"] == ChangedFile(
            name="numbers.txt", unstaged=True, unstaged_status="modified"
        )
        assert files["added.txt"] == ChangedFile(name="added.txt", staged=True, staged_status="new")
        assert files["dir/untracked.txt"].unstaged_status == "new"
        assert files["README.md"].unstaged_status == "deleted"

    def test_clean_tree(self, git: GitCli) -> None:
        assert GitStatusParser(git).list_changed_files() == []

    def test_no_submodules(self, git: GitCli) -> None:
        assert GitStatusParser(git).list_submodules() == []


class TestGitHistory:
    """Tests for GitHistory."""

    def test_branch_summary_header(self, git: GitCli) -> None:
        assert GitHistory(git).branch_summary().startswith("## main")

    def test_recent_commits(self, git: GitCli, git_repo: Path) -> None:
        create_test_files(git_repo, {"second.txt": "2\n"})
        git_add_and_commit(git_repo, message="Second commit")

        lines = GitHistory(git).recent_commits(limit=1).splitlines()

        assert len(lines) == 1
        assert lines[0].endswith(" Second commit")

    def test_recent_commits_of_unborn_branch(self, tmp_path: Path) -> None:
        root = create_git_repo(tmp_path / "empty")

        assert GitHistory(GitCli(root)).recent_commits() == ""
