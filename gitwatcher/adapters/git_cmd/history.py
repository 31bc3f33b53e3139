"""History adapter: raw branch header and commit log queries."""

from gitwatcher.adapters.git_cmd.runner import GitCli, decode_output

_NO_COMMITS_MARKER = "does not have any commits"


class GitHistory:
    """History adapter using the git CLI.

    Args:
        git: Runner bound to the working tree.
    """

    def __init__(self, git: GitCli) -> None:
        self._git = git

    def branch_summary(self) -> str:
        result = self._git.run_checked(
            ["status", "--porcelain", "-b", "--untracked-files=no"],
            "Failed to get branch status",
            no_optional_locks=True,
        )
        return decode_output(result.stdout)

    def recent_commits(self, limit: int = 10) -> str:
        """Return the last ``limit`` commits; empty on an unborn branch.

        Raises:
            GitCommandError: If git log fails for another reason.
        """
        result = self._git.run(
            ["log", f"-{limit}", "--pretty=format:%h %s"],
            check=False,
        )
        if result.returncode == 0:
            return decode_output(result.stdout)
        if _NO_COMMITS_MARKER in decode_output(result.stderr):
            return ""
        raise self._git.command_error(result, "Failed to read commit log")
