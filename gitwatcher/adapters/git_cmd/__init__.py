"""Git CLI adapters."""

from gitwatcher.adapters.git_cmd.git_adapter import GitRepository
from gitwatcher.adapters.git_cmd.history import GitHistory
from gitwatcher.adapters.git_cmd.runner import GitCli
from gitwatcher.adapters.git_cmd.status_parser import GitStatusParser

__all__ = ["GitCli", "GitHistory", "GitRepository", "GitStatusParser"]
