"""Status module: snapshot assembly and branch/log parsing."""

from gitwatcher.core.status.history import parse_branch, parse_commit_log
from gitwatcher.core.status.status_assembler import StatusAssembler

__all__ = ["StatusAssembler", "parse_branch", "parse_commit_log"]
