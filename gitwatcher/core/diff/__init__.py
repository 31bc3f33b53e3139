"""Diff module: binary detection and hunk construction.

Contains the content heuristic that decides whether a file is diffed at all
and the builder turning edit scripts into display hunks.
"""

from gitwatcher.core.diff.binary import is_binary
from gitwatcher.core.diff.hunk_builder import DiffHunkBuilder, partition_hunks, split_lines

__all__ = ["DiffHunkBuilder", "is_binary", "partition_hunks", "split_lines"]
