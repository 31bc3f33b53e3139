"""Diff hunk construction.

Turns a line edit script into display hunks: every change is rendered as its
deleted lines followed by its added lines, surrounded by unchanged context
taken from the new content. Changes whose gap is small enough merge into one
hunk, larger gaps are elided and split the output into separate hunks.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from gitwatcher.domain.entities import DiffLine, EditChange, Hunk, LineKind

_LINE_BREAK = re.compile(r"\r\n|\n|\r")

SEPARATOR = DiffLine(kind=LineKind.SEPARATOR)


def split_lines(text: str) -> list[str]:
    """Split text on CRLF, LF or CR line breaks.

    A trailing line break terminates the last line instead of starting an
    empty one, so the result matches the line numbering git uses.

    Args:
        text: Decoded file content.

    Returns:
        Lines without their terminators (empty list for empty text).
    """
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


@dataclass(frozen=True)
class _ChangeRegion:
    """An edit script change in 0-based, half-open coordinates.

    Attributes:
        old_start/old_end: Replaced range of the old lines.
        new_start/new_end: Inserted range of the new lines.
        old_offset: Net line count added by all earlier changes; maps old
            positions onto new-content coordinates.
    """

    old_start: int
    old_end: int
    new_start: int
    new_end: int
    old_offset: int

    @classmethod
    def from_change(cls, change: EditChange, old_offset: int) -> "_ChangeRegion":
        old_min = max(change.old_start - 1, 0)
        new_min = max(change.new_start - 1, 0)
        return cls(
            old_start=old_min,
            old_end=old_min + change.old_line_count,
            new_start=new_min,
            new_end=new_min + change.new_line_count,
            old_offset=old_offset,
        )

    @property
    def start(self) -> int:
        """First affected position in new-content coordinates."""
        if self.new_end > self.new_start:
            return self.new_start
        # Pure deletion: git reports the line before the gap on the new side
        return self.old_start + self.old_offset

    @property
    def end(self) -> int:
        """Position right after the affected region in new-content coordinates."""
        if self.new_end > self.new_start:
            return self.new_end
        return self.start

    @property
    def offset_after(self) -> int:
        return self.old_offset + (self.new_end - self.new_start) - (self.old_end - self.old_start)


def _to_regions(edit_script: Sequence[EditChange]) -> list[_ChangeRegion]:
    regions = []
    old_offset = 0
    for change in edit_script:
        regions.append(_ChangeRegion.from_change(change, old_offset))
        old_offset += change.new_line_count - change.old_line_count
    return regions


def partition_hunks(lines: Sequence[DiffLine]) -> list[Hunk]:
    """Split a flat line sequence into hunks at every separator.

    Separators are dropped, they only mark cut points.
    """
    hunks: list[Hunk] = []
    current: list[DiffLine] = []
    for line in lines:
        if line.kind is LineKind.SEPARATOR:
            if current:
                hunks.append(tuple(current))
                current = []
        else:
            current.append(line)
    if current:
        hunks.append(tuple(current))
    return hunks


class DiffHunkBuilder:
    """Builds context-windowed, mergeable hunks from an edit script.

    Args:
        context_lines: Unchanged lines shown before and after each change.
    """

    def __init__(self, context_lines: int = 3) -> None:
        if context_lines < 0:
            raise ValueError(f"context_lines cannot be negative, got {context_lines}")
        self.context_lines = context_lines

    def build(
        self,
        edit_script: Sequence[EditChange] | None,
        old_lines: Sequence[str],
        new_lines: Sequence[str],
    ) -> list[Hunk] | None:
        """Build display hunks.

        Args:
            edit_script: Changes from old to new, or None when the content
                has no baseline (a new file).
            old_lines: Full old content, split into lines.
            new_lines: Full new content, split into lines.

        Returns:
            Ordered hunks, or None for a new file without content.
        """
        if edit_script is None:
            if not new_lines:
                return None
            return [tuple(self._added_lines(new_lines, 0, len(new_lines)))]

        regions = _to_regions(edit_script)
        return partition_hunks(self._build_lines(regions, old_lines, new_lines))

    def _build_lines(
        self,
        regions: list[_ChangeRegion],
        old_lines: Sequence[str],
        new_lines: Sequence[str],
    ) -> list[DiffLine]:
        lines: list[DiffLine] = []
        if not regions:
            return lines

        context = self.context_lines
        first_start = regions[0].start
        lines.extend(
            self._context_lines(new_lines, first_start - context, first_start, delta=0)
        )

        for i, region in enumerate(regions):
            lines.extend(self._deleted_lines(old_lines, region.old_start, region.old_end))
            lines.extend(self._added_lines(new_lines, region.new_start, region.new_end))

            is_last = i == len(regions) - 1
            next_start = len(new_lines) if is_last else regions[i + 1].start
            gap = max(next_start - region.end, 0)
            delta = region.offset_after

            if gap <= context * 2:
                lines.extend(
                    self._context_lines(new_lines, region.end, region.end + gap, delta)
                )
            else:
                lines.extend(
                    self._context_lines(new_lines, region.end, region.end + context, delta)
                )
                lines.append(SEPARATOR)
                if not is_last:
                    lines.extend(
                        self._context_lines(new_lines, next_start - context, next_start, delta)
                    )

        return lines

    @staticmethod
    def _indices(contents: Sequence[str], start: int, end: int) -> range:
        # Never index past the available content
        return range(max(start, 0), min(end, len(contents)))

    def _deleted_lines(self, old_lines: Sequence[str], start: int, end: int) -> list[DiffLine]:
        return [
            DiffLine(LineKind.DELETED, old_line_number=i + 1, content=old_lines[i])
            for i in self._indices(old_lines, start, end)
        ]

    def _added_lines(self, new_lines: Sequence[str], start: int, end: int) -> list[DiffLine]:
        return [
            DiffLine(LineKind.ADDED, new_line_number=i + 1, content=new_lines[i])
            for i in self._indices(new_lines, start, end)
        ]

    def _context_lines(
        self, new_lines: Sequence[str], start: int, end: int, delta: int
    ) -> list[DiffLine]:
        return [
            DiffLine(
                LineKind.CONTEXT,
                old_line_number=i + 1 - delta,
                new_line_number=i + 1,
                content=new_lines[i],
            )
            for i in self._indices(new_lines, start, end)
        ]
