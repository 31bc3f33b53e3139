"""File system port.

The working tree reads of the watchers and the status assembler go through
this interface so they can run against in-memory fakes.
"""

from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Read-only view of the working tree."""

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def read_prefix(self, path: Path, size: int) -> bytes:
        """Return at most ``size`` bytes from the start of a file.

        Used for binary classification, which never needs the whole file.

        Raises:
            FileNotFoundError: If the file vanished.
        """
        ...

    def read_text(self, path: Path) -> str:
        """Return the whole file decoded as UTF-8.

        Undecodable bytes are kept as lone surrogates (``surrogateescape``),
        so encoding the text back yields the original bytes. Line terminators
        are kept as they are on disk.

        Raises:
            FileNotFoundError: If the file vanished.
        """
        ...

    def list_dir(self, path: Path) -> list[Path]:
        """Children of a directory, sorted.

        Raises:
            OSError: If the directory cannot be listed.
        """
        ...
