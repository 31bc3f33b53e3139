"""FileSystem adapter over the local disk."""

from pathlib import Path


class LocalFileSystem:
    """Reads the working tree with pathlib.

    Stateless, so one instance may be shared by every watcher and the
    assembler's worker threads.
    """

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_prefix(self, path: Path, size: int) -> bytes:
        with path.open("rb") as f:
            return f.read(size)

    def read_text(self, path: Path) -> str:
        # Decode by hand so CRLF and lone CR survive for split_lines(); invalid
        # bytes round-trip through compute_edit_script() unchanged
        return path.read_bytes().decode("utf-8", errors="surrogateescape")

    def list_dir(self, path: Path) -> list[Path]:
        return sorted(path.iterdir())
