"""Working tree discovery for CLI paths."""

import subprocess
from pathlib import Path


def find_git_root(start_path: Path | None = None) -> Path | None:
    """Return the top level of the working tree containing start_path.

    Args:
        start_path: Any file or directory inside the tree (default: CWD).

    Returns:
        Resolved working tree root, or None outside a working tree (including
        the inside of a control directory, or when git is not installed).
    """
    start = start_path if start_path is not None else Path.cwd()
    if start.is_file():
        start = start.parent

    try:
        result = subprocess.run(
            ["git", "-C", str(start), "rev-parse", "--show-toplevel"],
            capture_output=True,
            check=True,
            text=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        return None
    toplevel = result.stdout.strip()
    return Path(toplevel).resolve() if toplevel else None
