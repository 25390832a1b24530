"""Directory enumeration for built artifacts."""

from __future__ import annotations

import os
from pathlib import Path


def get_files_in_dir(path: str | Path) -> list[str]:
    """
    List every file below ``path``, depth first, each directory sorted.

    Args:
        path: Directory to enumerate

    Returns:
        File paths, each prefixed with ``path``

    Raises:
        FileNotFoundError: ``path`` does not exist
        NotADirectoryError: ``path`` is a file
    """
    root = Path(path)
    if not root.exists():
        raise FileNotFoundError(f"No such directory: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            files.append(os.path.join(dirpath, filename))
    return files
