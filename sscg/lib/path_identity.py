"""Decide whether two output paths name the same file on disk."""

import os
from pathlib import Path

from .errors import PathResolutionError


def _resolve(path: Path | str) -> Path:
    """Return the absolute, symlink-free form of path.

    Raises:
        PathResolutionError: If the parent directory is missing or cannot be inspected
    """
    absolute = Path(path).expanduser().absolute()
    parent = absolute.parent
    try:
        if not parent.is_dir():
            raise PathResolutionError(f"parent directory does not exist: {parent}")
        return absolute.resolve(strict=False)
    except OSError as e:
        raise PathResolutionError(f"cannot resolve {absolute}: {e}") from e


def same_file(path_a: Path | str, path_b: Path | str) -> bool:
    """Return True if path_a and path_b denote the same underlying file.

    Relative paths are taken against the working directory and symlinks are
    followed. When both files exist they are compared by device and inode, so
    hard links also match; otherwise the resolved absolute paths are compared.

    Raises:
        PathResolutionError: If either path's parent directory is missing or inaccessible
    """
    resolved_a = _resolve(path_a)
    resolved_b = _resolve(path_b)

    try:
        if resolved_a.exists() and resolved_b.exists():
            return os.path.samefile(resolved_a, resolved_b)
    except OSError as e:
        raise PathResolutionError(f"cannot compare {resolved_a} and {resolved_b}: {e}") from e

    return resolved_a == resolved_b
