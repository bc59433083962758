"""
Utility functions for program_docs.
"""

from __future__ import annotations

import os
import shutil
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Iterable, Iterator


def should_exclude(path: Path, exclude_patterns: Iterable[str]) -> bool:
    """
    Check if path should be excluded based on patterns.

    Args:
        path: Path to check.
        exclude_patterns: Patterns containing '*' are matched against the
            file name as globs; others match any path component exactly.

    Returns:
        True if the path should be excluded.
    """
    parts = Path(path).parts
    for pattern in exclude_patterns:
        if "*" in pattern:
            if fnmatch(Path(path).name, pattern):
                return True
        elif pattern in parts:
            return True
    return False


def iter_source_files(
    root: Path,
    recursive: bool = False,
    exclude: Iterable[str] = (),
) -> Iterator[str]:
    """
    Yield source files below root as sorted POSIX relative paths.

    Args:
        root: Directory to list.
        recursive: Descend into subdirectories.
        exclude: Exclusion patterns (see should_exclude).
    """
    exclude = list(exclude)
    found = []

    if recursive:
        for dirpath, dirs, files in os.walk(root):
            rel_dir = Path(dirpath).relative_to(root)
            # Filter out excluded directories
            dirs[:] = [d for d in dirs if not should_exclude(rel_dir / d, exclude)]
            for filename in files:
                rel = rel_dir / filename
                if not should_exclude(rel, exclude):
                    found.append(rel.as_posix())
    else:
        for entry in root.iterdir():
            if entry.is_file() and not should_exclude(Path(entry.name), exclude):
                found.append(entry.name)

    yield from sorted(found)


def read_text(filepath: Path) -> str:
    """
    Read a text file, replacing undecodable bytes.

    Args:
        filepath: Path to the file.

    Returns:
        File content.

    Raises:
        OSError: If the file can't be read.
    """
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def write_text(filepath: Path, content: str) -> None:
    """Write a UTF-8 text file, creating parent directories."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(content)


def copy_file(source: Path, destination: Path) -> None:
    """Copy file bytes and metadata, creating parent directories."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)


def remove_tree(path: Path) -> bool:
    """
    Remove a directory tree if it exists.

    Returns:
        True if something was removed.
    """
    if not path.exists():
        return False
    if path.is_dir():
        shutil.rmtree(path)
    else:
        path.unlink()
    return True
