"""
walker.py

Responsibility: Enumerate the files of a template tree.

Excluded directory names (version-control metadata by default) are pruned at
every depth. Output is sorted by relative POSIX path so runs are reproducible.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Iterable

from gitscaffold.errors import WalkError

DEFAULT_EXCLUDE = (".git",)


def walk(source_root: str | Path, exclude: Iterable[str] = DEFAULT_EXCLUDE) -> list[Path]:
    """
    Return all files under source_root, in deterministic lexicographic order.

    Raises WalkError if the root is missing or any directory cannot be read;
    nothing discovered before the error is returned.
    """
    root = Path(source_root)
    if not root.is_dir():
        raise WalkError(f"Source directory not found: {root}")

    excluded = frozenset(exclude)

    def _raise(err: OSError) -> None:
        raise WalkError(f"Cannot read {err.filename}: {err.strerror or err}") from err

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = [d for d in dirnames if d not in excluded]
        base = Path(dirpath)
        files.extend(base / name for name in filenames)
    files.sort(key=lambda p: p.relative_to(root).as_posix())
    return files


async def walk_async(source_root: str | Path, exclude: Iterable[str] = DEFAULT_EXCLUDE) -> list[Path]:
    return await asyncio.to_thread(walk, source_root, tuple(exclude))
