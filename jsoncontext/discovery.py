"""Expansion of configured inputs into concrete data files."""

from __future__ import annotations

import os
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterator, List

from .models import InputKind, InputSource
from .sampler import SourceReadError


def expand_input(source: InputSource) -> List[str]:
    """Return the data files an input refers to, in a stable order."""
    if source.kind is InputKind.FILE:
        return [source.path]
    if source.kind is InputKind.DIRECTORY:
        root = Path(source.path).expanduser()
        if not root.is_dir():
            raise SourceReadError(source.path, "directory not found")
        return sorted(_iter_matching(root, source.mask, source.recursive))
    return []


def _iter_matching(root: Path, mask: str, recursive: bool) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        if not recursive:
            dirnames[:] = []
        dirnames.sort()
        for filename in filenames:
            if fnmatch(filename, mask or "*"):
                yield str(Path(dirpath) / filename)


__all__ = ["expand_input"]
