"""Utility helpers for working with corpus files."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Iterator, List


def is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def sorted_children(directory: Path) -> List[Path]:
    """Return visible children of a directory in name order."""
    return sorted(
        (child for child in directory.iterdir() if not is_hidden(child)),
        key=lambda child: child.name,
    )


def iter_corpus_files(root: Path) -> Iterator[Path]:
    """Yield every visible file below root, descending in sorted order."""
    for child in sorted_children(root):
        if child.is_dir():
            yield from iter_corpus_files(child)
        elif child.is_file():
            yield child


def corpus_fingerprint(root: Path) -> str:
    """Compute a SHA256 over relative path, size and mtime of every corpus file.

    Content is not read, so the fingerprint is cheap enough to poll.
    """
    sha = hashlib.sha256()
    for path in iter_corpus_files(root):
        try:
            stat = path.stat()
        except OSError:
            continue
        rel = path.relative_to(root).as_posix()
        sha.update(f"{rel}\0{stat.st_size}\0{stat.st_mtime_ns}\n".encode("utf-8"))
    return sha.hexdigest()


def is_readable_dir(path: Path) -> bool:
    return path.is_dir() and os.access(path, os.R_OK | os.X_OK)
