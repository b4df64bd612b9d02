"""Filesystem helpers."""

from __future__ import annotations

import hashlib
import os
import shutil
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "sha256_file", "same_path"]

_CHUNK_SIZE = 1024 * 1024


def sha256_file(path: Path) -> str:
    """Lowercase hex sha256 of the file, read in 1 MiB chunks.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def same_path(a: Path, b: Path) -> bool:
    """True when both paths resolve to the same location."""
    return a.resolve() == b.resolve()


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Replace ``path`` with ``content`` in one step (temp file + rename).

    Readers see either the old or the new file, never a truncated one.
    """
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            # mkstemp creates 0600 files; keep the original permissions.
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)
