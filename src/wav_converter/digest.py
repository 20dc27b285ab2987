"""Integrity digest helpers."""

from __future__ import annotations

from hashlib import sha256
from pathlib import Path


def digest_file(path: Path, *, chunk_size: int = 1 << 20) -> str:
    """Compute SHA-256 digest for file content."""
    hasher = sha256()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()
