"""Content hash engine used for duplicate detection."""
from __future__ import annotations

import hashlib
from pathlib import Path

from ..core.errors import UnreadableFileError


DEFAULT_CHUNK_SIZE = 1024 * 1024


class Sha256Hasher:
    """Whole-file SHA-256 digest, read in fixed-size chunks.

    Large files are never loaded into memory at once.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """Initialize the hasher.

        Args:
            chunk_size: Bytes read per iteration.
        """
        if chunk_size < 1:
            raise ValueError("Chunk size must be at least 1")
        self._chunk_size = chunk_size

    @property
    def name(self) -> str:
        return "sha256"

    def compute_hash(self, path: Path) -> str:
        """Compute the hex digest for a file.

        Raises:
            UnreadableFileError: The file vanished or cannot be read.
        """
        digest = hashlib.sha256()
        try:
            with path.open("rb") as f:
                for chunk in iter(lambda: f.read(self._chunk_size), b""):
                    digest.update(chunk)
        except OSError as e:
            raise UnreadableFileError(path, e.strerror or str(e)) from e
        return digest.hexdigest()


def create_hasher(name: str = "sha256", chunk_size: int = DEFAULT_CHUNK_SIZE) -> Sha256Hasher:
    """Create a hasher by algorithm name."""
    if name.lower() != "sha256":
        raise ValueError(f"Unsupported hash algorithm: {name}")
    return Sha256Hasher(chunk_size=chunk_size)
