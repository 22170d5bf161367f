"""Extension-based classification.

Maps a file extension to a category and builds the relative subfolder a
file belongs in.
"""
from __future__ import annotations

from pathlib import PurePath

from ..core.config import Category, SortConfig


IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "bmp", "tiff"})

VIDEO_EXTENSIONS = frozenset({"mp4", "mkv", "avi", "mov", "wmv"})

MUSIC_EXTENSIONS = frozenset({"mp3", "wav", "flac", "aac"})

# Files of at least this many bytes go to the "Large" bucket.
SIZE_THRESHOLD = 1024 * 1024

SMALL_BUCKET = "Small"
LARGE_BUCKET = "Large"


def normalize_extension(extension: str) -> str:
    """Lowercase and strip the leading dot(s)."""
    return extension.strip().lstrip(".").lower()


def extension_of(name: str) -> str:
    """Normalized text after the last dot of a file name.

    A leading dot counts, so ``.notes`` has the extension ``notes``. Names
    without a dot or ending in one have none.
    """
    if "." not in name:
        return ""
    return normalize_extension(name.rpartition(".")[2])


def classify(extension: str) -> Category:
    """Category for an extension; anything unlisted is OTHER."""
    ext = normalize_extension(extension)
    if ext in IMAGE_EXTENSIONS:
        return Category.IMAGES
    if ext in VIDEO_EXTENSIONS:
        return Category.VIDEO
    if ext in MUSIC_EXTENSIONS:
        return Category.MUSIC
    return Category.OTHER


def size_bucket(size: int) -> str:
    return SMALL_BUCKET if size < SIZE_THRESHOLD else LARGE_BUCKET


def subfolder_for(
    category: Category,
    extension: str,
    size: int,
    config: SortConfig,
) -> PurePath:
    """Relative folder for a file.

    Images, music and video are grouped per uppercased extension
    (``Images/PNG``). Everything else is split by size first, then by
    lowercased extension (``Other/Small/xyz``).
    """
    ext = normalize_extension(extension)
    main = PurePath(config.folder_for(category))
    if category is Category.OTHER:
        return main / size_bucket(size) / ext
    return main / ext.upper()
