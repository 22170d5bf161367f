"""Classification and hash engines."""
from .classifier import classify, extension_of, normalize_extension, size_bucket, subfolder_for
from .hash_engine import Sha256Hasher, create_hasher

__all__ = [
    "classify",
    "extension_of",
    "normalize_extension",
    "size_bucket",
    "subfolder_for",
    "Sha256Hasher",
    "create_hasher",
]
