"""Error taxonomy for sorting and undo runs.

File-level errors are recorded on the plan or execution log and never abort
a run. Only configuration errors and a total failure to create the required
folders are raised to the caller.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class DeclutterError(Exception):
    """Base class for all declutter errors."""


class ConfigurationError(DeclutterError, ValueError):
    """Configuration is incomplete or ambiguous."""


class UnreadableFileError(DeclutterError):
    """A file could not be opened or read while hashing."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Cannot read {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MoveFailureError(DeclutterError):
    """A move could not be completed."""

    def __init__(self, source: Path, target: Path, reason: str = ""):
        self.source = source
        self.target = target
        self.reason = reason
        message = f"Cannot move {source} -> {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UndoSourceConflictError(MoveFailureError):
    """The original location of a file is occupied by another file."""


class FolderCreationError(DeclutterError):
    """A required folder could not be created.

    ``created`` lists the parent folders made before the failure, outermost
    first.
    """

    def __init__(self, path: Path, reason: str = "", created: Optional[list[Path]] = None):
        self.path = path
        self.reason = reason
        self.created = list(created or [])
        message = f"Cannot create folder {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
