"""Protocol definitions (interfaces) for dependency injection."""
from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Callable, Optional, Protocol


# Fire-and-forget callback run after every filesystem change.
RefreshHook = Callable[[], None]

# Polled between steps; returning True stops the run cleanly.
CancelCheck = Callable[[], bool]


class Hasher(Protocol):
    """Interface for computing whole-file content digests.

    Implementations:
    - Sha256Hasher: streams the file through hashlib.sha256
    """

    @abstractmethod
    def compute_hash(self, path: Path) -> str:
        """Digest of the full file content.

        Raises:
            UnreadableFileError: The file cannot be opened or read.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Algorithm name for logging."""
        ...


class ProgressSink(Protocol):
    """Interface for progress reporting, owned by the host."""

    @abstractmethod
    def start(self) -> None:
        """A sort or undo run is starting."""
        ...

    @abstractmethod
    def set_total(self, total: int) -> None:
        """Number of steps the run will report."""
        ...

    @abstractmethod
    def increment(self, amount: int = 1) -> None:
        """Advance by ``amount`` steps."""
        ...

    @abstractmethod
    def finish(self) -> None:
        """The run has ended (normally or not)."""
        ...


class FileOperations(Protocol):
    """Interface for the move and folder primitives."""

    @abstractmethod
    def move_file(self, source: Path, target: Path, overwrite: bool = True) -> None:
        """Move a file, all-or-nothing.

        Raises:
            MoveFailureError: The move did not happen.
        """
        ...

    @abstractmethod
    def ensure_directory(self, path: Path) -> list[Path]:
        """Create a directory and missing parents.

        Returns:
            Directories that were newly created, outermost first.

        Raises:
            FolderCreationError: The directory cannot be created.
        """
        ...

    @abstractmethod
    def remove_empty_tree(
        self,
        path: Path,
        on_removed: Optional[Callable[[Path], None]] = None,
    ) -> list[Path]:
        """Delete empty subfolders bottom-up, then ``path`` if it ends up empty.

        Returns:
            Folders that were deleted.
        """
        ...
