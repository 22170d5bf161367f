"""Domain models - immutable data classes."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class SkipReason(Enum):
    """Why a discovered file was not moved."""
    NO_EXTENSION = "no_extension"
    PROTECTED = "protected"
    UNREADABLE = "unreadable"
    ALREADY_PLACED = "already_placed"
    SOURCE_MISSING = "source_missing"


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A file discovered in the target directory.

    Snapshot taken at plan-build time; the file may change afterwards.
    """
    path: Path
    extension: str
    size: int

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True, slots=True)
class MoveOperation:
    """One pending or committed relocation."""
    source: Path
    destination: Path
    is_duplicate: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": str(self.source),
            "destination": str(self.destination),
            "is_duplicate": self.is_duplicate,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MoveOperation":
        return cls(
            source=Path(data["source"]),
            destination=Path(data["destination"]),
            is_duplicate=bool(data.get("is_duplicate", False)),
        )


@dataclass(frozen=True, slots=True)
class SkippedFile:
    """A discovered file left where it was."""
    path: Path
    reason: SkipReason
    detail: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MoveFailure:
    """A move that was attempted (or blocked) and did not happen."""
    operation: MoveOperation
    message: str


@dataclass(frozen=True, slots=True)
class Plan:
    """Intended moves and the folders they need, computed before any change."""
    directory: Path
    operations: tuple[MoveOperation, ...] = ()
    required_folders: tuple[Path, ...] = ()
    skipped: tuple[SkippedFile, ...] = ()
    discovered: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.operations

    @property
    def duplicate_count(self) -> int:
        return sum(1 for op in self.operations if op.is_duplicate)

    def skipped_for(self, reason: SkipReason) -> list[SkippedFile]:
        return [s for s in self.skipped if s.reason is reason]


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Post-run counts for the host to display."""
    discovered: int = 0
    moved: int = 0
    duplicates: int = 0
    skipped: int = 0
    unreadable: int = 0
    missing: int = 0
    failed: int = 0
    folders_created: int = 0
    cancelled: bool = False

    @property
    def is_success(self) -> bool:
        return self.failed == 0 and not self.cancelled

    def as_dict(self) -> dict[str, Any]:
        return {
            "discovered": self.discovered,
            "moved": self.moved,
            "duplicates": self.duplicates,
            "skipped": self.skipped,
            "unreadable": self.unreadable,
            "missing": self.missing,
            "failed": self.failed,
            "folders_created": self.folders_created,
            "cancelled": self.cancelled,
        }


@dataclass(slots=True)
class ExecutionLog:
    """Moves actually applied by one sort run, consumed by undo.

    ``created_folders`` is insertion-ordered and holds no duplicates.
    """
    directory: Optional[Path] = None
    discovered: int = 0
    moves: list[MoveOperation] = field(default_factory=list)
    created_folders: list[Path] = field(default_factory=list)
    failures: list[MoveFailure] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)
    failed_folders: list[Path] = field(default_factory=list)
    cancelled: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.moves and not self.created_folders

    def record_move(self, operation: MoveOperation) -> None:
        self.moves.append(operation)

    def record_folder(self, folder: Path) -> None:
        if folder not in self.created_folders:
            self.created_folders.append(folder)

    def folders_for_cleanup(self) -> list[Path]:
        """Created folders, longest path string first (approximately deepest first)."""
        return sorted(self.created_folders, key=lambda p: len(str(p)), reverse=True)

    def clear(self) -> None:
        self.moves.clear()
        self.created_folders.clear()
        self.failures.clear()
        self.skipped.clear()
        self.failed_folders.clear()
        self.discovered = 0
        self.cancelled = False

    def summary(self) -> RunSummary:
        return RunSummary(
            discovered=self.discovered,
            moved=len(self.moves),
            duplicates=sum(1 for m in self.moves if m.is_duplicate),
            skipped=len(self.skipped),
            unreadable=sum(1 for s in self.skipped if s.reason is SkipReason.UNREADABLE),
            missing=sum(1 for s in self.skipped if s.reason is SkipReason.SOURCE_MISSING),
            failed=len(self.failures),
            folders_created=len(self.created_folders),
            cancelled=self.cancelled,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the undo-relevant state (moves and created folders)."""
        return {
            "directory": str(self.directory) if self.directory else None,
            "discovered": self.discovered,
            "moves": [m.to_dict() for m in self.moves],
            "created_folders": [str(p) for p in self.created_folders],
            "cancelled": self.cancelled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExecutionLog":
        directory = data.get("directory")
        log = cls(
            directory=Path(directory) if directory else None,
            discovered=int(data.get("discovered", 0)),
            cancelled=bool(data.get("cancelled", False)),
        )
        for item in data.get("moves", []):
            log.record_move(MoveOperation.from_dict(item))
        for folder in data.get("created_folders", []):
            log.record_folder(Path(folder))
        return log


@dataclass(slots=True)
class UndoResult:
    """Outcome of an undo run."""
    restored: int = 0
    missing: int = 0
    failures: list[MoveFailure] = field(default_factory=list)
    removed_folders: list[Path] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def is_success(self) -> bool:
        return not self.failures
