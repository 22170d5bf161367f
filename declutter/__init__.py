"""Desktop decluttering package.

Sorts the files of one directory into type folders, moves byte-identical
duplicates aside and can undo the latest sort.
"""

__version__ = "1.0.0"

# Core exports
from .core.config import SortConfig, Category, CollisionPolicy
from .core.models import (
    FileEntry,
    MoveOperation,
    Plan,
    ExecutionLog,
    RunSummary,
    UndoResult,
    SkipReason,
)
from .core.protocols import Hasher, ProgressSink, FileOperations
from .core.errors import (
    DeclutterError,
    ConfigurationError,
    UnreadableFileError,
    MoveFailureError,
    UndoSourceConflictError,
    FolderCreationError,
)

# Engine exports
from .engines.classifier import classify, subfolder_for
from .engines.hash_engine import Sha256Hasher, create_hasher

# Service exports
from .services.scanner import DesktopScanner
from .services.planner import PlanBuilder
from .services.executor import PlanExecutor
from .services.undo import UndoEngine
from .services.file_ops import FileManager, create_file_manager
from .services.organizer import DesktopOrganizer

# Logging exports
from .logging.rich_logger import RichProgressReporter

__all__ = [
    # Core
    "SortConfig",
    "Category",
    "CollisionPolicy",
    "FileEntry",
    "MoveOperation",
    "Plan",
    "ExecutionLog",
    "RunSummary",
    "UndoResult",
    "SkipReason",
    "Hasher",
    "ProgressSink",
    "FileOperations",
    "DeclutterError",
    "ConfigurationError",
    "UnreadableFileError",
    "MoveFailureError",
    "UndoSourceConflictError",
    "FolderCreationError",
    # Engines
    "classify",
    "subfolder_for",
    "Sha256Hasher",
    "create_hasher",
    # Services
    "DesktopScanner",
    "PlanBuilder",
    "PlanExecutor",
    "UndoEngine",
    "FileManager",
    "create_file_manager",
    "DesktopOrganizer",
    # Logging
    "RichProgressReporter",
]
