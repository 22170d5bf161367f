"""Core domain models and protocols."""
from .protocols import (
    Hasher,
    ProgressSink,
    FileOperations,
    RefreshHook,
    CancelCheck,
)
from .models import (
    SkipReason,
    FileEntry,
    MoveOperation,
    SkippedFile,
    MoveFailure,
    Plan,
    RunSummary,
    ExecutionLog,
    UndoResult,
)
from .config import (
    Category,
    CollisionPolicy,
    SortConfig,
    WINDOWS_PROTECTED_EXTENSIONS,
    LINUX_PROTECTED_EXTENSIONS,
    default_protected_extensions,
)
from .errors import (
    DeclutterError,
    ConfigurationError,
    UnreadableFileError,
    MoveFailureError,
    UndoSourceConflictError,
    FolderCreationError,
)

__all__ = [
    # Protocols
    "Hasher",
    "ProgressSink",
    "FileOperations",
    "RefreshHook",
    "CancelCheck",
    # Models
    "SkipReason",
    "FileEntry",
    "MoveOperation",
    "SkippedFile",
    "MoveFailure",
    "Plan",
    "RunSummary",
    "ExecutionLog",
    "UndoResult",
    # Config
    "Category",
    "CollisionPolicy",
    "SortConfig",
    "WINDOWS_PROTECTED_EXTENSIONS",
    "LINUX_PROTECTED_EXTENSIONS",
    "default_protected_extensions",
    # Errors
    "DeclutterError",
    "ConfigurationError",
    "UnreadableFileError",
    "MoveFailureError",
    "UndoSourceConflictError",
    "FolderCreationError",
]
