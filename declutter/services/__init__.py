"""Service layer - scanning, planning, execution and undo."""
from .scanner import DesktopScanner
from .planner import PlanBuilder, find_unique_path
from .file_ops import FileManager, WindowsFileManager, create_file_manager
from .executor import PlanExecutor, NullProgress
from .undo import UndoEngine
from .refresh import (
    LinuxDesktopRefresher,
    WindowsDesktopRefresher,
    create_refresh_hook,
    noop_refresh,
    safe_refresh,
)
from .organizer import DesktopOrganizer
from .state import default_state_path, save_log, load_log, clear_log

__all__ = [
    "DesktopScanner",
    "PlanBuilder",
    "find_unique_path",
    "FileManager",
    "WindowsFileManager",
    "create_file_manager",
    "PlanExecutor",
    "NullProgress",
    "UndoEngine",
    "LinuxDesktopRefresher",
    "WindowsDesktopRefresher",
    "create_refresh_hook",
    "noop_refresh",
    "safe_refresh",
    "DesktopOrganizer",
    "default_state_path",
    "save_log",
    "load_log",
    "clear_log",
]
