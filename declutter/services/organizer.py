"""Desktop organizer - wires planning, execution and undo together.

Holds the single execution log that a later undo consumes. Running a new
sort replaces it, so only the most recent sort can be undone.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..core.config import SortConfig
from ..core.models import ExecutionLog, Plan, RunSummary, UndoResult
from ..core.protocols import CancelCheck, FileOperations, Hasher, ProgressSink, RefreshHook
from ..engines.hash_engine import Sha256Hasher
from .executor import NullProgress, PlanExecutor
from .file_ops import create_file_manager
from .planner import PlanBuilder
from .refresh import noop_refresh
from .scanner import DesktopScanner
from .undo import UndoEngine


logger = logging.getLogger(__name__)


class DesktopOrganizer:
    """Sorts one directory and can undo the latest sort.

    Usage:
        organizer = DesktopOrganizer(Path.home() / "Desktop")
        summary = organizer.sort(SortConfig())
        ...
        organizer.undo()

    One instance runs one operation at a time; a nested call raises
    RuntimeError. Callers on several threads must serialize themselves.
    """

    def __init__(
        self,
        directory: Path,
        hasher: Optional[Hasher] = None,
        file_ops: Optional[FileOperations] = None,
        refresh: Optional[RefreshHook] = None,
        progress: Optional[ProgressSink] = None,
        scanner: Optional[DesktopScanner] = None,
    ):
        """Initialize the organizer.

        Args:
            directory: Directory to sort.
            hasher: Content hasher for duplicate detection.
            file_ops: Move and folder primitives (platform adapter by default).
            refresh: Desktop refresh hook, no-op by default.
            progress: Progress sink for sort and undo runs.
            scanner: Directory lister.
        """
        self._directory = directory
        self._progress = progress or NullProgress()
        file_ops = file_ops or create_file_manager()
        refresh = refresh or noop_refresh

        self._planner = PlanBuilder(hasher or Sha256Hasher(), scanner or DesktopScanner())
        self._executor = PlanExecutor(file_ops, refresh)
        self._undo = UndoEngine(file_ops, refresh)

        self._log: Optional[ExecutionLog] = None
        self._busy = False

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def last_log(self) -> Optional[ExecutionLog]:
        return self._log

    @property
    def can_undo(self) -> bool:
        return self._log is not None and not self._log.is_empty

    @property
    def busy(self) -> bool:
        return self._busy

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if self._busy:
            raise RuntimeError("A sort or undo is already running")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def plan(self, config: SortConfig) -> Plan:
        """Compute the moves a sort would perform, without touching anything."""
        return self._planner.build(self._directory, config)

    def sort(
        self,
        config: SortConfig,
        should_cancel: Optional[CancelCheck] = None,
    ) -> RunSummary:
        """Plan and apply a sort, replacing any previous undo log."""
        with self._exclusive():
            self._log = None
            plan = self._planner.build(self._directory, config)
            self._log = self._executor.execute(plan, self._progress, should_cancel)
            return self._log.summary()

    def undo(self) -> UndoResult:
        """Revert the latest sort; a no-op result when there is nothing to undo."""
        with self._exclusive():
            if self._log is None:
                logger.info("Nothing to undo")
                return UndoResult()
            result = self._undo.undo(self._log, self._progress)
            self._log = None
            return result

    def restore_log(self, log: ExecutionLog) -> None:
        """Adopt a log saved by the host, making it the one undo consumes."""
        if self._busy:
            raise RuntimeError("A sort or undo is already running")
        self._log = log
