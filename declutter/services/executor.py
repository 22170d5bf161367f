"""Plan execution service.

Applies a plan to the filesystem one move at a time and records exactly the
moves that happened, so they can be undone later.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..core.errors import FolderCreationError, MoveFailureError
from ..core.models import ExecutionLog, MoveFailure, MoveOperation, Plan, SkippedFile, SkipReason
from ..core.protocols import CancelCheck, FileOperations, ProgressSink, RefreshHook
from .file_ops import FileManager
from .refresh import noop_refresh, safe_refresh


logger = logging.getLogger(__name__)


class NullProgress:
    """Progress sink that ignores everything."""

    def start(self) -> None:
        pass

    def set_total(self, total: int) -> None:
        pass

    def increment(self, amount: int = 1) -> None:
        pass

    def finish(self) -> None:
        pass


class PlanExecutor:
    """Creates the plan's folders and performs its moves in order.

    File-level problems are recorded on the returned log and never stop the
    run. Only a plan whose required folders all fail to be created is
    treated as fatal.
    """

    def __init__(
        self,
        file_ops: Optional[FileOperations] = None,
        refresh: Optional[RefreshHook] = None,
    ):
        """Initialize the executor.

        Args:
            file_ops: Move and folder primitives.
            refresh: Called after every successful move.
        """
        self._file_ops = file_ops or FileManager()
        self._refresh = refresh or noop_refresh

    def execute(
        self,
        plan: Plan,
        progress: Optional[ProgressSink] = None,
        should_cancel: Optional[CancelCheck] = None,
    ) -> ExecutionLog:
        """Apply a plan.

        Args:
            plan: Moves and required folders.
            progress: Receives one step per discovered file.
            should_cancel: Checked before every move.

        Returns:
            Log of moves performed and folders created by this run.

        Raises:
            FolderCreationError: None of the required folders could be created.
        """
        progress = progress or NullProgress()
        log = ExecutionLog(directory=plan.directory, discovered=plan.discovered)
        log.skipped.extend(plan.skipped)

        progress.start()
        progress.set_total(plan.discovered)
        try:
            self._create_folders(plan, log)

            for operation in plan.operations:
                if should_cancel is not None and should_cancel():
                    log.cancelled = True
                    logger.info("Run cancelled after %d moves", len(log.moves))
                    break
                self._apply(operation, log)
                progress.increment()
            else:
                # Files without a move still count toward the scan size
                remaining = plan.discovered - len(plan.operations)
                if remaining > 0:
                    progress.increment(remaining)
        finally:
            progress.finish()

        logger.info(
            "Moved %d files (%d duplicates), %d failed, %d folders created",
            len(log.moves),
            sum(1 for m in log.moves if m.is_duplicate),
            len(log.failures),
            len(log.created_folders),
        )
        return log

    def _create_folders(self, plan: Plan, log: ExecutionLog) -> None:
        errors: list[FolderCreationError] = []
        for folder in plan.required_folders:
            try:
                for created in self._file_ops.ensure_directory(folder):
                    log.record_folder(created)
            except FolderCreationError as e:
                logger.warning("%s", e)
                for created in e.created:
                    log.record_folder(created)
                log.failed_folders.append(folder)
                errors.append(e)

        if plan.operations and errors and len(errors) == len(plan.required_folders):
            # Nothing will move and the log is dropped, so prune partial parents now
            for folder in log.folders_for_cleanup():
                self._file_ops.remove_empty_tree(folder)
            raise errors[0]

    def _apply(self, operation: MoveOperation, log: ExecutionLog) -> None:
        source, destination = operation.source, operation.destination

        if not source.exists():
            logger.debug("Source vanished before move: %s", source)
            log.skipped.append(SkippedFile(source, SkipReason.SOURCE_MISSING))
            return

        blocked = self._failed_ancestor(destination, log.failed_folders)
        if blocked is not None:
            log.failures.append(MoveFailure(operation, f"Folder unavailable: {blocked}"))
            return

        try:
            for created in self._file_ops.ensure_directory(destination.parent):
                log.record_folder(created)
            self._file_ops.move_file(source, destination)
        except (FolderCreationError, MoveFailureError) as e:
            if isinstance(e, FolderCreationError):
                for created in e.created:
                    log.record_folder(created)
            if not source.exists():
                log.skipped.append(SkippedFile(source, SkipReason.SOURCE_MISSING))
                return
            logger.warning("%s", e)
            log.failures.append(MoveFailure(operation, str(e)))
            return

        log.record_move(operation)
        logger.debug("Moved %s -> %s", source, destination)
        safe_refresh(self._refresh)

    @staticmethod
    def _failed_ancestor(destination: Path, failed: list[Path]) -> Optional[Path]:
        for folder in failed:
            if folder in destination.parents:
                return folder
        return None
