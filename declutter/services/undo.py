"""Undo service - reverts the moves of an execution log."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..core.errors import FolderCreationError, MoveFailureError, UndoSourceConflictError
from ..core.models import ExecutionLog, MoveFailure, MoveOperation, UndoResult
from ..core.protocols import FileOperations, ProgressSink, RefreshHook
from .executor import NullProgress
from .file_ops import FileManager
from .refresh import noop_refresh, safe_refresh


logger = logging.getLogger(__name__)


class UndoEngine:
    """Replays an execution log backwards, then prunes created folders.

    Files the user removed since the sort are skipped silently. A file is
    never moved back over something now occupying its original path.
    """

    def __init__(
        self,
        file_ops: Optional[FileOperations] = None,
        refresh: Optional[RefreshHook] = None,
    ):
        self._file_ops = file_ops or FileManager()
        self._refresh = refresh or noop_refresh

    def undo(
        self,
        log: ExecutionLog,
        progress: Optional[ProgressSink] = None,
    ) -> UndoResult:
        """Restore every logged move and delete created folders left empty.

        The log is cleared once the run completes.
        """
        progress = progress or NullProgress()
        result = UndoResult()

        progress.start()
        progress.set_total(len(log.moves))
        try:
            for operation in reversed(log.moves):
                self._restore(operation, result)
                progress.increment()

            for folder in log.folders_for_cleanup():
                result.removed_folders.extend(
                    self._file_ops.remove_empty_tree(folder, on_removed=self._on_removed)
                )
        finally:
            progress.finish()

        log.clear()
        logger.info(
            "Restored %d files (%d missing, %d failed), removed %d folders",
            result.restored,
            result.missing,
            result.failed,
            len(result.removed_folders),
        )
        return result

    def _restore(self, operation: MoveOperation, result: UndoResult) -> None:
        source, destination = operation.source, operation.destination
        if not destination.exists():
            logger.debug("Already gone, skipping: %s", destination)
            result.missing += 1
            return

        try:
            if source.exists():
                raise UndoSourceConflictError(
                    destination, source, "Original location is occupied"
                )
            self._file_ops.ensure_directory(source.parent)
            self._file_ops.move_file(destination, source, overwrite=False)
        except (FolderCreationError, MoveFailureError) as e:
            logger.warning("%s", e)
            result.failures.append(MoveFailure(operation, str(e)))
            return

        result.restored += 1
        logger.debug("Restored %s -> %s", destination, source)
        safe_refresh(self._refresh)

    def _on_removed(self, folder: Path) -> None:
        logger.debug("Removed empty folder %s", folder)
        safe_refresh(self._refresh)
