"""File operations service.

Move and folder primitives behind the FileOperations protocol, with one
adapter per platform.
"""
from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
import sys
from pathlib import Path
from typing import Callable, Optional

from ..core.errors import FolderCreationError, MoveFailureError


logger = logging.getLogger(__name__)


class FileManager:
    """Portable moves and folder handling.

    ``move_file`` behaves like copy-then-delete, is all-or-nothing from the
    caller's point of view and replaces an existing target unless told not
    to.
    """

    def move_file(self, source: Path, target: Path, overwrite: bool = True) -> None:
        """Move a file.

        Args:
            source: File to move.
            target: Full destination path (not a directory).
            overwrite: Replace an existing target silently.

        Raises:
            MoveFailureError: Nothing was moved.
        """
        if not source.exists():
            raise MoveFailureError(source, target, "Source not found")
        if target.exists() and not overwrite:
            raise MoveFailureError(source, target, "Destination exists")

        try:
            self._prepare_target(target)
            os.replace(source, target)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise MoveFailureError(source, target, e.strerror or str(e)) from e
            self._move_across_devices(source, target)

    def _prepare_target(self, target: Path) -> None:
        """Hook for platform adapters before an existing target is replaced."""

    def _move_across_devices(self, source: Path, target: Path) -> None:
        """Copy to a temporary sibling, swap it in, then drop the source."""
        temp = target.with_name(f".{target.name}.declutter-tmp")
        try:
            shutil.copy2(source, temp)
            os.replace(temp, target)
        except OSError as e:
            temp.unlink(missing_ok=True)
            raise MoveFailureError(source, target, e.strerror or str(e)) from e

        try:
            source.unlink()
        except OSError as e:
            # The copy is in place; leaving the source keeps both copies
            logger.warning("Moved %s but could not delete the original: %s", source, e)

    def ensure_directory(self, path: Path) -> list[Path]:
        """Ensure a directory exists.

        Returns:
            Directories that did not exist before, outermost first.

        Raises:
            FolderCreationError: The directory cannot be created. Levels
                made before the failure are listed on its ``created``.
        """
        missing: list[Path] = []
        current = path
        while not current.exists():
            missing.append(current)
            if current.parent == current:
                break
            current = current.parent

        if not missing:
            if not path.is_dir():
                raise FolderCreationError(path, "A file with that name exists")
            return []

        missing.reverse()
        created: list[Path] = []
        for folder in missing:
            try:
                folder.mkdir()
            except FileExistsError:
                # Created concurrently; only a folder will do
                if not folder.is_dir():
                    raise FolderCreationError(path, "A file with that name exists", created)
                continue
            except OSError as e:
                raise FolderCreationError(path, e.strerror or str(e), created) from e
            created.append(folder)
        return created

    def remove_empty_tree(
        self,
        path: Path,
        on_removed: Optional[Callable[[Path], None]] = None,
    ) -> list[Path]:
        """Delete empty subfolders bottom-up, then ``path`` if it is empty.

        Folders that still hold anything are left in place.

        Returns:
            Folders that were deleted, deepest first.
        """
        removed: list[Path] = []
        if not path.is_dir() or path.is_symlink():
            return removed

        try:
            children = list(path.iterdir())
        except OSError as e:
            logger.debug("Cannot list %s: %s", path, e)
            return removed

        for child in children:
            if child.is_dir() and not child.is_symlink():
                removed.extend(self.remove_empty_tree(child, on_removed))

        try:
            if any(path.iterdir()):
                return removed
            path.rmdir()
        except OSError as e:
            logger.debug("Cannot remove %s: %s", path, e)
            return removed

        removed.append(path)
        if on_removed is not None:
            on_removed(path)
        return removed


class WindowsFileManager(FileManager):
    """Windows adapter.

    Replacing a read-only file fails on Windows, so the attribute is cleared
    on an existing target first.
    """

    def _prepare_target(self, target: Path) -> None:
        try:
            mode = target.stat().st_mode
        except FileNotFoundError:
            return
        if not mode & stat.S_IWRITE:
            os.chmod(target, mode | stat.S_IWRITE)


def create_file_manager(platform: Optional[str] = None) -> FileManager:
    """Create the file manager for a platform (defaults to the running one)."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WindowsFileManager()
    return FileManager()
