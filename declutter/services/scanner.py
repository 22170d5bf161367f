"""Directory scanning service."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from ..core.errors import ConfigurationError
from ..core.models import FileEntry
from ..engines.classifier import extension_of


logger = logging.getLogger(__name__)


class DesktopScanner:
    """Lists the files directly inside a directory.

    Subdirectories are never entered. The order is whatever the filesystem
    enumerates, taken from a single listing call.
    """

    def __init__(self, follow_symlinks: bool = False):
        """Initialize the scanner.

        Args:
            follow_symlinks: Whether symlinked files are candidates.
        """
        self._follow_symlinks = follow_symlinks

    def scan(self, directory: Path) -> list[FileEntry]:
        """Snapshot the immediate files of ``directory``.

        Raises:
            ConfigurationError: The directory does not exist.
        """
        if not directory.is_dir():
            raise ConfigurationError(f"Target directory does not exist: {directory}")

        entries: list[FileEntry] = []
        with os.scandir(directory) as it:
            for dir_entry in it:
                try:
                    if dir_entry.is_symlink() and not self._follow_symlinks:
                        continue
                    if not dir_entry.is_file(follow_symlinks=self._follow_symlinks):
                        continue
                    size = dir_entry.stat(follow_symlinks=self._follow_symlinks).st_size
                except OSError as e:
                    # Vanished or unreadable between listing and stat
                    logger.debug("Skipping %s: %s", dir_entry.path, e)
                    continue

                path = Path(dir_entry.path)
                entries.append(FileEntry(
                    path=path,
                    extension=extension_of(path.name),
                    size=size,
                ))

        logger.debug("Scanned %d files in %s", len(entries), directory)
        return entries
