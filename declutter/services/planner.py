"""Move planning service.

Builds the full list of moves for a directory before anything on disk is
touched.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from ..core.config import CollisionPolicy, SortConfig
from ..core.errors import UnreadableFileError
from ..core.models import FileEntry, MoveOperation, Plan, SkippedFile, SkipReason
from ..core.protocols import Hasher
from ..engines.classifier import classify, subfolder_for
from ..engines.hash_engine import Sha256Hasher
from .scanner import DesktopScanner


logger = logging.getLogger(__name__)

MAX_RENAME_ATTEMPTS = 10_000


def find_unique_path(target: Path, claimed: set[Path]) -> Path:
    """First free ``name (n).ext`` variant of ``target``.

    A candidate is free when it is neither on disk nor already claimed by
    an earlier move in the same plan.
    """
    if target not in claimed and not target.exists():
        return target

    stem, suffix = target.stem, target.suffix
    for counter in range(1, MAX_RENAME_ATTEMPTS):
        candidate = target.with_name(f"{stem} ({counter}){suffix}")
        if candidate not in claimed and not candidate.exists():
            return candidate

    raise RuntimeError(f"No free file name for {target}")


class PlanBuilder:
    """Decides where every file of a directory goes.

    Duplicates are detected by content hash among the files of this run
    only; the first file seen with a given hash is the original.
    """

    def __init__(
        self,
        hasher: Optional[Hasher] = None,
        scanner: Optional[DesktopScanner] = None,
    ):
        """Initialize the builder.

        Args:
            hasher: Content hasher (SHA-256 by default).
            scanner: Directory lister.
        """
        self._hasher = hasher or Sha256Hasher()
        self._scanner = scanner or DesktopScanner()

    def build(self, directory: Path, config: SortConfig) -> Plan:
        """Scan ``directory`` once and plan every move."""
        entries = self._scanner.scan(directory)
        return self.build_from_entries(directory, entries, config)

    def build_from_entries(
        self,
        directory: Path,
        entries: Iterable[FileEntry],
        config: SortConfig,
    ) -> Plan:
        """Plan moves for an already-taken directory listing."""
        operations: list[MoveOperation] = []
        skipped: list[SkippedFile] = []
        required: dict[Path, None] = {}
        seen_hashes: dict[str, Path] = {}
        claimed: set[Path] = set()
        discovered = 0

        duplicates_dir = directory / config.duplicates_folder
        if config.duplicates_enabled:
            required[duplicates_dir] = None

        for entry in entries:
            discovered += 1

            if not entry.extension:
                skipped.append(SkippedFile(entry.path, SkipReason.NO_EXTENSION))
                continue
            if config.is_protected(entry.extension):
                skipped.append(SkippedFile(entry.path, SkipReason.PROTECTED))
                continue

            is_duplicate = False
            if config.duplicates_enabled:
                try:
                    digest = self._hasher.compute_hash(entry.path)
                except UnreadableFileError as e:
                    logger.warning("Skipping unreadable file: %s", e)
                    skipped.append(SkippedFile(entry.path, SkipReason.UNREADABLE, str(e)))
                    continue

                if digest in seen_hashes:
                    is_duplicate = True
                    logger.debug(
                        "%s duplicates %s", entry.name, seen_hashes[digest].name
                    )
                else:
                    seen_hashes[digest] = entry.path

            if is_duplicate:
                destination = duplicates_dir / entry.name
            else:
                category = classify(entry.extension)
                folder = directory / subfolder_for(category, entry.extension, entry.size, config)
                destination = folder / entry.name

            if destination == entry.path:
                skipped.append(SkippedFile(entry.path, SkipReason.ALREADY_PLACED))
                continue

            if config.collision_policy is CollisionPolicy.RENAME:
                destination = find_unique_path(destination, claimed)
            claimed.add(destination)

            required[destination.parent] = None
            operations.append(MoveOperation(
                source=entry.path,
                destination=destination,
                is_duplicate=is_duplicate,
            ))

        plan = Plan(
            directory=directory,
            operations=tuple(operations),
            required_folders=tuple(required),
            skipped=tuple(skipped),
            discovered=discovered,
        )
        logger.info(
            "Planned %d moves (%d duplicates) for %d files in %s",
            len(plan.operations),
            plan.duplicate_count,
            discovered,
            directory,
        )
        return plan
