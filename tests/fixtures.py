"""Test fixtures for file-moving tests.

Helpers that lay out a cluttered directory and record progress calls.
"""
from __future__ import annotations

import errno
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import patch

from declutter.core.models import FileEntry
from declutter.services.scanner import DesktopScanner


def write_file(directory: Path, name: str, size: int = 0, content: bytes | None = None) -> Path:
    """Create a file of ``size`` bytes (or with ``content``) and return its path."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    if content is None:
        # Name-derived filler keeps distinct files distinct
        seed = name.encode() or b"x"
        content = (seed * (size // len(seed) + 1))[:size]
    path.write_bytes(content)
    return path


def sorted_entries(directory: Path) -> list[FileEntry]:
    """Scanner output in name order, for deterministic discovery order."""
    return sorted(DesktopScanner().scan(directory), key=lambda e: e.name)


class RecordingProgress:
    """Progress sink that remembers every call."""

    def __init__(self):
        self.started = 0
        self.finished = 0
        self.totals: list[int] = []
        self.completed = 0

    def start(self) -> None:
        self.started += 1

    def set_total(self, total: int) -> None:
        self.totals.append(total)

    def increment(self, amount: int = 1) -> None:
        self.completed += amount

    def finish(self) -> None:
        self.finished += 1


@contextmanager
def mkdir_fails_for(*names: str):
    """Make ``Path.mkdir`` refuse folders with the given names."""
    real_mkdir = Path.mkdir

    def mkdir(self, *args, **kwargs):
        if self.name in names:
            raise PermissionError(errno.EACCES, "Permission denied", str(self))
        return real_mkdir(self, *args, **kwargs)

    with patch.object(Path, "mkdir", mkdir):
        yield
