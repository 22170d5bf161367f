"""Shared fixtures for declutter tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from declutter.core.config import SortConfig

from .fixtures import RecordingProgress


@pytest.fixture
def desktop(tmp_path: Path) -> Path:
    """An empty directory standing in for the desktop."""
    path = tmp_path / "Desktop"
    path.mkdir()
    return path


@pytest.fixture
def config() -> SortConfig:
    """Default folder names, duplicates on, a small protected set."""
    return SortConfig(protected_extensions=frozenset({"lnk", "ini", "desktop"}))


@pytest.fixture
def progress() -> RecordingProgress:
    return RecordingProgress()
