"""Tests for undoing a sort."""
from pathlib import Path
from unittest.mock import MagicMock

from declutter.core.config import SortConfig
from declutter.core.errors import MoveFailureError
from declutter.core.models import ExecutionLog
from declutter.services.executor import PlanExecutor
from declutter.services.file_ops import FileManager
from declutter.services.planner import PlanBuilder
from declutter.services.undo import UndoEngine

from .fixtures import sorted_entries, write_file


def sort(desktop: Path, config: SortConfig) -> ExecutionLog:
    plan = PlanBuilder().build_from_entries(desktop, sorted_entries(desktop), config)
    return PlanExecutor().execute(plan)


def snapshot(directory: Path) -> dict[str, bytes]:
    """Relative path to content for every file under ``directory``."""
    return {
        p.relative_to(directory).as_posix(): p.read_bytes()
        for p in directory.rglob("*")
        if p.is_file()
    }


class TestUndoEngine:
    """Tests for UndoEngine."""

    def test_round_trip_restores_directory(self, desktop: Path, config: SortConfig, progress):
        """Sort then undo leaves the directory exactly as it was."""
        write_file(desktop, "a.png", content=b"same")
        write_file(desktop, "b.png", content=b"same")
        write_file(desktop, "c.xyz", 500 * 1024)
        write_file(desktop, "song.mp3", 64)
        write_file(desktop, "readme", 10)
        before = snapshot(desktop)

        log = sort(desktop, config)
        result = UndoEngine().undo(log, progress)

        assert snapshot(desktop) == before
        assert sorted(p.name for p in desktop.iterdir()) == sorted(before)
        assert result.restored == 4
        assert result.is_success
        assert progress.totals == [4]
        assert progress.completed == 4

    def test_log_cleared_after_undo(self, desktop: Path, config: SortConfig):
        write_file(desktop, "a.png", 4)
        log = sort(desktop, config)

        UndoEngine().undo(log)

        assert log.is_empty

    def test_file_removed_by_user_is_skipped(self, desktop: Path, config: SortConfig):
        """Deleted files are counted as missing, not as errors."""
        write_file(desktop, "a.png", 4)
        write_file(desktop, "b.txt", 4)
        log = sort(desktop, config)
        (desktop / "Images" / "PNG" / "a.png").unlink()

        result = UndoEngine().undo(log)

        assert result.restored == 1
        assert result.missing == 1
        assert result.failed == 0
        assert (desktop / "b.txt").exists()
        assert not (desktop / "Images").exists()

    def test_occupied_source_not_overwritten(self, desktop: Path, config: SortConfig):
        """A new file at the original path is kept and the move back fails."""
        write_file(desktop, "a.png", content=b"sorted")
        log = sort(desktop, config)
        write_file(desktop, "a.png", content=b"newer")

        result = UndoEngine().undo(log)

        assert result.restored == 0
        [failure] = result.failures
        assert "occupied" in failure.message
        assert (desktop / "a.png").read_bytes() == b"newer"
        assert (desktop / "Images" / "PNG" / "a.png").read_bytes() == b"sorted"
        assert (desktop / "Images" / "PNG").is_dir()

    def test_user_files_keep_folders(self, desktop: Path, config: SortConfig):
        """Created folders holding files added later are not removed."""
        write_file(desktop, "a.png", 4)
        log = sort(desktop, config)
        write_file(desktop, "Images/PNG/mine.png", 4)

        result = UndoEngine().undo(log)

        assert (desktop / "a.png").exists()
        assert (desktop / "Images" / "PNG" / "mine.png").exists()
        assert desktop / "Images" not in result.removed_folders
        assert desktop / "Duplicates" in result.removed_folders

    def test_preexisting_folders_kept(self, desktop: Path, config: SortConfig):
        """Folders that existed before the sort are never deleted."""
        (desktop / "Images").mkdir()
        write_file(desktop, "a.png", 4)
        log = sort(desktop, config)

        UndoEngine().undo(log)

        assert (desktop / "Images").is_dir()
        assert not (desktop / "Images" / "PNG").exists()

    def test_moves_undone_in_reverse(self, desktop: Path, config: SortConfig):
        """Later moves are reverted first."""
        write_file(desktop, "a.txt", 4)
        write_file(desktop, "b.txt", 4)
        log = sort(desktop, config)
        order = []

        class Recording(FileManager):
            def move_file(self, source, target, overwrite=True):
                order.append(target.name)
                super().move_file(source, target, overwrite)

        UndoEngine(file_ops=Recording()).undo(log)

        assert order == ["b.txt", "a.txt"]

    def test_failed_restore_does_not_stop_others(self, desktop: Path, config: SortConfig):
        write_file(desktop, "a.txt", 4)
        write_file(desktop, "b.txt", 4)
        log = sort(desktop, config)

        class Locked(FileManager):
            def move_file(self, source, target, overwrite=True):
                if target.name == "b.txt":
                    raise MoveFailureError(source, target, "File is locked")
                super().move_file(source, target, overwrite)

        result = UndoEngine(file_ops=Locked()).undo(log)

        assert result.restored == 1
        assert result.failed == 1
        assert (desktop / "a.txt").exists()

    def test_refresh_called(self, desktop: Path, config: SortConfig):
        """Refresh runs after each restore and each removed folder."""
        write_file(desktop, "a.txt", 4)
        log = sort(desktop, config)
        refresh = MagicMock()

        result = UndoEngine(refresh=refresh).undo(log)

        assert refresh.call_count == 1 + len(result.removed_folders)

    def test_empty_log(self, progress):
        result = UndoEngine().undo(ExecutionLog(), progress)

        assert result.restored == 0
        assert result.is_success
        assert progress.totals == [0]

    def test_undo_from_loaded_log(self, desktop: Path, config: SortConfig):
        """A log that went through serialization undoes the same way."""
        write_file(desktop, "a.png", 4)
        log = sort(desktop, config)

        UndoEngine().undo(ExecutionLog.from_dict(log.to_dict()))

        assert sorted(p.name for p in desktop.iterdir()) == ["a.png"]
