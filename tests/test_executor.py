"""Tests for plan execution."""
import pytest
from pathlib import Path
from unittest.mock import MagicMock

from declutter.core.config import SortConfig
from declutter.core.errors import FolderCreationError, MoveFailureError
from declutter.core.models import MoveOperation, Plan, SkipReason
from declutter.services.executor import PlanExecutor
from declutter.services.file_ops import FileManager
from declutter.services.planner import PlanBuilder
from declutter.services.undo import UndoEngine

from .fixtures import mkdir_fails_for, sorted_entries, write_file


class FailingFileManager(FileManager):
    """Fails moves of selected source names and folder creation of selected paths."""

    def __init__(self, fail_moves=(), fail_folders=()):
        self.fail_moves = set(fail_moves)
        self.fail_folders = set(fail_folders)

    def move_file(self, source, target, overwrite=True):
        if source.name in self.fail_moves:
            raise MoveFailureError(source, target, "File is locked")
        super().move_file(source, target, overwrite)

    def ensure_directory(self, path):
        if path in self.fail_folders:
            raise FolderCreationError(path, "Permission denied")
        return super().ensure_directory(path)


def build_plan(desktop: Path, config: SortConfig) -> Plan:
    return PlanBuilder().build_from_entries(desktop, sorted_entries(desktop), config)


class TestPlanExecutor:
    """Tests for PlanExecutor."""

    def test_executes_reference_scenario(self, desktop: Path, config: SortConfig, progress):
        """Files land in their planned places and the log records it all."""
        write_file(desktop, "a.png", content=b"same")
        write_file(desktop, "b.png", content=b"same")
        write_file(desktop, "c.xyz", 500 * 1024)
        write_file(desktop, "readme", 10)
        plan = build_plan(desktop, config)

        log = PlanExecutor().execute(plan, progress)

        assert (desktop / "Images" / "PNG" / "a.png").exists()
        assert (desktop / "Duplicates" / "b.png").exists()
        assert (desktop / "Other" / "Small" / "xyz" / "c.xyz").exists()
        assert (desktop / "readme").exists()
        assert not (desktop / "a.png").exists()

        assert log.moves == list(plan.operations)
        assert set(log.created_folders) == {
            desktop / "Duplicates",
            desktop / "Images",
            desktop / "Images" / "PNG",
            desktop / "Other",
            desktop / "Other" / "Small",
            desktop / "Other" / "Small" / "xyz",
        }
        summary = log.summary()
        assert summary.moved == 3
        assert summary.duplicates == 1
        assert summary.skipped == 1

    def test_progress_covers_every_discovered_file(self, desktop: Path, config: SortConfig, progress):
        """Total and completed steps both equal the number of files found."""
        write_file(desktop, "a.png", 4)
        write_file(desktop, "b.lnk", 4)
        write_file(desktop, "readme", 4)
        plan = build_plan(desktop, config)

        PlanExecutor().execute(plan, progress)

        assert progress.started == 1
        assert progress.finished == 1
        assert progress.totals == [3]
        assert progress.completed == 3

    def test_existing_folders_not_recorded(self, desktop: Path, config: SortConfig):
        """Only folders this run created are logged."""
        (desktop / "Images").mkdir()
        (desktop / "Duplicates").mkdir()
        write_file(desktop, "a.png", 4)

        log = PlanExecutor().execute(build_plan(desktop, config))

        assert log.created_folders == [desktop / "Images" / "PNG"]

    def test_overwrites_existing_destination(self, desktop: Path, config: SortConfig):
        write_file(desktop, "Images/PNG/a.png", content=b"old")
        write_file(desktop, "a.png", content=b"new")

        log = PlanExecutor().execute(build_plan(desktop, config))

        assert (desktop / "Images" / "PNG" / "a.png").read_bytes() == b"new"
        assert len(log.moves) == 1

    def test_vanished_source_is_skipped(self, desktop: Path, config: SortConfig):
        """A file deleted between planning and moving is not an error."""
        gone = write_file(desktop, "a.png", 4)
        write_file(desktop, "b.txt", 4)
        plan = build_plan(desktop, config)
        gone.unlink()

        log = PlanExecutor().execute(plan)

        assert [m.source.name for m in log.moves] == ["b.txt"]
        assert [s.path for s in log.skipped if s.reason is SkipReason.SOURCE_MISSING] == [gone]
        assert log.failures == []

    def test_failed_move_recorded_and_run_continues(self, desktop: Path, config: SortConfig):
        """One locked file does not stop the others."""
        write_file(desktop, "a.png", 4)
        write_file(desktop, "b.txt", 4)
        plan = build_plan(desktop, config)

        log = PlanExecutor(file_ops=FailingFileManager(fail_moves={"a.png"})).execute(plan)

        assert [m.source.name for m in log.moves] == ["b.txt"]
        [failure] = log.failures
        assert failure.operation.source.name == "a.png"
        assert "File is locked" in failure.message
        assert (desktop / "a.png").exists()

    def test_failed_folder_blocks_only_its_files(self, desktop: Path, config: SortConfig):
        """Files bound for an uncreatable folder fail, the rest move."""
        write_file(desktop, "a.png", 4)
        write_file(desktop, "b.txt", 4)
        plan = build_plan(desktop, config)
        file_ops = FailingFileManager(fail_folders={desktop / "Images" / "PNG"})

        log = PlanExecutor(file_ops=file_ops).execute(plan)

        assert [m.source.name for m in log.moves] == ["b.txt"]
        [failure] = log.failures
        assert failure.operation.source.name == "a.png"
        assert "Folder unavailable" in failure.message

    def test_all_folders_failing_is_fatal(self, desktop: Path, config: SortConfig):
        """When no required folder can be created, nothing is attempted."""
        write_file(desktop, "a.png", 4)
        plan = build_plan(desktop, config)
        file_ops = FailingFileManager(fail_folders=set(plan.required_folders))

        with pytest.raises(FolderCreationError):
            PlanExecutor(file_ops=file_ops).execute(plan)

        assert (desktop / "a.png").exists()

    def test_partially_created_parents_are_logged(self, desktop: Path, config: SortConfig):
        """Parents made before a folder failure are undone with the rest."""
        write_file(desktop, "a.xyz", 4)
        write_file(desktop, "b.png", 4)
        plan = build_plan(desktop, config)

        with mkdir_fails_for("xyz"):
            log = PlanExecutor().execute(plan)

        assert desktop / "Other" in log.created_folders
        assert desktop / "Other" / "Small" in log.created_folders
        assert [m.source.name for m in log.moves] == ["b.png"]

        UndoEngine().undo(log)

        assert sorted(p.name for p in desktop.iterdir()) == ["a.xyz", "b.png"]

    def test_fatal_folder_failure_prunes_partial_parents(self, desktop: Path, config: SortConfig):
        """A run that moves nothing leaves no folders behind."""
        write_file(desktop, "a.xyz", 4)
        plan = build_plan(desktop, config.with_overrides(duplicates_enabled=False))

        with mkdir_fails_for("xyz"):
            with pytest.raises(FolderCreationError):
                PlanExecutor().execute(plan)

        assert sorted(p.name for p in desktop.iterdir()) == ["a.xyz"]

    def test_cancellation_stops_between_moves(self, desktop: Path, config: SortConfig, progress):
        """Moves done before cancelling stay logged."""
        for name in ("a.txt", "b.txt", "c.txt"):
            write_file(desktop, name, 4)
        plan = build_plan(desktop, config)
        calls = iter([False, True])

        log = PlanExecutor().execute(plan, progress, should_cancel=lambda: next(calls))

        assert log.cancelled
        assert [m.source.name for m in log.moves] == ["a.txt"]
        assert (desktop / "b.txt").exists()
        assert log.summary().cancelled
        assert progress.finished == 1

    def test_refresh_after_each_move(self, desktop: Path, config: SortConfig):
        write_file(desktop, "a.png", 4)
        write_file(desktop, "b.txt", 4)
        refresh = MagicMock()

        PlanExecutor(refresh=refresh).execute(build_plan(desktop, config))

        assert refresh.call_count == 2

    def test_refresh_errors_ignored(self, desktop: Path, config: SortConfig):
        """A failing refresh never fails the sort."""
        write_file(desktop, "a.png", 4)
        refresh = MagicMock(side_effect=RuntimeError("no display"))

        log = PlanExecutor(refresh=refresh).execute(build_plan(desktop, config))

        assert len(log.moves) == 1

    def test_empty_plan(self, desktop: Path, progress):
        log = PlanExecutor().execute(Plan(directory=desktop), progress)

        assert log.is_empty
        assert progress.totals == [0]

    def test_operation_outside_plan_folders(self, desktop: Path):
        """Parents missing from required_folders are created on demand."""
        source = write_file(desktop, "a.txt", 4)
        op = MoveOperation(source, desktop / "Deep" / "Er" / "a.txt")

        log = PlanExecutor().execute(Plan(directory=desktop, operations=(op,), discovered=1))

        assert log.moves == [op]
        assert log.created_folders == [desktop / "Deep", desktop / "Deep" / "Er"]
