"""CLI with subcommands: plan, sort, undo."""
from __future__ import annotations

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

from .core.config import CollisionPolicy, SortConfig, default_protected_extensions
from .core.errors import ConfigurationError, FolderCreationError
from .logging import QuietProgressReporter, RichProgressReporter, setup_logging


def default_directory() -> Path:
    return Path.home() / "Desktop"


def add_folder_options(parser: argparse.ArgumentParser) -> None:
    """Options shared by plan and sort."""
    parser.add_argument("--images", default="Images", help="Images folder name (default: Images)")
    parser.add_argument("--music", default="Music", help="Music folder name (default: Music)")
    parser.add_argument("--videos", default="Videos", help="Videos folder name (default: Videos)")
    parser.add_argument("--other", default="Other", help="Other folder name (default: Other)")
    parser.add_argument(
        "--duplicates-folder",
        default="Duplicates",
        help="Duplicates folder name (default: Duplicates)",
    )
    parser.add_argument(
        "--no-duplicates",
        action="store_true",
        help="Do not detect duplicates; identical files are sorted normally",
    )
    parser.add_argument(
        "--protect",
        action="append",
        default=[],
        metavar="EXT",
        help="Extension never to move (repeatable, added to the platform defaults)",
    )
    parser.add_argument(
        "--no-default-protect",
        action="store_true",
        help="Do not protect the platform's default extensions",
    )
    parser.add_argument(
        "--on-collision",
        choices=["overwrite", "rename"],
        default="overwrite",
        help="When a file with the same name exists at the destination (default: overwrite)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="declutter",
        description="Sort a cluttered desktop into type folders, and undo it.",
    )

    # Global options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ============ PLAN command ============
    plan_parser = subparsers.add_parser(
        "plan",
        help="Show what a sort would do without moving anything",
    )
    plan_parser.add_argument(
        "directory",
        nargs="?",
        type=Path,
        default=None,
        help="Directory to sort (default: ~/Desktop)",
    )
    add_folder_options(plan_parser)

    # ============ SORT command ============
    sort_parser = subparsers.add_parser(
        "sort",
        help="Move files into type folders",
    )
    sort_parser.add_argument(
        "directory",
        nargs="?",
        type=Path,
        default=None,
        help="Directory to sort (default: ~/Desktop)",
    )
    add_folder_options(sort_parser)
    sort_parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Do not ask the desktop environment to refresh",
    )
    sort_parser.add_argument(
        "--state-file",
        type=Path,
        default=None,
        help="Where to keep the undo log (default: $XDG_STATE_HOME/declutter/last_run.json)",
    )

    # ============ UNDO command ============
    undo_parser = subparsers.add_parser(
        "undo",
        help="Revert the latest sort",
    )
    undo_parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Do not ask the desktop environment to refresh",
    )
    undo_parser.add_argument(
        "--state-file",
        type=Path,
        default=None,
        help="Undo log written by sort (default: $XDG_STATE_HOME/declutter/last_run.json)",
    )

    return parser


def build_config(args: argparse.Namespace) -> SortConfig:
    """Build a SortConfig from parsed arguments."""
    protected = set() if args.no_default_protect else set(default_protected_extensions())
    protected.update(args.protect)

    return SortConfig(
        images_folder=args.images,
        music_folder=args.music,
        video_folder=args.videos,
        other_folder=args.other,
        duplicates_folder=args.duplicates_folder,
        duplicates_enabled=not args.no_duplicates,
        protected_extensions=frozenset(protected),
        collision_policy=CollisionPolicy(args.on_collision),
    )


def _state_path(args: argparse.Namespace) -> Path:
    from .services.state import default_state_path
    return args.state_file or default_state_path()


# ============ Command Handlers ============

def cmd_plan(args: argparse.Namespace, reporter) -> int:
    """Handle the plan command."""
    from .services.organizer import DesktopOrganizer

    config = build_config(args)
    directory = (args.directory or default_directory()).expanduser()

    reporter.print_header(f"declutter plan: {directory}")
    organizer = DesktopOrganizer(directory)
    plan = organizer.plan(config)
    reporter.print_plan(plan)
    return 0


def cmd_sort(args: argparse.Namespace, reporter) -> int:
    """Handle the sort command."""
    from .services.file_ops import create_file_manager
    from .services.organizer import DesktopOrganizer
    from .services.refresh import create_refresh_hook
    from .services.state import clear_log, save_log

    config = build_config(args)
    directory = (args.directory or default_directory()).expanduser()
    state_path = _state_path(args)

    reporter.print_header(f"declutter sort: {directory}")
    reporter.set_description("Sorting")
    organizer = DesktopOrganizer(
        directory,
        file_ops=create_file_manager(),
        refresh=create_refresh_hook(directory, enabled=not args.no_refresh),
        progress=reporter,
    )

    # First Ctrl+C stops after the current move, leaving a consistent log
    cancel = threading.Event()
    previous = signal.getsignal(signal.SIGINT) or signal.default_int_handler

    def request_cancel(signum, frame):
        cancel.set()
        signal.signal(signal.SIGINT, previous)

    # A new sort replaces the previous undo log even if it fails early
    clear_log(state_path)

    signal.signal(signal.SIGINT, request_cancel)
    try:
        summary = organizer.sort(config, should_cancel=cancel.is_set)
    finally:
        signal.signal(signal.SIGINT, previous)

    log = organizer.last_log
    if log is not None and not log.is_empty:
        save_log(log, state_path)
        reporter.info(f"Undo log saved to {state_path}")

    reporter.print_summary(summary)
    for failure in log.failures if log else []:
        reporter.warning(failure.message)

    if summary.cancelled:
        return 130
    if not summary.is_success:
        return 1
    reporter.success(f"Sorted {summary.moved} files")
    return 0


def cmd_undo(args: argparse.Namespace, reporter) -> int:
    """Handle the undo command."""
    from .services.file_ops import create_file_manager
    from .services.organizer import DesktopOrganizer
    from .services.refresh import create_refresh_hook
    from .services.state import clear_log, load_log

    state_path = _state_path(args)
    log = load_log(state_path)
    if log is None or log.is_empty:
        reporter.info("Nothing to undo")
        return 0

    directory = log.directory or default_directory()
    reporter.print_header(f"declutter undo: {directory}")
    reporter.set_description("Restoring")
    organizer = DesktopOrganizer(
        directory,
        file_ops=create_file_manager(),
        refresh=create_refresh_hook(directory, enabled=not args.no_refresh),
        progress=reporter,
    )
    organizer.restore_log(log)
    result = organizer.undo()
    clear_log(state_path)

    reporter.print_undo(result)
    for failure in result.failures:
        reporter.warning(failure.message)
    if not result.is_success:
        return 1
    reporter.success(f"Restored {result.restored} files")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    verbose = getattr(args, "verbose", False)
    setup_logging(verbose)

    # Create reporter
    if getattr(args, "quiet", False):
        reporter = QuietProgressReporter()
    else:
        reporter = RichProgressReporter(verbose=verbose)

    # No command specified - show help
    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handler; leaving the block stops any live progress bar
    try:
        with reporter:
            if args.command == "plan":
                return cmd_plan(args, reporter)
            elif args.command == "sort":
                return cmd_sort(args, reporter)
            elif args.command == "undo":
                return cmd_undo(args, reporter)
            else:
                reporter.error(f"Unknown command: {args.command}")
                return 1

    except ConfigurationError as e:
        reporter.error(str(e))
        return 2
    except FolderCreationError as e:
        reporter.error(f"Nothing was moved: {e}")
        return 1
    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - no stack trace
        return 130
    except Exception as e:
        reporter.error(f"Error: {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
