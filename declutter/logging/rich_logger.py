"""Rich-based progress reporter implementation."""
from __future__ import annotations

import sys
import time
from collections import deque
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    ProgressColumn,
    SpinnerColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from ..core.models import Plan, RunSummary, UndoResult


SAMPLE_MOVES = 10


class FilesPerSecondColumn(ProgressColumn):
    """Renders files per second as a rolling average."""

    def __init__(self, window_size: int = 10):
        """Initialize with rolling window size.

        Args:
            window_size: Number of samples for rolling average.
        """
        super().__init__()
        self._samples: deque[tuple[float, int]] = deque(maxlen=window_size)
        self._last_completed = 0

    def render(self, task: Task) -> Text:
        """Render the speed column."""
        completed = int(task.completed)
        if completed > self._last_completed:
            self._samples.append((time.time(), completed))
            self._last_completed = completed

        if len(self._samples) >= 2:
            oldest_time, oldest_completed = self._samples[0]
            newest_time, newest_completed = self._samples[-1]
            if newest_time > oldest_time:
                speed = (newest_completed - oldest_completed) / (newest_time - oldest_time)
                return Text(f"{speed:.1f} f/s", style="magenta")

        return Text("-- f/s", style="magenta")


class RichProgressReporter:
    """Progress sink drawing a Rich progress bar on stderr.

    Also renders plans and run summaries for the command line.
    """

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
    ):
        """Initialize the reporter.

        Args:
            verbose: Enable verbose output.
            quiet: Suppress all non-essential output.
            console: Console to draw on (stderr by default).
        """
        self._console = console or Console(stderr=True)
        self._verbose = verbose
        self._quiet = quiet
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None
        self._description = "Working"

    @property
    def console(self) -> Console:
        return self._console

    def set_description(self, description: str) -> None:
        """Label for the next progress bar."""
        self._description = description

    # --- ProgressSink ---

    def start(self) -> None:
        if self._quiet:
            return
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TextColumn("[cyan]•"),
            FilesPerSecondColumn(),
            TextColumn("[cyan]•"),
            TimeElapsedColumn(),
            console=self._console,
            transient=False,
        )
        self._progress.start()

    def set_total(self, total: int) -> None:
        if self._progress is None:
            return
        if self._task_id is None:
            self._task_id = self._progress.add_task(self._description, total=total)
        else:
            self._progress.update(self._task_id, total=total)

    def increment(self, amount: int = 1) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.advance(self._task_id, amount)

    def finish(self) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task_id = None

    # --- Logging Methods ---

    def info(self, message: str) -> None:
        if not self._quiet:
            self._console.print(f"[blue]ℹ[/blue] {message}")

    def success(self, message: str) -> None:
        if not self._quiet:
            self._console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[red]✗[/red] {message}", style="red")

    # --- Specialized Output ---

    def print_header(self, title: str) -> None:
        if self._quiet:
            return
        self._console.print(Panel(Text(title, style="bold cyan"), border_style="cyan"))

    def print_plan(self, plan: Plan) -> None:
        """Print plan counts and a sample of the moves."""
        if self._quiet:
            return

        table = Table(title="Plan", show_header=True, header_style="bold")
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="magenta", justify="right")
        table.add_row("Files Found", str(plan.discovered))
        table.add_row("Moves", str(len(plan.operations)))
        table.add_row("Duplicates", str(plan.duplicate_count))
        table.add_row("Left in Place", str(len(plan.skipped)))
        table.add_row("Folders Needed", str(len(plan.required_folders)))
        self._console.print(table)

        if not plan.operations:
            return

        tree = Tree("[bold green]Moves[/bold green]")
        shown = plan.operations if self._verbose else plan.operations[:SAMPLE_MOVES]
        for op in shown:
            try:
                target = op.destination.relative_to(plan.directory)
            except ValueError:
                target = op.destination
            marker = " [dim](duplicate)[/dim]" if op.is_duplicate else ""
            tree.add(f"[yellow]{op.source.name}[/yellow] -> [blue]{target}[/blue]{marker}")
        hidden = len(plan.operations) - len(shown)
        if hidden > 0:
            tree.add(f"[italic]... and {hidden} more[/italic]")
        self._console.print(tree)

    def print_summary(self, summary: RunSummary) -> None:
        """Print the counts of a sort run."""
        if self._quiet:
            return

        title = "Sort Cancelled" if summary.cancelled else "Sort Complete"
        table = Table(title=title, show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="green", justify="right")
        table.add_row("Files Found", str(summary.discovered))
        table.add_row("Files Moved", str(summary.moved))
        table.add_row("Duplicates", str(summary.duplicates))
        table.add_row("Left in Place", str(summary.skipped))
        table.add_row("Folders Created", str(summary.folders_created))
        table.add_row("Errors", str(summary.failed))
        if summary.unreadable:
            table.add_row("Unreadable", str(summary.unreadable))
        if summary.missing:
            table.add_row("Vanished", str(summary.missing))
        self._console.print(table)

    def print_undo(self, result: UndoResult) -> None:
        """Print the counts of an undo run."""
        if self._quiet:
            return

        table = Table(title="Undo Complete", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="green", justify="right")
        table.add_row("Files Restored", str(result.restored))
        table.add_row("Already Gone", str(result.missing))
        table.add_row("Folders Removed", str(len(result.removed_folders)))
        table.add_row("Errors", str(result.failed))
        self._console.print(table)

    # --- Context Managers ---

    def __enter__(self) -> "RichProgressReporter":
        return self

    def __exit__(self, *args) -> None:
        self.finish()


class QuietProgressReporter:
    """Minimal progress reporter that only shows errors."""

    def set_description(self, description: str) -> None:
        pass

    def start(self) -> None:
        pass

    def set_total(self, total: int) -> None:
        pass

    def increment(self, amount: int = 1) -> None:
        pass

    def finish(self) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        print(f"WARNING: {message}", file=sys.stderr)

    def error(self, message: str) -> None:
        print(f"ERROR: {message}", file=sys.stderr)

    def print_header(self, title: str) -> None:
        pass

    def print_plan(self, plan: Plan) -> None:
        pass

    def print_summary(self, summary: RunSummary) -> None:
        pass

    def print_undo(self, result: UndoResult) -> None:
        pass

    def __enter__(self) -> "QuietProgressReporter":
        return self

    def __exit__(self, *args) -> None:
        pass
