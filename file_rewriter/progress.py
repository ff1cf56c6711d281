"""Progress tracking abstraction for batch rewrites.

Lets the rewrite service report progress without coupling to a specific
progress bar implementation.
"""

import logging
from typing import Any, Protocol

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
)

logger = logging.getLogger(__name__)


class ProgressTracker(Protocol):
    """Protocol for progress tracking implementations."""

    def start_batch(self, total_files: int) -> None:
        """Start tracking a batch of files."""
        ...

    def update_file(self, path: str, current: int, total: int) -> None:
        """Update progress for the file being rewritten."""
        ...

    def end_batch(self) -> None:
        """End batch progress tracking."""
        ...

    def log_success(self, path: str, committed: bool) -> None:
        """Log a file that was rewritten or left unchanged."""
        ...

    def log_error(self, path: str, error: str) -> None:
        """Log a file that failed."""
        ...

    def log_warning(self, message: str) -> None:
        """Log a problem that did not fail the file."""
        ...

    def show_summary(self, summary: dict[str, Any]) -> None:
        """Display final summary statistics."""
        ...


class NoOpProgressTracker:
    """Progress tracker that does nothing.

    Used by the service when no tracker is given, and in tests.
    """

    def start_batch(self, total_files: int) -> None:
        pass

    def update_file(self, path: str, current: int, total: int) -> None:
        pass

    def end_batch(self) -> None:
        pass

    def log_success(self, path: str, committed: bool) -> None:
        pass

    def log_error(self, path: str, error: str) -> None:
        pass

    def log_warning(self, message: str) -> None:
        pass

    def show_summary(self, summary: dict[str, Any]) -> None:
        pass


class RichProgressTracker:
    """Progress tracker drawing a Rich progress bar over the files of a batch."""

    def __init__(self, console: Console | None = None):
        """Initialize the Rich progress tracker."""
        self.console = console or Console()
        self._progress: Progress | None = None
        self._task_id: Any | None = None

    def start_batch(self, total_files: int) -> None:
        """Start tracking a batch of files."""
        if self._progress is None:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                BarColumn(bar_width=40),
                MofNCompleteColumn(),
                console=self.console,
                transient=False,
            )
            self._progress.start()
        self._task_id = self._progress.add_task(f"Rewriting {total_files} files", total=total_files)

    def update_file(self, path: str, current: int, total: int) -> None:
        """Update progress for the file being rewritten."""
        if self._progress and self._task_id is not None:
            self._progress.update(
                self._task_id,
                completed=current,
                description=f"Rewriting: {path[-50:]}",
            )

    def end_batch(self) -> None:
        """Stop the progress bar."""
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task_id = None

    def log_success(self, path: str, committed: bool) -> None:
        """Log a file that was rewritten or left unchanged."""
        logger.debug(f"✓ {path}: {'rewritten' if committed else 'unchanged'}")

    def log_error(self, path: str, error: str) -> None:
        """Log a file that failed."""
        self.console.print(f"[red]✗ {path}: {error}[/red]")

    def log_warning(self, message: str) -> None:
        """Log a problem that did not fail the file."""
        self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def show_summary(self, summary: dict[str, Any]) -> None:
        """Display final summary statistics."""
        self.console.print("\n[bold cyan]═══ Summary ═══[/bold cyan]")
        self.console.print(f"[green]✓[/green] Rewritten: {summary.get('committed', 0)} files")
        self.console.print(f"[yellow]•[/yellow] Unchanged: {summary.get('unchanged', 0)} files")
        self.console.print(f"[red]✗[/red] Failed: {summary.get('failed', 0)} files")
