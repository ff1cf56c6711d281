"""Tests for progress trackers."""

from io import StringIO

from rich.console import Console

from file_rewriter.progress import NoOpProgressTracker, RichProgressTracker


def make_console() -> tuple[Console, StringIO]:
    buffer = StringIO()
    return Console(file=buffer, force_terminal=False, width=120), buffer


def test_noop_tracker_accepts_all_calls():
    """The no-op tracker can be driven through a full batch."""
    tracker = NoOpProgressTracker()

    tracker.start_batch(2)
    tracker.update_file("a", 1, 2)
    tracker.log_success("a", True)
    tracker.log_error("b", "boom")
    tracker.log_warning("a: handle failed to close")
    tracker.end_batch()
    tracker.show_summary({"committed": 1, "failed": 1})


def test_rich_tracker_lifecycle():
    """start_batch/end_batch start and stop the progress bar."""
    console, _ = make_console()
    tracker = RichProgressTracker(console=console)

    tracker.start_batch(3)
    assert tracker._progress is not None
    tracker.update_file("some/file.txt", 1, 3)
    tracker.end_batch()

    assert tracker._progress is None
    assert tracker._task_id is None


def test_rich_tracker_prints_errors_and_summary():
    """Errors and the summary go to the console."""
    console, buffer = make_console()
    tracker = RichProgressTracker(console=console)

    tracker.log_error("missing.txt", "Cannot open missing.txt")
    tracker.show_summary({"committed": 2, "unchanged": 1, "failed": 1})

    output = buffer.getvalue()
    assert "missing.txt: Cannot open missing.txt" in output
    assert "Rewritten: 2 files" in output
    assert "Unchanged: 1 files" in output
    assert "Failed: 1 files" in output


def test_rich_tracker_prints_warnings():
    """Warnings go to the console."""
    console, buffer = make_console()
    tracker = RichProgressTracker(console=console)

    tracker.log_warning("Committed notes.txt but a handle failed to close: EIO")

    assert "Committed notes.txt but a handle failed to close: EIO" in buffer.getvalue()
