"""Exceptions raised by rewrite sessions.

Every exception carries the target path it concerns. Failures caused by the
operating system are chained to the underlying ``OSError`` via ``raise ... from``.
"""

from pathlib import Path


class RewriteError(Exception):
    """Base class for all rewrite failures."""

    def __init__(self, message: str, path: Path | str):
        """Initialize with a message and the target path."""
        super().__init__(message)
        self.path = Path(path)


class OpenFailed(RewriteError):
    """The original file could not be opened for reading."""


class TempCreateFailed(RewriteError):
    """The temporary file could not be created next to the target."""


class AlreadyClosed(RewriteError):
    """The session is no longer open."""


class _StepErrors(RewriteError):
    """A rewrite failure that collected errors from individual steps."""

    def __init__(
        self,
        message: str,
        path: Path | str,
        errors: list[OSError] | None = None,
    ):
        super().__init__(message, path)
        self.errors = list(errors or [])


class RewriteIOError(_StepErrors):
    """A handle failed to close while committing.

    The replacement was still renamed into place; ``errors`` holds what failed.
    """


class CommitFailed(_StepErrors):
    """The temp file could not be renamed over the target.

    The target is unmodified. The replacement content stays on disk at
    ``temp_path``.
    """

    def __init__(
        self,
        message: str,
        path: Path | str,
        temp_path: Path | str,
        errors: list[OSError] | None = None,
    ):
        super().__init__(message, path, errors)
        self.temp_path = Path(temp_path)


class AbortFailed(RewriteError):
    """One step of discarding the rewrite failed.

    Attributes:
        step: ``"close_input"``, ``"close_output"`` or ``"remove_temp"``
        temp_path: Temp file location, which may still exist
    """

    def __init__(self, message: str, path: Path | str, step: str, temp_path: Path | str):
        super().__init__(message, path)
        self.step = step
        self.temp_path = Path(temp_path)
