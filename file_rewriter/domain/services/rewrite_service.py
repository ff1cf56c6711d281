"""Rewrite service for whole files.

Responsible for running a transform over one or more files, each through its
own RewriteSession. Single Responsibility: read -> transform -> write -> commit
(or discard) per file.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from file_rewriter.domain.exceptions import CommitFailed, RewriteIOError
from file_rewriter.domain.models import BatchRewriteResult, RewriteResult, SessionState
from file_rewriter.domain.transforms import Transform
from file_rewriter.progress import NoOpProgressTracker, ProgressTracker
from file_rewriter.rewriter import RewriteSession
from file_rewriter.utils.retry import PermanentError, retry_with_exponential_backoff

logger = logging.getLogger(__name__)


class RewriteService:
    """Service for rewriting files in place with a byte transform."""

    def __init__(
        self,
        fsync: bool = True,
        skip_unchanged: bool = True,
        dry_run: bool = False,
        max_attempts: int = 1,
        retry_min_wait: float = 0.1,
    ):
        """Initialize rewrite service.

        Args:
            fsync: Flush replacements to disk before renaming them into place
            skip_unchanged: Discard the rewrite when the transform changed nothing
            dry_run: Compute replacements but never commit them
            max_attempts: Attempts per file in rewrite_files() for transient failures
            retry_min_wait: Initial backoff between attempts in seconds
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.fsync = fsync
        self.skip_unchanged = skip_unchanged
        self.dry_run = dry_run
        self.max_attempts = max_attempts
        self.retry_min_wait = retry_min_wait

    def rewrite_file(self, path: str | Path, transform: Transform) -> RewriteResult:
        """Rewrite one file with ``transform``.

        The rewrite is discarded, leaving the file untouched, when running dry
        or when the content is unchanged and ``skip_unchanged`` is set. If the
        transform raises, the rewrite is discarded and the exception propagates.
        A handle that fails to close after a successful commit is reported in
        ``warning``; the file still counts as committed.

        Args:
            path: File to rewrite
            transform: Callable mapping original bytes to replacement bytes

        Returns:
            RewriteResult describing what happened

        Raises:
            RewriteError: If the session could not be opened, committed or aborted
        """
        path = Path(path)
        warning = None

        with RewriteSession(path, fsync=self.fsync) as session:
            original = session.read()
            replacement = transform(original)
            changed = replacement != original

            if self.dry_run or (self.skip_unchanged and not changed):
                session.abort()
                bytes_written = 0
            else:
                bytes_written = session.write(replacement)
                try:
                    session.close()
                except CommitFailed as e:
                    self._remove_orphan(e)
                    raise
                except RewriteIOError as e:
                    warning = str(e)
                    logger.warning(warning)

        committed = session.state is SessionState.COMMITTED
        logger.debug(
            f"{path}: read {len(original)} bytes, "
            f"{'committed' if committed else 'discarded'} {len(replacement)} bytes"
        )

        return RewriteResult(
            path=path,
            bytes_read=len(original),
            bytes_written=bytes_written,
            changed=changed,
            committed=committed,
            dry_run=self.dry_run,
            warning=warning,
        )

    @staticmethod
    def _remove_orphan(error: CommitFailed) -> None:
        """Delete the temp file a failed commit left behind."""
        try:
            error.temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Cannot remove orphaned temp file {error.temp_path}: {e}")
            error.add_note(f"orphaned temp file left at {error.temp_path}: {e}")

    def rewrite_files(
        self,
        paths: Iterable[str | Path],
        transform: Transform,
        progress_tracker: ProgressTracker | None = None,
    ) -> BatchRewriteResult:
        """Rewrite several files independently.

        A failing file does not stop the batch; its error is recorded in
        ``failures``. Transient failures are retried up to ``max_attempts``
        times, each attempt with a new session.

        Args:
            paths: Files to rewrite
            transform: Callable mapping original bytes to replacement bytes
            progress_tracker: Optional progress tracker

        Returns:
            BatchRewriteResult with per-file results and failures
        """
        tracker = progress_tracker or NoOpProgressTracker()
        path_list = [Path(p) for p in paths]
        batch = BatchRewriteResult()

        tracker.start_batch(len(path_list))
        try:
            for index, path in enumerate(path_list, start=1):
                try:
                    result = retry_with_exponential_backoff(
                        self.rewrite_file,
                        path,
                        transform,
                        max_attempts=self.max_attempts,
                        min_wait=self.retry_min_wait,
                    )
                except Exception as e:
                    cause = e.__cause__ if isinstance(e, PermanentError) and e.__cause__ else e
                    message = str(cause)
                    batch.failures[str(path)] = message
                    logger.error(f"Failed to rewrite {path}: {message}")
                    tracker.log_error(str(path), message)
                else:
                    batch.results.append(result)
                    if result.warning:
                        tracker.log_warning(result.warning)
                    tracker.log_success(str(path), result.committed)
                tracker.update_file(str(path), index, len(path_list))
        finally:
            tracker.end_batch()

        return batch
