"""Safe in-place rewriting of a single file.

A RewriteSession reads from the original file and writes to a temporary file
created in the same directory. ``close()`` renames the temporary file over the
original with ``os.replace`` (atomic on POSIX when both live on the same
filesystem). ``abort()`` deletes the temporary file and leaves the original
untouched.

Typical use::

    with RewriteSession(path) as session:
        data = session.read()
        session.write(data.replace(b"is", b"was"))

Leaving the ``with`` block normally commits; leaving it with an exception
discards the rewrite.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable

from file_rewriter.domain.exceptions import (
    AbortFailed,
    AlreadyClosed,
    CommitFailed,
    OpenFailed,
    RewriteIOError,
    TempCreateFailed,
)
from file_rewriter.domain.models import SessionState

logger = logging.getLogger(__name__)


@runtime_checkable
class Aborter(Protocol):
    """Anything whose pending writes can be discarded instead of committed."""

    def abort(self) -> None:
        """Discard pending writes."""
        ...


class RewriteSession:
    """Read the original and write the replacement of one file.

    The read side and the write side are independent streams: reads always
    return the original bytes, no matter what has been written.

    Not safe for concurrent use from several threads.
    """

    def __init__(self, target_path: str | Path, *, fsync: bool = True):
        """Open the original and create the temporary output file.

        Args:
            target_path: File to rewrite
            fsync: Flush the replacement to disk before renaming it into place

        Raises:
            OpenFailed: If the original cannot be opened for reading
            TempCreateFailed: If the temporary file cannot be created
        """
        self.target_path = Path(target_path)
        self.fsync = fsync

        try:
            self._input: BinaryIO | None = open(self.target_path, "rb")  # noqa: SIM115
        except OSError as e:
            raise OpenFailed(f"Cannot open {self.target_path}: {e}", self.target_path) from e

        try:
            self._output, self._temp_path = self._create_temp_file()
        except OSError as e:
            self._input.close()
            self._input = None
            raise TempCreateFailed(
                f"Cannot create temporary file next to {self.target_path}: {e}",
                self.target_path,
            ) from e

        self._state = SessionState.OPEN
        logger.debug(f"Rewriting {self.target_path} via {self._temp_path}")

    def _create_temp_file(self) -> tuple[BinaryIO, Path]:
        """Create the temp file next to the target, keeping its extension and mode."""
        fd, temp_name = tempfile.mkstemp(
            dir=self.target_path.parent,
            prefix=f"{self.target_path.name}.",
            suffix=self.target_path.suffix,
        )
        try:
            mode = stat.S_IMODE(os.fstat(self._input.fileno()).st_mode)
            os.chmod(temp_name, mode)
            output = os.fdopen(fd, "wb")
        except OSError:
            os.close(fd)
            os.unlink(temp_name)
            raise
        return output, Path(temp_name)

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        return self._state

    @property
    def closed(self) -> bool:
        """True once the session has been committed, aborted or has failed."""
        return self._state.is_terminal

    @property
    def temp_path(self) -> Path | None:
        """Location of the pending replacement, or None once the session ended."""
        return self._temp_path

    def _require_open(self, operation: str) -> None:
        if self._state is not SessionState.OPEN:
            raise AlreadyClosed(
                f"Cannot {operation} {self.target_path}: session is {self._state.value}",
                self.target_path,
            )

    def readable(self) -> bool:
        """True while the original can still be read."""
        return self._state is SessionState.OPEN

    def writable(self) -> bool:
        """True while the replacement can still be written."""
        return self._state is SessionState.OPEN

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes of the original (all of it by default).

        Returns ``b""`` at end of file.
        """
        self._require_open("read")
        return self._input.read(size)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Read original bytes into ``buffer``; returns 0 at end of file."""
        self._require_open("read")
        return self._input.readinto(buffer)

    def write(self, data: bytes) -> int:
        """Append ``data`` to the replacement."""
        self._require_open("write")
        return self._output.write(data)

    def _release(self) -> tuple[BinaryIO, BinaryIO, Path]:
        """Detach both handles and the temp path from the session."""
        handles = (self._input, self._output, self._temp_path)
        self._input = None
        self._output = None
        self._temp_path = None
        return handles

    def close(self) -> None:
        """Commit the rewrite by renaming the temp file over the original.

        Calling close() on a session that already ended does nothing.

        Both handles are closed before the rename. A handle that fails to close
        does not prevent the rename; its error is reported afterwards.

        Raises:
            CommitFailed: If the rename failed. The original is unmodified and
                the replacement is left at ``temp_path`` on the exception.
            RewriteIOError: If the rename succeeded but closing a handle failed
        """
        if self._state.is_terminal:
            logger.debug(f"close() on {self._state.value} session for {self.target_path} ignored")
            return

        input_handle, output_handle, temp_path = self._release()
        errors: list[OSError] = []

        try:
            input_handle.close()
        except OSError as e:
            errors.append(e)

        try:
            try:
                output_handle.flush()
                if self.fsync:
                    os.fsync(output_handle.fileno())
            finally:
                output_handle.close()
        except OSError as e:
            errors.append(e)

        try:
            os.replace(temp_path, self.target_path)
        except OSError as e:
            self._state = SessionState.FAILED
            errors.append(e)
            raise CommitFailed(
                f"Cannot replace {self.target_path} with {temp_path}: {e}",
                self.target_path,
                temp_path=temp_path,
                errors=errors,
            ) from e

        self._state = SessionState.COMMITTED
        logger.debug(f"Committed rewrite of {self.target_path}")

        if errors:
            raise RewriteIOError(
                f"Committed {self.target_path} but a handle failed to close: {errors[0]}",
                self.target_path,
                errors=errors,
            ) from errors[0]

    def abort(self) -> None:
        """Discard the rewrite, leaving the original untouched.

        Unlike close(), abort() may only be called once, on an open session.
        Cleanup stops at the first step that fails and the session is left in
        the FAILED state. If the original cannot be closed, the temporary
        file is kept but its handle is still closed.

        Raises:
            AlreadyClosed: If the session already ended
            AbortFailed: If closing a handle or removing the temp file failed
        """
        self._require_open("abort")

        input_handle, output_handle, temp_path = self._release()
        self._state = SessionState.FAILED

        try:
            input_handle.close()
        except OSError as e:
            error = AbortFailed(
                f"Cannot close {self.target_path}: {e}",
                self.target_path,
                step="close_input",
                temp_path=temp_path,
            )
            # temp file stays; only the write handle is released
            try:
                output_handle.close()
            except OSError as close_error:
                error.add_note(f"closing temporary file {temp_path} also failed: {close_error}")
            raise error from e

        try:
            output_handle.close()
        except OSError as e:
            raise AbortFailed(
                f"Cannot close temporary file {temp_path}: {e}",
                self.target_path,
                step="close_output",
                temp_path=temp_path,
            ) from e

        try:
            os.unlink(temp_path)
        except OSError as e:
            raise AbortFailed(
                f"Cannot remove temporary file {temp_path}: {e}",
                self.target_path,
                step="remove_temp",
                temp_path=temp_path,
            ) from e

        self._state = SessionState.ABORTED
        logger.debug(f"Aborted rewrite of {self.target_path}")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Commit on normal exit, discard when the block raised."""
        if self._state is SessionState.OPEN:
            if exc_type is None:
                self.close()
            else:
                self.abort()
        return False

    def __repr__(self) -> str:
        return f"<RewriteSession {str(self.target_path)!r} {self._state.value}>"
