"""Domain models for file rewriting.

Uses Pydantic for validation and serialization of results.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, computed_field


class SessionState(str, Enum):
    """Lifecycle state of a rewrite session.

    ``OPEN`` is the only non-terminal state.
    """

    OPEN = "open"
    COMMITTED = "committed"
    ABORTED = "aborted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Return True once the session has released its resources."""
        return self is not SessionState.OPEN


class RewriteResult(BaseModel):
    """Outcome of rewriting a single file."""

    path: Path = Field(description="File that was rewritten")
    bytes_read: int = Field(ge=0, description="Bytes read from the original")
    bytes_written: int = Field(ge=0, description="Bytes written as replacement")
    changed: bool = Field(description="Replacement differs from the original")
    committed: bool = Field(description="Replacement was renamed into place")
    dry_run: bool = Field(default=False, description="Run without committing")
    warning: str | None = Field(
        default=None,
        description="Problem noticed after the replacement was committed",
    )


class BatchRewriteResult(BaseModel):
    """Outcome of rewriting several files independently."""

    results: list[RewriteResult] = Field(default_factory=list)
    failures: dict[str, str] = Field(
        default_factory=dict,
        description="Path -> error message for files that could not be rewritten",
    )

    @computed_field  # type: ignore[misc]
    @property
    def committed(self) -> int:
        """Return number of files whose replacement was committed."""
        return sum(1 for r in self.results if r.committed)

    @computed_field  # type: ignore[misc]
    @property
    def unchanged(self) -> int:
        """Return number of files left untouched without error."""
        return sum(1 for r in self.results if not r.committed)

    @computed_field  # type: ignore[misc]
    @property
    def failed(self) -> int:
        """Return number of files that failed."""
        return len(self.failures)
