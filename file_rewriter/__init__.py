"""File Rewriter - safe, atomic in-place rewriting of files.

This package provides:
- RewriteSession: read the original and write the replacement of one file,
  committing with an atomic rename or discarding on failure
- RewriteService: run a byte transform over one or many files
- A Typer CLI for search-and-replace in place
"""

__version__ = "0.1.0"

from file_rewriter.domain.exceptions import (
    AbortFailed,
    AlreadyClosed,
    CommitFailed,
    OpenFailed,
    RewriteError,
    RewriteIOError,
    TempCreateFailed,
)
from file_rewriter.domain.models import SessionState
from file_rewriter.rewriter import Aborter, RewriteSession

__all__ = [
    "AbortFailed",
    "Aborter",
    "AlreadyClosed",
    "CommitFailed",
    "OpenFailed",
    "RewriteError",
    "RewriteIOError",
    "RewriteSession",
    "SessionState",
    "TempCreateFailed",
]
