"""Configure tests."""

from pathlib import Path

import pytest

ORIGINAL = b"This is a test"


def _leftover_temp_files(target: Path) -> list[Path]:
    """Return files in the target's directory that look like its temp files.

    Args:
        target: File being rewritten

    Returns:
        Temp-named siblings of ``target`` (the target itself excluded)
    """
    return [p for p in target.parent.glob(f"{target.name}.*") if p != target]


@pytest.fixture
def leftover_temp_files():
    """Helper listing temp-named siblings of a target file."""
    return _leftover_temp_files


@pytest.fixture
def target_file(tmp_path) -> Path:
    """A file containing "This is a test"."""
    path = tmp_path / "t"
    path.write_bytes(ORIGINAL)
    return path


@pytest.fixture
def text_file(tmp_path) -> Path:
    """A file with an extension, for temp-name checks."""
    path = tmp_path / "notes.txt"
    path.write_bytes(b"alpha beta gamma\n")
    return path
