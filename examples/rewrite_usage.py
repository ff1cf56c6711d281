"""Example of rewriting a file in place.

Demonstrates the two ways a rewrite ends: leaving the ``with`` block normally
commits the new content, raising inside it leaves the original untouched.
"""

import tempfile
from pathlib import Path

from file_rewriter import RewriteSession
from file_rewriter.domain.services.rewrite_service import RewriteService
from file_rewriter.domain.transforms import Substitution


def main():
    """Rewrite a scratch file a few times and print the results."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "t"
        path.write_bytes(b"This is a test")

        print("=" * 50)
        print("Committed rewrite")
        with RewriteSession(path) as session:
            data = session.read()
            session.write(data.replace(b"is", b"was"))
        print(f"  {path.read_bytes()!r}")

        print("Failed rewrite")
        try:
            with RewriteSession(path) as session:
                session.write(b"half-written garbage")
                raise RuntimeError("transform failed")
        except RuntimeError as e:
            print(f"  {e}, file still {path.read_bytes()!r}")

        print("Service with dry run")
        result = RewriteService(dry_run=True).rewrite_file(path, Substitution(b"was", b"is"))
        print(f"  changed={result.changed} committed={result.committed}")
        print("=" * 50)


if __name__ == "__main__":
    main()
