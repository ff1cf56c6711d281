"""Main module for running the file rewriter CLI with ``python -m file_rewriter``."""

from file_rewriter.cli import main

if __name__ == "__main__":
    main()
