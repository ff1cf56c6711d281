"""Command line interface for in-place file rewriting.

Usage:
    file-rewriter replace PATTERN REPLACEMENT FILE... [--regex] [--dry-run]
"""

import logging
import re
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from file_rewriter import __version__
from file_rewriter.config.settings import RewriterSettings
from file_rewriter.domain.services.rewrite_service import RewriteService
from file_rewriter.domain.transforms import Substitution
from file_rewriter.progress import RichProgressTracker

app = typer.Typer(
    help="File Rewriter - rewrite files in place, committing only on success",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.command()
def replace(
    pattern: str = typer.Argument(..., help="Text (or regex with --regex) to replace"),
    replacement: str = typer.Argument(..., help="Replacement text"),
    files: list[Path] = typer.Argument(..., help="Files to rewrite in place"),
    regex: bool = typer.Option(False, "--regex", "-r", help="Treat PATTERN as a regular expression"),
    count: int = typer.Option(0, "--count", "-c", min=0, help="Max replacements per file (0 = all)"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show what would change, write nothing"),
    fsync: bool = typer.Option(None, "--fsync/--no-fsync", help="fsync before committing"),
    attempts: int = typer.Option(None, "--attempts", "-a", help="Attempts per file on transient errors"),
    encoding: str = typer.Option(None, "--encoding", "-e", help="Encoding of PATTERN and REPLACEMENT"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL"),
):  # pylint: disable=too-many-arguments
    """Replace PATTERN with REPLACEMENT in every FILE.

    Each file is rewritten through a temporary file next to it and only
    replaced once the new content is fully written. Files that fail are left
    untouched.

    Examples:
        # Replace a word in two files
        file-rewriter replace is was notes.txt todo.txt

        # Regex with group references
        file-rewriter replace --regex 'v(\\d+)' 'version \\1' CHANGES.md

        # Preview without changing anything
        file-rewriter replace --dry-run foo bar *.py
    """
    try:
        settings_kwargs = {}
        if fsync is not None:
            settings_kwargs["fsync"] = fsync
        if attempts is not None:
            settings_kwargs["max_attempts"] = attempts
        if encoding is not None:
            settings_kwargs["encoding"] = encoding
        if log_level is not None:
            settings_kwargs["log_level"] = log_level

        settings = RewriterSettings(**settings_kwargs)

    except ValidationError as e:
        console.print("[red]Configuration Error:[/red]")
        for error in e.errors():
            field = " → ".join(str(x) for x in error["loc"])
            console.print(f"  {field}: {error['msg']}")
        raise typer.Exit(1) from e

    _configure_logging(settings.log_level_number)

    try:
        transform = Substitution(
            pattern.encode(settings.encoding),
            replacement.encode(settings.encoding),
            regex=regex,
            count=count,
        )
    except (UnicodeEncodeError, ValueError, re.error) as e:
        console.print(f"[red]Invalid pattern: {e}[/red]")
        raise typer.Exit(1) from e

    try:
        if dry_run:
            console.print("[yellow]Dry run: no file will be modified[/yellow]")

        service = RewriteService(
            fsync=settings.fsync,
            skip_unchanged=settings.skip_unchanged,
            dry_run=dry_run,
            max_attempts=settings.max_attempts,
        )
        tracker = RichProgressTracker(console=console)
        result = service.rewrite_files(files, transform, tracker)

        if dry_run:
            for item in result.results:
                if item.changed:
                    console.print(f"  would rewrite {item.path}")

        tracker.show_summary(result.model_dump())

        if result.failed > 0:
            raise typer.Exit(1)

    except Exception as e:
        if isinstance(e, typer.Exit):
            raise
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


@app.command()
def version():
    """Show the installed version."""
    console.print(f"file-rewriter {__version__}")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
