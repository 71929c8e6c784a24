"""
fsmentry CLI Utilities.

Shared helpers for the CLI commands: version output, logging setup,
input reading and error reporting.
"""

import logging
import os
import platform
import shutil
import sys
from pathlib import Path

import typer

from fsmentry._version import get_version
from fsmentry.core.errors import FsmEntryError, ParseError, RenderError, ValidationError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

STDIN_MARKER = "-"


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"fsmentry version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(
            f"  Python:        {platform.python_implementation()} {platform.python_version()}"
        )
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        typer.echo("")
        typer.echo("Features:")
        dot = shutil.which("dot")
        typer.echo(
            f"  Graphviz:      {'✓ ' + dot if dot else '✗ Not found (SVG diagrams are skipped)'}"
        )
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """
    Configure logging on stderr.

    The level is DEBUG with ``--verbose``, otherwise LOG_LEVEL from the
    environment (default WARNING).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.getenv("LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def read_source(file: str) -> tuple[str, Path | None]:
    """
    Read input text from a path, or from stdin for ``-``.

    Returns:
        Tuple of (text, path or None for stdin)
    """
    if file == STDIN_MARKER:
        return typer.get_text_stream("stdin").read(), None

    path = Path(file)
    if not path.is_file():
        typer.echo(f"Error: File not found: {file}", err=True)
        raise typer.Exit(code=1)
    return path.read_text(), path


def report_error(error: FsmEntryError) -> None:
    """Print a rendered diagnostic and exit with status 1."""
    if isinstance(error, ParseError):
        kind = "Parse error"
    elif isinstance(error, ValidationError):
        kind = "Validation error"
    elif isinstance(error, RenderError):
        kind = "Render error"
    else:
        kind = "Error"
    typer.echo(f"{kind}: {error}", err=True)
    raise typer.Exit(code=1)
