"""Noten CLI Main Entry Point

Turns a directory of Markdown documents into HTML pages sharing one
skeleton, rebuilding only what changed.

Usage:
    noten build                    # Build stale pages of the enclosing project
    noten build --force            # Rebuild every page
    noten build -v                 # Show what is processed or skipped
    noten init [path]              # Scaffold a new project
    noten --version                # Show version
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from ._version import __version__
from .commands import build_command, init_command
from .commands.utils import setup_logging

typer_app = typer.Typer(no_args_is_help=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"noten {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Incremental static page templating."""


@typer_app.command()
def build(
    path: Optional[Path] = typer.Option(
        None, "-C", "--directory", help="Start project lookup here instead of cwd."
    ),
    force: bool = typer.Option(
        False, "-f", "--force", help="Rebuild every page, ignoring timestamps."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
) -> None:
    """Render every stale document of the project."""
    setup_logging(verbose)
    build_command(path, force=force)


@typer_app.command()
def init(
    path: Path = typer.Argument(Path("."), help="Project directory."),
    name: Optional[str] = typer.Option(None, "--name", help="Site name."),
    force: bool = typer.Option(
        False, "--force", help="Overwrite an existing noten.yaml."
    ),
) -> None:
    """Scaffold a new noten project."""
    setup_logging()
    init_command(path, name=name, force=force)


def app(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    typer_app(args=argv)


if __name__ == "__main__":
    app()
