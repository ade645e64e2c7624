"""Shared error handling for noten."""

from __future__ import annotations

import sys
from typing import NoReturn

import typer


class NotenError(Exception):
    """Base exception for noten operations."""

    # Errors that make every later document untrustworthy stop the whole build.
    aborts_run = False

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ConfigError(NotenError):
    """Raised when noten.yaml is missing or malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, exit_code=2)


class ParseError(NotenError):
    """Raised on malformed skeleton, header or command syntax."""

    def __init__(self, message: str, location: str | None = None) -> None:
        self.location = location
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)


class ResolutionError(NotenError):
    """Raised when a name (constant, command, generator, title) can't be resolved."""

    pass


class ExternalToolError(NotenError):
    """Raised when an external generator fails or produces unusable output."""

    pass


class GeneratorBuildError(ExternalToolError):
    """Raised when a generator fails to build."""

    aborts_run = True

    def __init__(
        self, generator: str, returncode: int | None = None, reason: str | None = None
    ) -> None:
        self.generator = generator
        self.returncode = returncode
        message = f"Failed to build generator '{generator}'"
        if returncode is not None:
            message += f" (exit code {returncode})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SubstitutionError(NotenError):
    """Raised when a single inline command fails; names the command text."""

    def __init__(self, command: str, cause: NotenError) -> None:
        self.command = command
        self.cause = cause
        super().__init__(f"Error in substitution {{{{{command}}}}}: {cause.message}")

    @property
    def aborts_run(self) -> bool:  # type: ignore[override]
        return self.cause.aborts_run


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Handle and exit on noten errors."""
    if isinstance(error, NotenError):
        exit_with_error(error.message, error.exit_code)
    else:
        # Unexpected error
        typer.echo(f"Unexpected error: {error}", err=True)
        sys.exit(1)
