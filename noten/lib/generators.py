"""Generators - external programs invoked by the `gen` command.

A generator is a cargo project living at <generators_dir>/<name>. Before
each use it is built in release mode and the produced binary
<generators_dir>/<name>/target/release/<name> is run with the command's
arguments. Its stdout becomes the substitution text.

Calls block until the child exits; there is no timeout.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from noten.lib.errors import ExternalToolError, GeneratorBuildError

log = logging.getLogger(__name__)


def generator_dir(generators_dir: Path, name: str) -> Path:
    return generators_dir / name


def executable_path(generators_dir: Path, name: str) -> Path:
    """Path of the binary a generator build produces."""
    return generator_dir(generators_dir, name) / "target" / "release" / name


class GeneratorRunner(ABC):
    """Builds and runs a generator, returning its raw stdout."""

    @abstractmethod
    def build_and_run(self, name: str, args: list[str]) -> bytes:
        """Build generator `name` and run it with `args`.

        Raises:
            GeneratorBuildError: If the build fails or cargo cannot be started.
            ExternalToolError: If the generator can't be run or exits non-zero.
        """
        ...


class CargoGeneratorRunner(GeneratorRunner):
    """Runs generators that are cargo projects."""

    def __init__(self, generators_dir: Path):
        self.generators_dir = generators_dir

    def build(self, name: str) -> Path:
        """Build the generator and return the path of its executable."""
        cwd = generator_dir(self.generators_dir, name)
        log.info(f"Building generator '{name}'")
        try:
            # Build output goes straight to the terminal.
            result = subprocess.run(["cargo", "build", "--release"], cwd=cwd)
        except OSError as e:
            raise GeneratorBuildError(
                name, reason=f"failed to spawn cargo: {e}"
            ) from e
        if result.returncode != 0:
            raise GeneratorBuildError(name, result.returncode)
        return executable_path(self.generators_dir, name)

    def run(self, executable: Path, args: list[str]) -> bytes:
        log.debug(f"Running {executable} {args}")
        try:
            result = subprocess.run([str(executable), *args], capture_output=True)
        except OSError as e:
            raise ExternalToolError(f"Failed to spawn {executable}: {e}") from e
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            message = f"{executable} failed (exit code {result.returncode})"
            if stderr:
                message += f": {stderr}"
            raise ExternalToolError(message)
        return result.stdout

    def build_and_run(self, name: str, args: list[str]) -> bytes:
        return self.run(self.build(name), args)
