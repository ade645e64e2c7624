"""Inline substitution commands.

The text between `{{` and `}}` is handled in two phases:

1. Constant expansion: every `%name` (lowercase letters and hyphens) is
   replaced by the constant of that name, local constants shadowing global.
2. Dispatch: the first lowercase word selects the command.

    {{ url example.com }}        -> <a href="example.com">example.com</a>
    {{ const author }}           -> value of constant `author`
    {{ gen clock %tz --short }}  -> stdout of generator `clock`
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from noten.lib.config import NotenConfig, Scalar, scalar_to_string
from noten.lib.deps import DependencyStore
from noten.lib.errors import ExternalToolError, ParseError, ResolutionError
from noten.lib.generators import (
    CargoGeneratorRunner,
    GeneratorRunner,
    executable_path,
    generator_dir,
)

log = logging.getLogger(__name__)

CONSTANT_RE = re.compile(r"%([a-z-]+)")
COMMAND_RE = re.compile(r"([a-z]*)(.*)", re.DOTALL)


class Constants:
    """Two layered constant tables; the local one is consulted first."""

    def __init__(
        self,
        global_constants: Mapping[str, Scalar],
        local_constants: Optional[Mapping[str, Scalar]] = None,
    ):
        self.global_constants = global_constants
        self.local_constants = local_constants or {}

    def get(self, name: str) -> str:
        if name in self.local_constants:
            return scalar_to_string(self.local_constants[name])
        if name in self.global_constants:
            return scalar_to_string(self.global_constants[name])
        raise ResolutionError(f"Constant `{name}` does not exist")


def expand_constants(command: str, constants: Constants) -> str:
    """Replace every `%name` in `command` with its constant's value.

    Fails on the left-most unknown name.
    """
    return CONSTANT_RE.sub(lambda m: constants.get(m.group(1)), command)


@dataclass(frozen=True)
class UrlCommand:
    url: str


@dataclass(frozen=True)
class ConstCommand:
    name: str


@dataclass(frozen=True)
class GenCommand:
    generator: str
    args: tuple[str, ...] = ()


Command = Union[UrlCommand, ConstCommand, GenCommand]


def parse_command(text: str) -> Command:
    """Decode an already expanded command string."""
    match = COMMAND_RE.match(text.strip())
    if match is None:
        raise ParseError(f"Malformed command: {text!r}")
    verb, rest = match.group(1), match.group(2)
    log.debug(f"Command: {verb!r}, Rest: {rest!r}")

    if verb == "url":
        return UrlCommand(rest.strip())
    if verb == "const":
        return ConstCommand(rest.strip())
    if verb == "gen":
        words = rest.split()
        if not words:
            raise ResolutionError("gen requires a generator name")
        return GenCommand(words[0], tuple(words[1:]))
    raise ResolutionError(f"Unknown command: {verb or text.strip()!r}")


@dataclass
class ProcessingContext:
    """Everything a substitution needs besides the command text."""

    config: NotenConfig
    deps: DependencyStore
    document_path: Path
    runner: Optional[GeneratorRunner] = None
    local_constants: Mapping[str, Scalar] = field(default_factory=dict)

    @property
    def constants(self) -> Constants:
        return Constants(self.config.constants, self.local_constants)

    def get_runner(self) -> GeneratorRunner:
        if self.runner is None:
            if self.config.generators_dir is None:
                raise ResolutionError("Gen requested but no generators dir configured")
            self.runner = CargoGeneratorRunner(self.config.generators_dir)
        return self.runner


def gen(command: GenCommand, context: ProcessingContext) -> str:
    generators_dir = context.config.generators_dir
    if generators_dir is None:
        raise ResolutionError("Gen requested but no generators dir configured")

    gen_dir = generator_dir(generators_dir, command.generator)
    if not gen_dir.exists():
        raise ResolutionError(f"{gen_dir} does not exist")

    runner = context.get_runner()
    exe = executable_path(generators_dir, command.generator)
    log.debug(f"Gen command path is {exe}")
    context.deps.add_dep(context.document_path, exe)

    output = runner.build_and_run(command.generator, list(command.args))
    try:
        return output.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExternalToolError(
            f"Generator '{command.generator}' produced invalid UTF-8: {e}"
        ) from e


def execute(command: Command, context: ProcessingContext) -> str:
    if isinstance(command, UrlCommand):
        return f'<a href="{command.url}">{command.url}</a>'
    if isinstance(command, ConstCommand):
        return context.constants.get(command.name)
    if isinstance(command, GenCommand):
        return gen(command, context)
    raise TypeError(f"Unknown command {command!r}")


def substitute(text: str, context: ProcessingContext) -> str:
    """Expand and run one inline command, returning its replacement text."""
    expanded = expand_constants(text.strip(), context.constants)
    return execute(parse_command(expanded), context)
