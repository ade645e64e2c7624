"""Document processing.

A document is an optional attribute header followed by a Markdown body:

    {
    title: About
    description: Who we are
    constants:
      year: 2016
    }
    # About us

    Copyright {{ const year }}, see {{ url example.com }}.

The header is YAML wrapped in `{` ... `}` and must start at the very first
character. Without a header `title`, the first non-empty body line must be a
Markdown or HTML heading and supplies the title.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

import yaml
from markdown_it import MarkdownIt
from pydantic import BaseModel, Field, ValidationError

from noten.lib.config import NotenConfig, Scalar
from noten.lib.deps import DependencyStore
from noten.lib.errors import NotenError, ParseError, ResolutionError, SubstitutionError
from noten.lib.generators import GeneratorRunner
from noten.lib.skeleton import Skeleton
from noten.lib.substitution import ProcessingContext, substitute

log = logging.getLogger(__name__)

HEADER_OPEN = "{"
HEADER_CLOSE = "}"
COMMAND_OPEN = "{{"
COMMAND_CLOSE = "}}"

MD_HEADING_RE = re.compile(r"^#{1,9}([^#].*)$")
HTML_HEADING_RE = re.compile(r"^<h([0-9])>(.*)</h\1>$")


class DocumentHeader(BaseModel):
    """Attributes from a document's `{ ... }` header."""

    title: Optional[str] = Field(default=None, description="Page title")
    description: Optional[str] = Field(default=None, description="Page description")
    constants: dict[str, Scalar] = Field(
        default_factory=dict, description="Constants local to this document"
    )


def parse_header_text(text: str) -> DocumentHeader:
    try:
        data = yaml.safe_load(text)
    except yaml.MarkedYAMLError as e:
        location = None
        if e.problem_mark is not None:
            location = (
                f"header line {e.problem_mark.line + 1}, "
                f"column {e.problem_mark.column + 1}"
            )
        raise ParseError(f"Failed to parse header: {e.problem}", location) from e
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse header: {e}") from e

    if data is None:
        return DocumentHeader()
    if not isinstance(data, dict):
        raise ParseError("Header must be a mapping")

    try:
        return DocumentHeader.model_validate(data)
    except ValidationError as e:
        err = e.errors()[0]
        location = "header field " + ".".join(str(part) for part in err["loc"])
        raise ParseError(f"Invalid header: {err['msg']}", location) from e


def split_header(text: str) -> tuple[DocumentHeader, str]:
    """Separate the attribute header from the body."""
    if not text.startswith(HEADER_OPEN):
        return DocumentHeader(), text
    close = text.find(HEADER_CLOSE)
    if close == -1:
        raise ParseError(f"Expected closing {HEADER_CLOSE} of the header")
    return parse_header_text(text[1:close]), text[close + 1 :]


def find_title(body: str) -> str:
    """Take the title from the first non-empty line, which must be a heading."""
    for line in body.splitlines():
        line = line.strip()
        if not line:
            continue
        m = MD_HEADING_RE.match(line)
        if m and m.group(1).strip():
            return m.group(1).strip()
        m = HTML_HEADING_RE.match(line)
        if m:
            return m.group(2).strip()
        raise ResolutionError(
            f"Can't find title: {line!r} is not a valid header. "
            "Add one or set `title` in the document header."
        )
    raise ResolutionError("Can't find title: document has only empty lines")


def expand_commands(body: str, context: ProcessingContext) -> str:
    """Replace every `{{ command }}` in `body` with its substitution."""
    output = []
    pos = 0
    while True:
        start = body.find(COMMAND_OPEN, pos)
        if start == -1:
            output.append(body[pos:])
            break
        output.append(body[pos:start])
        end = body.find(COMMAND_CLOSE, start + len(COMMAND_OPEN))
        if end == -1:
            raise ParseError(f"Expected closing {COMMAND_CLOSE}", f"offset {start}")
        command = body[start + len(COMMAND_OPEN) : end]
        log.debug(f"Substitution: {command!r}")
        try:
            output.append(substitute(command, context))
        except NotenError as e:
            raise SubstitutionError(command, e) from e
        pos = end + len(COMMAND_CLOSE)
    return "".join(output)


_markdown = MarkdownIt("commonmark").enable("table")


def render_markdown(text: str) -> str:
    return _markdown.render(text)


def process(
    text: str,
    document_path: Path,
    config: NotenConfig,
    skeleton: Skeleton,
    deps: DependencyStore,
    runner: Optional[GeneratorRunner] = None,
) -> str:
    """Turn one document's source into a finished page."""
    header, body = split_header(text)
    title = header.title if header.title is not None else find_title(body)

    # Drop stale entries so removed `gen` calls stop being tracked.
    deps.clear_deps(document_path)

    context = ProcessingContext(
        config=config,
        deps=deps,
        document_path=document_path,
        runner=runner,
        local_constants=header.constants,
    )
    expanded = expand_commands(body, context)
    html = render_markdown(expanded)
    return skeleton.render(title, html, header.description)
