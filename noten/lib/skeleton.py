"""Skeleton - the shared outer shell every page renders into.

The skeleton is plain text with `%(keyword)` placeholders:

    %(title)        the page title
    %(content)      the rendered page body
    %(description)  the page description (required to exist)
    %(ifdesc) ... %(endifdesc)
                    emitted only when the page has a description

Conditional blocks do not nest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from noten.lib.errors import ParseError, ResolutionError

log = logging.getLogger(__name__)


class Keyword(str, Enum):
    CONTENT = "content"
    DESCRIPTION = "description"
    END_IF_DESC = "endifdesc"
    IF_DESC = "ifdesc"
    TITLE = "title"


Token = Union[str, Keyword]


@dataclass(frozen=True)
class LiteralText:
    text: str


@dataclass(frozen=True)
class Title:
    pass


@dataclass(frozen=True)
class Content:
    pass


@dataclass(frozen=True)
class Description:
    pass


@dataclass(frozen=True)
class ConditionalDescription:
    """Segments emitted only when a description is available."""

    segments: Tuple["Segment", ...] = field(default_factory=tuple)


Segment = Union[LiteralText, Title, Content, Description, ConditionalDescription]


def lex(text: str) -> List[Token]:
    """Split skeleton text into literal strings and placeholder keywords.

    Literal spans and keywords alternate, starting and ending with a
    (possibly empty) literal.
    """
    tokens: List[Token] = []
    rest = text
    while True:
        begin = rest.find("%(")
        if begin == -1:
            break
        tokens.append(rest[:begin])
        rest = rest[begin + 2 :]
        end = rest.find(")")
        if end == -1:
            raise ParseError("`%(` without matching `)`")
        keyword = rest[:end]
        try:
            tokens.append(Keyword(keyword))
        except ValueError:
            raise ParseError(f"Unknown keyword `{keyword}`") from None
        rest = rest[end + 1 :]
    tokens.append(rest)
    return tokens


def parse(tokens: List[Token]) -> List[Segment]:
    """Build the segment tree from a token stream."""
    segments: List[Segment] = []
    if_segments: List[Segment] = []
    inside_ifdesc = False

    for tok in tokens:
        current = if_segments if inside_ifdesc else segments
        if not isinstance(tok, Keyword):
            current.append(LiteralText(tok))
        elif tok is Keyword.IF_DESC:
            if inside_ifdesc:
                raise ParseError("Nested ifdescs are not supported")
            inside_ifdesc = True
        elif tok is Keyword.END_IF_DESC:
            if not inside_ifdesc:
                raise ParseError("endifdesc without preceding ifdesc")
            segments.append(ConditionalDescription(tuple(if_segments)))
            if_segments = []
            inside_ifdesc = False
        elif tok is Keyword.CONTENT:
            current.append(Content())
        elif tok is Keyword.DESCRIPTION:
            current.append(Description())
        else:
            current.append(Title())

    if inside_ifdesc:
        raise ParseError("ifdesc without matching endifdesc")
    return segments


def render_segments(
    segments: Tuple[Segment, ...] | List[Segment],
    title: str,
    content: str,
    description: Optional[str],
) -> str:
    parts: List[str] = []
    for seg in segments:
        if isinstance(seg, LiteralText):
            parts.append(seg.text)
        elif isinstance(seg, Title):
            parts.append(title)
        elif isinstance(seg, Content):
            parts.append(content)
        elif isinstance(seg, Description):
            if description is None:
                raise ResolutionError(
                    "Tried to get description when it didn't exist. "
                    "Try putting it in an ifdesc block."
                )
            parts.append(description)
        elif isinstance(seg, ConditionalDescription):
            if description is not None:
                parts.append(render_segments(seg.segments, title, content, description))
        else:
            raise TypeError(f"Unknown segment {seg!r}")
    return "".join(parts)


class Skeleton:
    """A parsed skeleton document."""

    def __init__(self, segments: List[Segment]):
        self.segments = segments

    @classmethod
    def parse(cls, text: str) -> "Skeleton":
        tokens = lex(text)
        log.debug(f"Got tokens: {tokens!r}")
        segments = parse(tokens)
        log.debug(f"Got segments: {segments!r}")
        return cls(segments)

    @classmethod
    def parse_file(cls, path: Path) -> Tuple["Skeleton", float]:
        """Parse the skeleton at `path`, returning it with its modification time."""
        text = path.read_text(encoding="utf-8")
        try:
            skeleton = cls.parse(text)
        except ParseError as e:
            raise ParseError(e.message, location=str(path)) from e
        return skeleton, path.stat().st_mtime

    def render(
        self, title: str, content: str, description: Optional[str] = None
    ) -> str:
        """Render the page shell around `content`."""
        return render_segments(self.segments, title, content, description)
