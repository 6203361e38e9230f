"""Data models for markdown-toc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import NamedTuple


@dataclass(frozen=True)
class HeadingNode:
    """A heading in a nested document outline.

    Attributes:
        title: Heading text without the leading ``#`` markers.
        children: Headings nested one level below this one, in document order.
    """

    title: str
    children: tuple[HeadingNode, ...] = ()


class OutlineEntry(NamedTuple):
    """A flattened heading: nesting depth (0 for top level) and title."""

    depth: int
    title: str


class DisambiguatedEntry(NamedTuple):
    """A flattened heading with the occurrence index of its title.

    ``occurrence`` is 0 for the first heading with a given title, 1 for the
    second, and so on.
    """

    depth: int
    title: str
    occurrence: int


class TocBounds(NamedTuple):
    """Half-open ``[start, end)`` character range of a TOC block."""

    start: int
    end: int


class TocItemMatch(NamedTuple):
    """A rendered TOC line parsed back into its parts.

    ``indent_level`` is None when the leading whitespace is not a multiple of
    the configured indent unit.
    """

    indent_level: int | None
    title: str


class ParserState(Enum):
    """Parser states used while scanning Markdown content.

    Attributes:
        NORMAL: Default state for regular text.
        IN_FENCED_CODE: Inside a fenced code block.
        IN_INDENTED_CODE: Inside an indented code block.
    """

    NORMAL = auto()
    IN_FENCED_CODE = auto()
    IN_INDENTED_CODE = auto()


@dataclass
class ParserContext:
    """Encapsulate parser state while walking Markdown text.

    Attributes:
        state: Current parser state.
        fence_char: Fence character that opened a fenced code block, if any.
        fence_length: Number of fence characters that opened the block.
    """

    state: ParserState = ParserState.NORMAL
    fence_char: str | None = None
    fence_length: int = 0


@dataclass
class ParseResult:
    """Structured result of scanning a Markdown document.

    Attributes:
        lines: Lines from the document, including trailing newlines.
        headings: ``(level, title)`` pairs in document order.
        outline: Headings nested into a forest of `HeadingNode`.
        bounds: Range of the existing TOC block, or None when absent.
    """

    lines: list[str]
    headings: list[tuple[int, str]]
    outline: list[HeadingNode] = field(default_factory=list)
    bounds: TocBounds | None = None


@dataclass(frozen=True)
class TocUpdate:
    """Outcome of a document-level TOC operation.

    Attributes:
        content: Document text after the operation.
        action: One of ``"inserted"``, ``"replaced"``, ``"deleted"`` or
            ``"unchanged"``.
        bounds: Range of the TOC block in ``content`` after the operation, or
            the removed range for deletions. None when nothing was touched.
    """

    content: str
    action: str
    bounds: TocBounds | None = None
