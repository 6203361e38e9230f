"""Markdown heading scanning: the outline provider for files on disk."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .config import ConfigError, RenderConfig, validate_config
from .constants import CLOSING_FENCE_MAX_INDENT, CODE_FENCE_PATTERN, HEADER_PATTERN
from .exceptions import LineTooLongError, ParseError, TooManyHeadersError
from .filesystem import SourceFile, read_source
from .locator import find_toc_bounds
from .models import HeadingNode, ParseResult, ParserContext, ParserState


def _leading_whitespace_columns(line: str) -> int:
    """Compute the column width of leading whitespace.

    Tabs advance to the next multiple of four columns to match Markdown
    indentation rules.

    Examples:
        _leading_whitespace_columns("    text")  # 4
        _leading_whitespace_columns("\\ttext")  # 4
    """
    columns = 0
    for character in line:
        if character == " ":
            columns += 1
            continue
        if character == "\t":
            columns += 4 - (columns % 4)
            continue
        break
    return columns


def _try_open_fence(ctx: ParserContext, line: str) -> bool:
    """Detect the start of a fenced code block and record it in `ctx`."""
    if ctx.state is not ParserState.NORMAL:
        return False

    fence_match = CODE_FENCE_PATTERN.match(line)
    if not fence_match:
        return False

    indent_columns = _leading_whitespace_columns(fence_match.group("indent") or "")
    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    fence_sequence = fence_match.group("fence")
    ctx.state = ParserState.IN_FENCED_CODE
    ctx.fence_char = fence_sequence[0]
    ctx.fence_length = len(fence_sequence)
    return True


def _try_close_fence(ctx: ParserContext, line: str) -> bool:
    """Attempt to close the active fenced code block.

    A closing fence uses the opening character, is at least as long as the
    opening run, carries no info string, and is indented by at most three
    columns.
    """
    if ctx.state is not ParserState.IN_FENCED_CODE or ctx.fence_char is None:
        return False

    indent_columns = _leading_whitespace_columns(line)
    stripped_line = line.lstrip(" \t")
    if not stripped_line or stripped_line[0] != ctx.fence_char:
        return False

    fence_run_length = len(stripped_line) - len(stripped_line.lstrip(ctx.fence_char))
    if fence_run_length < ctx.fence_length:
        return False

    if stripped_line[fence_run_length:].strip():
        return False

    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    ctx.state = ParserState.NORMAL
    ctx.fence_char = None
    ctx.fence_length = 0
    return True


def _try_enter_indented_code(ctx: ParserContext, line: str, in_paragraph: bool) -> bool:
    # Indented lines continuing a paragraph are not code.
    if ctx.state is not ParserState.NORMAL or in_paragraph:
        return False

    if line.strip() and _leading_whitespace_columns(line) >= 4:
        ctx.state = ParserState.IN_INDENTED_CODE
        return True

    return False


def _try_exit_indented_code(ctx: ParserContext, line: str) -> bool:
    """Determine whether to stay in an indented code block.

    Returns:
        bool: True when the line is still code (blank or indented); False once
            normal processing should resume.
    """
    if ctx.state is not ParserState.IN_INDENTED_CODE:
        return False

    if line.strip() == "" or _leading_whitespace_columns(line) >= 4:
        return True

    ctx.state = ParserState.NORMAL
    return False


def _content_length(line: str) -> int:
    return len(line.rstrip("\r\n"))


def parse_headings(content: str, config: RenderConfig | None = None) -> list[tuple[int, str]]:
    """Collect ATX headings from Markdown content.

    Convenience wrapper around `parse_markdown` returning only the headings.

    Examples:
        parse_headings("# Title\\n\\n## Section\\n")  # [(1, "Title"), (2, "Section")]
    """
    return parse_markdown(content, config).headings


@dataclass
class _Draft:
    level: int
    title: str
    children: list[_Draft] = field(default_factory=list)

    def freeze(self) -> HeadingNode:
        return HeadingNode(self.title, tuple(child.freeze() for child in self.children))


def build_outline(headings: Iterable[tuple[int, str]]) -> list[HeadingNode]:
    """Nest ``(level, title)`` headings into a forest.

    A heading becomes a child of the closest preceding heading with a lower
    level. Skipped levels collapse into a single nesting step, so ``#`` then
    ``###`` nests the second heading directly under the first.

    Args:
        headings: Headings in document order.

    Returns:
        list[HeadingNode]: Top-level nodes in document order.

    Examples:
        build_outline([(1, "A"), (2, "B"), (1, "C")])
        # [HeadingNode("A", (HeadingNode("B"),)), HeadingNode("C")]
    """
    roots: list[_Draft] = []
    stack: list[_Draft] = []

    for level, title in headings:
        while stack and stack[-1].level >= level:
            stack.pop()
        draft = _Draft(level, title)
        (stack[-1].children if stack else roots).append(draft)
        stack.append(draft)

    return [draft.freeze() for draft in roots]


def parse_markdown(content: str, config: RenderConfig | None = None) -> ParseResult:
    """Scan Markdown content for headings and an existing TOC block.

    Headings inside fenced code, indented code, or the current TOC block are
    ignored, as are headings outside ``[min_level, max_level]``. Closing ``#``
    sequences are dropped from titles.

    Args:
        content: The markdown content to parse.
        config: Configuration controlling levels, limits, and TOC markers.
            Defaults to a new `RenderConfig`.

    Returns:
        ParseResult: Document lines, headings, nested outline, and TOC bounds.

    Raises:
        ConfigError: If the configuration fails validation.
        LineTooLongError: If a line outside the TOC exceeds ``max_line_length``.
        TooManyHeadersError: If the document has more headings than allowed.

    Examples:
        parse_markdown("# Title\\n\\n## Section\\n").outline
    """
    config = config or RenderConfig()
    validate_config(config)

    lines = content.splitlines(keepends=True)
    bounds = find_toc_bounds(content, config)

    headings: list[tuple[int, str]] = []
    ctx = ParserContext()
    in_paragraph = False
    offset = 0

    for line_number, line in enumerate(lines):
        line_start = offset
        offset += len(line)

        if bounds is not None and bounds.start <= line_start < bounds.end:
            in_paragraph = False
            continue

        if ctx.state is ParserState.IN_FENCED_CODE:
            _try_close_fence(ctx, line)
            in_paragraph = False
            continue

        if ctx.state is ParserState.IN_INDENTED_CODE:
            if _try_exit_indented_code(ctx, line):
                continue

        if _content_length(line) > config.max_line_length:
            raise LineTooLongError(line_number + 1, config.max_line_length)

        if _try_open_fence(ctx, line):
            continue

        if _try_enter_indented_code(ctx, line, in_paragraph):
            continue

        header_match = HEADER_PATTERN.match(line.rstrip("\r\n"))
        if header_match is None:
            in_paragraph = bool(line.strip())
            continue
        in_paragraph = False

        level = len(header_match.group(1))
        if not config.min_level <= level <= config.max_level:
            continue

        headings.append((level, header_match.group(2)))
        if len(headings) > config.max_headers:
            raise TooManyHeadersError(config.max_headers)

    return ParseResult(
        lines=lines,
        headings=headings,
        outline=build_outline(headings),
        bounds=bounds,
    )


class ParseFileError(Exception):
    """Raised when parsing a Markdown file fails."""


def parse_file(
    filepath: Path, config: RenderConfig | None = None
) -> tuple[SourceFile, ParseResult]:
    """Read and scan a Markdown file.

    Args:
        filepath: Path to the markdown file to parse.
        config: Configuration controlling parsing and the accepted file
            size; defaults to a new `RenderConfig`.

    Returns:
        tuple[SourceFile, ParseResult]: The file as read and its scan result.

    Raises:
        ParseFileError: If configuration is invalid, limits are exceeded, or
            the file cannot be read or decoded.

    Examples:
        source, result = parse_file(Path("README.md"), config)
    """
    config = config or RenderConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise ParseFileError(str(error)) from error

    try:
        source = read_source(filepath, config.max_file_size)
    except UnicodeDecodeError as error:
        raise ParseFileError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except OSError as error:
        raise ParseFileError(str(error)) from error

    try:
        result = parse_markdown(source.text, config)
    except LineTooLongError as error:
        error_message = (
            f"{filepath} contains a line at line {error.line_number} "
            f"exceeding the maximum allowed length of {error.max_line_length} characters."
        )
        raise ParseFileError(error_message) from error
    except TooManyHeadersError as error:
        error_message = f"{filepath} contains too many headers (limit: {error.limit})."
        raise ParseFileError(error_message) from error
    except ParseError as error:
        raise ParseFileError(f"{filepath}: {error}") from error

    return source, result
