"""Detection of an existing TOC block inside document text."""

from __future__ import annotations

import re
from functools import lru_cache

from .config import RenderConfig, normalize_config
from .constants import LIST_MARKER_PATTERN, QUOTE_PREFIX, RENDERED_BLANK_PADDING
from .generator import render_toc
from .logging import get_logger
from .models import TocBounds, TocItemMatch

logger = get_logger("locator")


@lru_cache(maxsize=32)
def _item_pattern(list_marker: str) -> re.Pattern[str]:
    # [> ]<indent><marker> [title](#fragment)
    return re.compile(
        rf"^(?:{re.escape(QUOTE_PREFIX)})?(?P<indent>[ \t]*)"
        rf"(?:{re.escape(list_marker)}|{LIST_MARKER_PATTERN}) "
        r"\[(?P<title>.*)\]\(#[^)\s]*\)[ \t]*$"
    )


def _content(line: str) -> str:
    return line.rstrip("\r\n")


def _is_blank(line: str) -> bool:
    return not line.strip()


def _indent_level(indent: str, indent_unit: int) -> int | None:
    width = len(indent)
    if indent_unit == 0:
        return 0 if width == 0 else None
    if width % indent_unit:
        return None
    return width // indent_unit


def parse_toc_item(line: str, config: RenderConfig | None = None) -> TocItemMatch | None:
    """Parse one rendered TOC line into its nesting level and title.

    The line grammar is an optional ``"> "`` prefix, leading whitespace, a list
    marker (the configured one, ``-``, ``*``, ``+``, or ``N.``/``N)``), one
    space, then a ``[title](#fragment)`` link ending the line. The quote prefix
    does not count towards the indentation.

    Args:
        line: A single line, with or without its line break.
        config: Options supplying ``list_marker`` and ``indent_unit``.

    Returns:
        TocItemMatch | None: The parsed entry, with ``indent_level`` set to None
            when the indentation is not a multiple of ``indent_unit``; None
            when the line is not a TOC entry.

    Examples:
        parse_toc_item("  - [Setup](#setup-1)")  # TocItemMatch(1, "Setup")
        parse_toc_item("   - [Setup](#setup)")  # TocItemMatch(None, "Setup")
    """
    config = normalize_config(config or RenderConfig())
    match = _item_pattern(config.list_marker).match(_content(line))
    if match is None:
        return None
    return TocItemMatch(_indent_level(match.group("indent"), config.indent_unit), match.group("title"))


def _line_offsets(lines: list[str]) -> list[int]:
    offsets = [0]
    for line in lines:
        offsets.append(offsets[-1] + len(line))
    return offsets


def _find_line(lines: list[str], target: str, begin: int = 0) -> int | None:
    for index in range(begin, len(lines)):
        if _content(lines[index]) == target:
            return index
    return None


def _empty_body_padding(config: RenderConfig) -> int:
    rendered = render_toc([], config).splitlines()
    trailing = 0
    for line in reversed(rendered):
        if line.strip():
            break
        trailing += 1
    return trailing


def find_toc_bounds(text: str, config: RenderConfig | None = None) -> TocBounds | None:
    """Locate the TOC block previously rendered into `text`.

    The block opens at the first line equal to ``start_marker``, or to
    ``title_line`` when the start marker is empty; in that case the empty
    placeholder lines rendered before the title are part of the block. With an
    ``end_marker`` the block closes after the first matching line, line break
    included. Without one, the block extends over blank lines, the title line,
    and TOC entries, keeping only the trailing blank lines a rendered block
    carries.

    Args:
        text: Full document text.
        config: Markers and list options used when the block was rendered.

    Returns:
        TocBounds | None: The ``[start, end)`` range, or None when no block
            is present or the end marker is missing.

    Examples:
        find_toc_bounds(document, RenderConfig(end_marker=""))
    """
    config = normalize_config(config or RenderConfig())
    anchor = config.start_marker or config.title_line
    if not anchor:
        return None

    lines = text.splitlines(keepends=True)
    offsets = _line_offsets(lines)

    anchor_index = _find_line(lines, anchor)
    if anchor_index is None:
        logger.debug("No TOC block: %r not found", anchor)
        return None

    start_index = anchor_index
    if not config.start_marker:
        while (
            start_index > 0
            and anchor_index - start_index < RENDERED_BLANK_PADDING
            and _is_blank(lines[start_index - 1])
        ):
            start_index -= 1

    if config.end_marker:
        end_index = _find_line(lines, config.end_marker, anchor_index + 1)
        if end_index is None:
            logger.debug("No TOC block: end marker %r missing", config.end_marker)
            return None
        bounds = TocBounds(offsets[start_index], offsets[end_index + 1])
        logger.debug("TOC block found at %d-%d", *bounds)
        return bounds

    stop = anchor_index + 1
    saw_items = False
    while stop < len(lines):
        line = lines[stop]
        if parse_toc_item(line, config) is not None:
            saw_items = True
        elif not (_is_blank(line) or _content(line) == config.title_line):
            break
        stop += 1

    trailing = 0
    while stop - trailing > anchor_index + 1 and _is_blank(lines[stop - trailing - 1]):
        trailing += 1
    padding = RENDERED_BLANK_PADDING if saw_items else _empty_body_padding(config)
    end_index = stop - max(trailing - padding, 0)

    bounds = TocBounds(offsets[start_index], offsets[end_index])
    logger.debug("TOC block found at %d-%d", *bounds)
    return bounds
