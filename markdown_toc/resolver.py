"""Resolution of TOC entries and fragment links to heading positions."""

from __future__ import annotations

import re

from .config import RenderConfig
from .locator import parse_toc_item
from .logging import get_logger

logger = get_logger("resolver")


def _heading_pattern(level: int, title: str, flags: int = 0) -> re.Pattern[str]:
    return re.compile(
        rf"^#{{{level}}}[ \t]+{re.escape(title)}(?:[ \t]+#+)?[ \t]*\r?$",
        re.MULTILINE | flags,
    )


def _last_match(pattern: re.Pattern[str], text: str) -> int | None:
    offset = None
    for match in pattern.finditer(text):
        offset = match.start()
    return offset


def resolve_toc_line(line: str, text: str, config: RenderConfig | None = None) -> int | None:
    """Find the heading a rendered TOC line points at.

    The entry's indentation gives the heading level (indent level 0 is ``#``,
    1 is ``##``, and so on). When several headings match, the one closest to
    the end of the document wins. An exact-case match is preferred over a
    case-insensitive one.

    Args:
        line: The TOC line, e.g. ``"  - [Setup](#setup-1)"``.
        text: Full document text.
        config: Options supplying ``list_marker`` and ``indent_unit``.

    Returns:
        int | None: Offset of the start of the heading line, or None when the
            line is not a TOC entry, is misindented, or matches no heading.

    Examples:
        resolve_toc_line("- [Intro](#intro)", "# Intro\\n")  # 0
    """
    item = parse_toc_item(line, config)
    if item is None or item.indent_level is None:
        logger.debug("No target: %r is not a well-formed TOC entry", line)
        return None

    level = item.indent_level + 1
    offset = _last_match(_heading_pattern(level, item.title), text)
    if offset is None:
        offset = _last_match(_heading_pattern(level, item.title, re.IGNORECASE), text)
        if offset is not None:
            logger.debug("Matched %r ignoring case", item.title)

    if offset is None:
        logger.debug("No target: no level %d heading titled %r", level, item.title)
    return offset


def resolve_fragment(link: str, text: str) -> int | None:
    """Find the heading targeted by a raw ``#fragment`` link.

    Hyphens in the fragment match either a hyphen or a space; matching
    ignores case and the first heading from the top of the document wins.

    Args:
        link: Link target such as ``"#getting-started"``.
        text: Full document text.

    Returns:
        int | None: Offset of the heading line start, or None when `link` is
            not a fragment, the fragment is empty, or nothing matches.

    Examples:
        resolve_fragment("#getting-started", "## Getting started\\n")  # 0
    """
    if not link.startswith("#") or link == "#":
        return None

    target = "[- ]".join(re.escape(part) for part in link[1:].split("-"))
    match = re.search(rf"^#+[ \t]+{target}", text, re.MULTILINE | re.IGNORECASE)
    if match is None:
        logger.debug("No target: no heading matches %r", link)
        return None
    return match.start()


def find_line_at(text: str, offset: int) -> str:
    """Return the line of `text` containing `offset`, without its line break.

    Examples:
        find_line_at("a\\nbc\\n", 3)  # "bc"
    """
    offset = max(0, min(offset, len(text)))
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    if end == -1:
        end = len(text)
    return text[start:end].rstrip("\r")
