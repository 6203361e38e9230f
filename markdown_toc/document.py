"""Document-level TOC operations.

Each operation takes the full document text and returns new text; nothing is
kept between calls. These are the entry points a host (editor plugin, save
hook, or the CLI) drives.
"""

from __future__ import annotations

import re

from .config import RenderConfig, normalize_config
from .generator import OutlineHook, generate_toc
from .locator import find_toc_bounds
from .logging import get_logger
from .models import ParseResult, TocBounds, TocUpdate
from .parser import parse_markdown
from .resolver import find_line_at, resolve_fragment, resolve_toc_line

logger = get_logger("document")

_FRAGMENT_LINK = re.compile(r"\]\((#[^)\s]*)\)")


def _line_break(text: str) -> str:
    """Return the line break of the document's first line, ``"\\n"`` by default."""
    first = text.find("\n")
    return "\r\n" if first > 0 and text[first - 1] == "\r" else "\n"


def _render_for(
    text: str, result: ParseResult, config: RenderConfig, manipulate: OutlineHook | None
) -> str:
    toc = generate_toc(result.outline, config, manipulate)
    newline = _line_break(text)
    return toc if newline == "\n" else toc.replace("\n", newline)


def insert_toc(
    text: str,
    position: int,
    config: RenderConfig | None = None,
    manipulate: OutlineHook | None = None,
) -> TocUpdate:
    """Insert a freshly rendered TOC at `position`, leaving any existing block.

    The block uses the same line break as the rest of the document.

    Raises:
        ParseError: If the document exceeds the configured scan limits.
    """
    config = normalize_config(config or RenderConfig())
    position = max(0, min(position, len(text)))
    toc = _render_for(text, parse_markdown(text, config), config, manipulate)
    if position and text[position - 1] != "\n":
        # The block must start on a line of its own
        newline = _line_break(text)
        text = text[:position] + newline + text[position:]
        position += len(newline)
    content = text[:position] + toc + text[position:]
    return TocUpdate(content, "inserted", TocBounds(position, position + len(toc)))


def refresh_toc(
    text: str,
    config: RenderConfig | None = None,
    position: int = 0,
    manipulate: OutlineHook | None = None,
) -> TocUpdate:
    """Replace the existing TOC block, or insert one at `position`.

    Applying this twice gives the same document as applying it once.

    Args:
        text: Full document text.
        config: Rendering and marker options.
        position: Insertion offset used when the document has no TOC yet.
        manipulate: Optional hook reshaping the flattened outline.

    Returns:
        TocUpdate: The new content with action ``"replaced"``, ``"unchanged"``
            (the block was already current), or ``"inserted"``.

    Raises:
        ParseError: If the document exceeds the configured scan limits.
    """
    config = normalize_config(config or RenderConfig())
    result = parse_markdown(text, config)
    bounds = result.bounds
    if bounds is None:
        return insert_toc(text, position, config, manipulate)

    toc = _render_for(text, result, config, manipulate)
    new_bounds = TocBounds(bounds.start, bounds.start + len(toc))
    if text[bounds.start : bounds.end] == toc:
        return TocUpdate(text, "unchanged", new_bounds)

    logger.debug("Replacing TOC block at %d-%d", *bounds)
    return TocUpdate(text[: bounds.start] + toc + text[bounds.end :], "replaced", new_bounds)


def refresh_if_present(
    text: str, config: RenderConfig | None = None, manipulate: OutlineHook | None = None
) -> TocUpdate:
    """Regenerate the TOC only when the document already has one.

    Intended to run before saving a document.
    """
    config = normalize_config(config or RenderConfig())
    if find_toc_bounds(text, config) is None:
        return TocUpdate(text, "unchanged")
    return refresh_toc(text, config, manipulate=manipulate)


def delete_toc(text: str, config: RenderConfig | None = None) -> TocUpdate:
    """Remove the existing TOC block.

    Returns:
        TocUpdate: Action ``"deleted"`` with the removed range, or
            ``"unchanged"`` when no block was found.
    """
    bounds = find_toc_bounds(text, config)
    if bounds is None:
        return TocUpdate(text, "unchanged")
    return TocUpdate(text[: bounds.start] + text[bounds.end :], "deleted", bounds)


def follow_link(text: str, offset: int, config: RenderConfig | None = None) -> int | None:
    """Resolve the TOC entry under `offset` to its heading.

    Tries the rendered entry first; when that yields nothing, falls back to
    the first ``(#fragment)`` link on the line.

    Returns:
        int | None: Offset of the heading line, or None when there is no target.
    """
    line = find_line_at(text, offset)
    target = resolve_toc_line(line, text, config)
    if target is not None:
        return target

    link = _FRAGMENT_LINK.search(line)
    if link is None:
        return None
    return resolve_fragment(link.group(1), text)
