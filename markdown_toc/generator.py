"""Table of contents rendering."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from .config import RenderConfig, normalize_config
from .constants import QUOTE_PREFIX
from .models import DisambiguatedEntry, HeadingNode, OutlineEntry
from .outline import disambiguate, flatten_outline
from .slugify import to_link

OutlineHook = Callable[[list[OutlineEntry]], Sequence[OutlineEntry]]


def render_toc_lines(
    entries: Iterable[DisambiguatedEntry], config: RenderConfig | None = None
) -> list[str]:
    """Render one list line per outline entry.

    Args:
        entries: Disambiguated entries in document order.
        config: Rendering options. Defaults to a new `RenderConfig`.

    Returns:
        list[str]: Lines without trailing newlines.

    Examples:
        render_toc_lines([DisambiguatedEntry(1, "Setup", 1)])
        # ["  - [Setup](#setup-1)"]
    """
    config = normalize_config(config or RenderConfig())
    prefix = QUOTE_PREFIX if config.quote_lines else ""

    lines = []
    for depth, title, occurrence in entries:
        indent = " " * (depth * config.indent_unit)
        lines.append(f"{prefix}{indent}{config.list_marker} {to_link(title, occurrence)}")
    return lines


def render_toc(
    entries: Iterable[DisambiguatedEntry], config: RenderConfig | None = None
) -> str:
    """Render the complete TOC block.

    The block always has the same shape: start marker, blank line, title,
    blank line, entries, blank line, end marker, newline. Empty markers leave
    an empty line in their place so the locator can find the block again.

    Args:
        entries: Disambiguated entries in document order.
        config: Rendering options. Defaults to a new `RenderConfig`.

    Returns:
        str: The TOC block, ending with a newline.
    """
    config = normalize_config(config or RenderConfig())
    body = "\n".join(render_toc_lines(entries, config))
    return f"{config.start_marker}\n\n{config.title_line}\n\n{body}\n\n{config.end_marker}\n"


def generate_toc(
    forest: Iterable[HeadingNode],
    config: RenderConfig | None = None,
    manipulate: OutlineHook | None = None,
) -> str:
    """Flatten, disambiguate, and render a heading forest.

    Args:
        forest: Top-level headings from an outline provider.
        config: Rendering options. Defaults to a new `RenderConfig`.
        manipulate: Optional hook receiving the flattened outline and
            returning the entries to render. Runs before anchors are numbered.

    Returns:
        str: The TOC block.

    Examples:
        generate_toc([HeadingNode("Intro")])
        generate_toc(forest, manipulate=lambda entries: [e for e in entries if e.depth < 2])
    """
    entries = flatten_outline(forest)
    if manipulate is not None:
        entries = list(manipulate(entries))
    return render_toc(disambiguate(entries), config)
