"""Outline flattening and duplicate title disambiguation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import DisambiguatedEntry, HeadingNode, OutlineEntry


def flatten_outline(forest: Iterable[HeadingNode]) -> list[OutlineEntry]:
    """Flatten a heading forest into ordered ``(depth, title)`` entries.

    Traverses depth-first in document order: every node is followed by its
    descendants before its next sibling. Roots have depth 0.

    Args:
        forest: Top-level headings, each carrying nested children.

    Returns:
        list[OutlineEntry]: One entry per node.

    Examples:
        flatten_outline([HeadingNode("X", (HeadingNode("Y"),))])
        # [OutlineEntry(0, "X"), OutlineEntry(1, "Y")]
    """
    entries: list[OutlineEntry] = []
    stack = [(0, node) for node in reversed(list(forest))]

    while stack:
        depth, node = stack.pop()
        entries.append(OutlineEntry(depth, node.title))
        stack.extend((depth + 1, child) for child in reversed(node.children))

    return entries


def disambiguate(entries: Sequence[OutlineEntry]) -> list[DisambiguatedEntry]:
    """Number repeated titles in document order.

    Each entry gets the count of earlier entries with exactly the same title
    (case-sensitive), so the first ``"A"`` is 0, the second is 1, and so on.
    Depth plays no part in the comparison.

    Args:
        entries: Flattened outline in document order.

    Returns:
        list[DisambiguatedEntry]: Entries in the same order with their
            occurrence index.

    Examples:
        disambiguate([OutlineEntry(0, "A"), OutlineEntry(0, "B"), OutlineEntry(0, "A")])
        # occurrences 0, 0, 1
    """
    seen: dict[str, int] = {}
    result: list[DisambiguatedEntry] = []

    for depth, title in entries:
        occurrence = seen.get(title, 0)
        seen[title] = occurrence + 1
        result.append(DisambiguatedEntry(depth, title, occurrence))

    return result
