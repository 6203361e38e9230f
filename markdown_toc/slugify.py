"""Slug generation for markdown headings."""

from __future__ import annotations

import re
import unicodedata

# Hyphens and underscores survive punctuation stripping
_PRESERVED = frozenset("-_")
_WHITESPACE_RUN = re.compile(r"\s+")


def _is_punctuation(character: str) -> bool:
    return character not in _PRESERVED and unicodedata.category(character)[0] in ("P", "S")


def generate_slug(title: str) -> str:
    """Generate the anchor fragment for a Markdown heading title.

    Trims the title, lowercases it, removes punctuation and symbol characters
    other than hyphens and underscores, and replaces each run of whitespace
    with a single hyphen. Letters and digits outside ASCII are kept.

    Args:
        title: The heading text to convert.

    Returns:
        str: The fragment, without the leading ``#``. Empty for empty titles.

    Examples:
        generate_slug("Melpa (~snapshot)")  # "melpa-snapshot"
        generate_slug("Load org-trello")  # "load-org-trello"
        generate_slug("Café déjà vu")  # "café-déjà-vu"
    """
    slug = title.strip().lower()
    slug = "".join(character for character in slug if not _is_punctuation(character))
    return _WHITESPACE_RUN.sub("-", slug)


def to_link(title: str, count: int = 0) -> str:
    """Render a Markdown link pointing at a heading anchor.

    Args:
        title: Heading text, used verbatim as the link text.
        count: Occurrence index of the title; values above 0 add a ``-N``
            suffix to the fragment.

    Returns:
        str: ``[title](#slug)`` or ``[title](#slug-N)``.

    Examples:
        to_link("Setup")  # "[Setup](#setup)"
        to_link("Setup", 1)  # "[Setup](#setup-1)"
    """
    suffix = f"-{count}" if count > 0 else ""
    return f"[{title}](#{generate_slug(title)}{suffix})"
