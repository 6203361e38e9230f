"""
markdown-toc: keep a table of contents in sync with a Markdown outline.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    markdown-toc refresh README.md

Library Usage:
    from pathlib import Path
    from markdown_toc import HeadingNode, generate_toc, refresh_toc

    toc = generate_toc([HeadingNode("Intro", (HeadingNode("Setup"),))])
    updated = refresh_toc(Path("README.md").read_text()).content
"""

from .config import ConfigError, RenderConfig
from .document import delete_toc, follow_link, insert_toc, refresh_if_present, refresh_toc
from .exceptions import LineTooLongError, ParseError, TooManyHeadersError
from .generator import generate_toc, render_toc, render_toc_lines
from .locator import find_toc_bounds, parse_toc_item
from .models import (
    DisambiguatedEntry,
    HeadingNode,
    OutlineEntry,
    ParseResult,
    TocBounds,
    TocItemMatch,
    TocUpdate,
)
from .outline import disambiguate, flatten_outline
from .parser import build_outline, parse_headings, parse_markdown
from .resolver import find_line_at, resolve_fragment, resolve_toc_line
from .slugify import generate_slug, to_link

__version__ = "0.1.0"

__all__ = [
    # Core pipeline
    "flatten_outline",
    "disambiguate",
    "generate_slug",
    "to_link",
    "render_toc_lines",
    "render_toc",
    "generate_toc",
    "parse_toc_item",
    "find_toc_bounds",
    "resolve_toc_line",
    "resolve_fragment",
    "find_line_at",
    # Outline provider
    "parse_markdown",
    "parse_headings",
    "build_outline",
    # Document operations
    "insert_toc",
    "refresh_toc",
    "refresh_if_present",
    "delete_toc",
    "follow_link",
    # Data models
    "HeadingNode",
    "OutlineEntry",
    "DisambiguatedEntry",
    "TocBounds",
    "TocItemMatch",
    "TocUpdate",
    "ParseResult",
    "RenderConfig",
    # Exceptions
    "ConfigError",
    "LineTooLongError",
    "ParseError",
    "TooManyHeadersError",
    # Version
    "__version__",
]
