"""Constants used across the markdown-toc package."""

from __future__ import annotations

import re

from .config import RenderConfig

DEFAULT_CONFIG = RenderConfig()

# Markdown patterns
HEADER_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")
CODE_FENCE_PATTERN = re.compile(r"^(?P<indent>\s{0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CLOSING_FENCE_MAX_INDENT = 3

# List markers recognized on TOC lines in addition to the configured one
LIST_MARKER_PATTERN = r"[-*+]|\d+[.)]"
QUOTE_PREFIX = "> "

# Blank lines the renderer emits around the body: one separator plus the
# placeholder line of an empty marker
RENDERED_BLANK_PADDING = 2

# TOC markers and configuration defaults
TOC_START_MARKER = DEFAULT_CONFIG.start_marker
TOC_END_MARKER = DEFAULT_CONFIG.end_marker
TOC_TITLE = DEFAULT_CONFIG.title_line

# Extensions accepted by the command line
MARKDOWN_EXTENSIONS = (".md", ".markdown", ".mdown", ".mkd", ".mkdn")
