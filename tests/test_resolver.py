from __future__ import annotations

import pytest

from markdown_toc.config import RenderConfig
from markdown_toc.resolver import find_line_at, resolve_fragment, resolve_toc_line

DOCUMENT = "# Intro\n\n## Setup\n\ntext\n\n## Setup\n\n# Usage\n"


def test_resolve_top_level_entry():
    assert resolve_toc_line("- [Usage](#usage)", DOCUMENT) == DOCUMENT.index("# Usage")


def test_resolve_prefers_last_identical_heading():
    target = resolve_toc_line("  - [Setup](#setup-1)", DOCUMENT)

    assert target == DOCUMENT.rindex("## Setup")
    assert target != DOCUMENT.index("## Setup")


def test_resolve_rejects_misindented_entry():
    assert resolve_toc_line("   - [Setup](#setup)", DOCUMENT) is None


def test_resolve_maps_indent_to_heading_level():
    # Depth 0 points at "#" headings, so a top-level "Setup" entry has no target.
    assert resolve_toc_line("- [Setup](#setup)", DOCUMENT) is None


def test_resolve_does_not_match_deeper_heading():
    assert resolve_toc_line("  - [Setup](#setup)", "### Setup\n") is None


def test_resolve_prefers_exact_case():
    document = "## Setup\n## SETUP\n"

    assert resolve_toc_line("  - [Setup](#setup)", document) == 0


def test_resolve_falls_back_to_case_insensitive():
    document = "# Intro\n## setup guide\n"

    assert resolve_toc_line("  - [Setup Guide](#setup-guide)", document) == len("# Intro\n")


def test_resolve_escapes_title():
    document = "# Other\n# C++ (beta)\n"

    assert resolve_toc_line("- [C++ (beta)](#c-beta)", document) == len("# Other\n")


def test_resolve_requires_whole_title():
    assert resolve_toc_line("- [Set](#set)", "# Setup\n") is None


def test_resolve_accepts_closing_hashes_and_crlf():
    assert resolve_toc_line("- [Intro](#intro)", "# Intro ##\r\n") == 0


def test_resolve_quoted_entry():
    assert resolve_toc_line(">   - [Setup](#setup)", DOCUMENT) == DOCUMENT.rindex("## Setup")


def test_resolve_with_custom_indent_unit():
    config = RenderConfig(indent_unit=4)

    assert resolve_toc_line("    - [Setup](#setup)", DOCUMENT, config) == DOCUMENT.rindex("## Setup")
    assert resolve_toc_line("  - [Setup](#setup)", DOCUMENT, config) is None


@pytest.mark.parametrize("line", ["plain text", "", "## Setup"])
def test_resolve_rejects_non_entries(line: str):
    assert resolve_toc_line(line, DOCUMENT) is None


def test_resolve_fragment_matches_spaces_and_case():
    document = "Intro\n## Getting Started\n"

    assert resolve_fragment("#getting-started", document) == len("Intro\n")


def test_resolve_fragment_matches_literal_hyphen():
    assert resolve_fragment("#load-org-trello", "# Load org-trello\n") == 0


def test_resolve_fragment_takes_first_match():
    document = "# A b\n# A b\n"

    assert resolve_fragment("#a-b", document) == 0


def test_resolve_fragment_any_heading_level():
    assert resolve_fragment("#deep", "text\n#### Deep\n") == len("text\n")


@pytest.mark.parametrize("link", ["getting-started", "https://example.com#x", ""])
def test_resolve_fragment_requires_hash(link: str):
    assert resolve_fragment(link, "# Getting Started\n") is None


def test_resolve_fragment_escapes_special_characters():
    assert resolve_fragment("#a.b", "# axb\n") is None
    assert resolve_fragment("#a.b", "# a.b\n") == 0


def test_resolve_fragment_without_match():
    assert resolve_fragment("#missing", DOCUMENT) is None


@pytest.mark.parametrize(
    ("offset", "expected"),
    [
        (0, "a"),
        (1, "a"),
        (2, "bc"),
        (3, "bc"),
        (-5, "a"),
    ],
)
def test_find_line_at(offset: int, expected: str):
    assert find_line_at("a\nbc\r\nd", offset) == expected


def test_find_line_at_end_of_text():
    assert find_line_at("a\nbc", 99) == "bc"


def test_resolve_fragment_empty_has_no_target():
    assert resolve_fragment("#", DOCUMENT) is None


def test_resolve_accepts_wide_heading_separator():
    document = "# Intro\n##  Setup\n"

    assert resolve_toc_line("  - [Setup](#setup)", document) == len("# Intro\n")
    assert resolve_fragment("#setup", document) == len("# Intro\n")


def test_resolve_accepts_tab_separator():
    assert resolve_toc_line("- [Intro](#intro)", "#\tIntro\n") == 0
