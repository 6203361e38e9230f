from __future__ import annotations

from markdown_toc.models import DisambiguatedEntry, HeadingNode, OutlineEntry
from markdown_toc.outline import disambiguate, flatten_outline


def test_flatten_preserves_depth():
    forest = [HeadingNode("X", (HeadingNode("Y"),))]

    assert flatten_outline(forest) == [OutlineEntry(0, "X"), OutlineEntry(1, "Y")]


def test_flatten_emits_children_before_siblings():
    forest = [
        HeadingNode("A", (HeadingNode("B", (HeadingNode("C"),)), HeadingNode("D"))),
        HeadingNode("E"),
    ]

    assert flatten_outline(forest) == [
        OutlineEntry(0, "A"),
        OutlineEntry(1, "B"),
        OutlineEntry(2, "C"),
        OutlineEntry(1, "D"),
        OutlineEntry(0, "E"),
    ]


def test_flatten_empty_forest():
    assert flatten_outline([]) == []


def test_flatten_keeps_duplicate_titles_separate():
    forest = [HeadingNode("Same"), HeadingNode("Same", (HeadingNode("Same"),))]

    assert flatten_outline(forest) == [
        OutlineEntry(0, "Same"),
        OutlineEntry(0, "Same"),
        OutlineEntry(1, "Same"),
    ]


def test_flatten_accepts_iterators():
    assert flatten_outline(iter([HeadingNode("Only")])) == [OutlineEntry(0, "Only")]


def test_flatten_handles_deep_nesting():
    node = HeadingNode("leaf")
    for index in range(2000):
        node = HeadingNode(f"level {index}", (node,))

    entries = flatten_outline([node])

    assert len(entries) == 2001
    assert entries[-1] == OutlineEntry(2000, "leaf")


def test_disambiguate_counts_prior_occurrences():
    entries = [OutlineEntry(0, "A"), OutlineEntry(0, "B"), OutlineEntry(0, "A")]

    assert [entry.occurrence for entry in disambiguate(entries)] == [0, 0, 1]


def test_disambiguate_ignores_depth():
    entries = [OutlineEntry(0, "A"), OutlineEntry(2, "A"), OutlineEntry(1, "A")]

    assert disambiguate(entries) == [
        DisambiguatedEntry(0, "A", 0),
        DisambiguatedEntry(2, "A", 1),
        DisambiguatedEntry(1, "A", 2),
    ]


def test_disambiguate_is_case_sensitive():
    entries = [OutlineEntry(0, "Intro"), OutlineEntry(0, "intro")]

    assert [entry.occurrence for entry in disambiguate(entries)] == [0, 0]


def test_disambiguate_tracks_groups_independently():
    titles = ["Setup", "Setup", "Config", "Config", "Setup"]

    result = disambiguate([OutlineEntry(0, title) for title in titles])

    assert [entry.occurrence for entry in result] == [0, 1, 0, 1, 2]
