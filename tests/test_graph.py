"""Tests for entity aggregation and the co-mention graph."""

from __future__ import annotations

import logging

import pytest

from conftest import make_note
from memorylens.analytics.graph import GraphBuilder, build_entity_graph
from memorylens.vocabulary import DEFAULT_VOCABULARY, Vocabulary


def _node(graph, entity_id):
    return next((node for node in graph.nodes if node.id == entity_id), None)


def _weights(graph) -> dict:
    return {(edge.source, edge.target): edge.weight for edge in graph.edges}


class TestBuildEntityGraph:
    """Test build_entity_graph."""

    def test_reference_example(self) -> None:
        notes = [
            make_note("MEMORY.md", "x" * 500),
            make_note("memory/2024-01-01.md", "# Aaron\n\n**OpenClaw** helps Aaron."),
        ]

        graph = build_entity_graph(notes, DEFAULT_VOCABULARY)

        aaron = _node(graph, "aaron")
        openclaw = _node(graph, "openclaw")
        assert aaron is not None and aaron.type == "person" and aaron.count >= 2
        assert openclaw is not None and openclaw.type == "tool"
        assert _weights(graph) == {("aaron", "openclaw"): 1}

    def test_ids_collapse_case_and_whitespace(self) -> None:
        notes = [
            make_note("a.md", "# Weekly  Review"),
            make_note("b.md", "**weekly review**"),
        ]

        graph = build_entity_graph(notes, Vocabulary())

        assert [node.id for node in graph.nodes] == ["weekly-review"]
        node = graph.nodes[0]
        assert node.label == "Weekly  Review"
        assert node.count == 2
        assert node.type == "other"

    def test_first_seen_label_follows_path_order(self) -> None:
        notes = [
            make_note("memory/b.md", "# PLANNING"),
            make_note("memory/a.md", "# Planning"),
        ]

        graph = build_entity_graph(notes, Vocabulary())

        assert graph.nodes[0].label == "Planning"

    def test_single_mention_other_is_dropped(self) -> None:
        notes = [make_note("a.md", "# Groceries\n**Aaron** called")]

        graph = build_entity_graph(notes, DEFAULT_VOCABULARY)

        assert _node(graph, "groceries") is None
        assert _node(graph, "aaron") is not None

    def test_known_single_mention_is_kept(self) -> None:
        notes = [make_note("a.md", "tried tailwind once")]

        graph = build_entity_graph(notes, DEFAULT_VOCABULARY)

        node = _node(graph, "tailwind")
        assert node is not None
        assert node.count == 1
        assert node.type == "tool"

    def test_type_is_fixed_at_first_classification(self) -> None:
        vocabulary = Vocabulary(tools={"atlas"})
        notes = [make_note("a.md", "# Atlas\n**ATLAS**")]

        graph = build_entity_graph(notes, vocabulary)

        node = _node(graph, "atlas")
        assert node.type == "tool"
        assert node.count == 3

    def test_edge_weight_counts_files(self) -> None:
        vocabulary = Vocabulary(people={"dana"}, tools={"git"})
        notes = [
            make_note("a.md", "dana used git\ndana again"),
            make_note("b.md", "git with Dana"),
            make_note("c.md", "only git"),
        ]

        graph = build_entity_graph(notes, vocabulary)

        assert _weights(graph) == {("dana", "git"): 2}

    def test_edges_only_between_retained_nodes(self) -> None:
        vocabulary = Vocabulary(tools={"git"})
        notes = [make_note("a.md", "# Random Thought\nused git")]

        graph = build_entity_graph(notes, vocabulary)

        assert [node.id for node in graph.nodes] == ["git"]
        assert graph.edges == []

    def test_no_dangling_edges(self) -> None:
        notes = [
            make_note("MEMORY.md", "# People\n**Aaron** and **Grace** use **Cursor**\n## Ideas"),
            make_note("memory/2024-01-01.md", "# Ideas\nGrace shipped Recall with npm"),
            make_note("memory/2024-01-02.md", "**Lunch**\n**Lunch** with Aaron"),
        ]

        graph = build_entity_graph(notes, DEFAULT_VOCABULARY)

        node_ids = {node.id for node in graph.nodes}
        assert graph.edges
        for edge in graph.edges:
            assert edge.source in node_ids
            assert edge.target in node_ids
            assert edge.source < edge.target

    def test_snippets_are_capped(self) -> None:
        content = "\n".join(f"**Dana** note {i}" for i in range(8))
        graph = build_entity_graph([make_note("a.md", content)], Vocabulary())

        node = _node(graph, "dana")
        assert node.count == 8
        assert len(node.snippets) == 5
        assert [s.text for s in node.snippets] == [f"**Dana** note {i}" for i in range(5)]

    def test_snippet_text_truncated(self) -> None:
        line = "**Dana** " + "z" * 300
        graph = build_entity_graph([make_note("a.md", f"{line}\n{line}")], Vocabulary())

        node = _node(graph, "dana")
        assert all(len(snippet.text) == 200 for snippet in node.snippets)
        assert node.snippets[0].file == "a.md"

    def test_custom_snippet_cap(self) -> None:
        content = "**Dana**\n**Dana**\n**Dana**"
        graph = build_entity_graph([make_note("a.md", content)], Vocabulary(), snippet_cap=1)

        assert len(_node(graph, "dana").snippets) == 1

    def test_unreadable_note_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        notes = [
            make_note("a.md", None),
            make_note("b.md", "**Dana**\n**Dana**"),
        ]

        with caplog.at_level(logging.DEBUG, logger="memorylens.analytics.graph"):
            graph = build_entity_graph(notes, Vocabulary())

        assert [node.id for node in graph.nodes] == ["dana"]
        assert "a.md" in caplog.text

    def test_deterministic_for_same_snapshot(self) -> None:
        notes = [
            make_note("memory/2024-01-02.md", "# Sync\nAaron used git"),
            make_note("MEMORY.md", "# Sync\n**Grace** and Aaron"),
        ]

        first = build_entity_graph(notes, DEFAULT_VOCABULARY)
        second = build_entity_graph(list(reversed(notes)), DEFAULT_VOCABULARY)

        assert first.to_dict() == second.to_dict()

    def test_empty_corpus(self) -> None:
        graph = build_entity_graph([], DEFAULT_VOCABULARY)

        assert graph.nodes == []
        assert graph.edges == []


class TestGraphBuilder:
    """Test the incremental builder."""

    def test_add_note_reports_skips(self) -> None:
        builder = GraphBuilder(Vocabulary())

        assert builder.add_note(make_note("a.md", "# Hello")) is True
        assert builder.add_note(make_note("b.md", None)) is False
        assert builder.file_entities == {"a.md": {"hello"}}

    def test_short_ids_are_discarded(self) -> None:
        builder = GraphBuilder(Vocabulary(tools={"r"}))

        builder.add_note(make_note("a.md", "wrote some R today"))

        assert builder.entities == {}
