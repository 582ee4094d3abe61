"""Entity aggregation and co-mention graph construction."""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Dict, Iterable, List, Set, Tuple

from memorylens.analytics.entities import extract_entities
from memorylens.models import Edge, Entity, EntityGraph, Note, Snippet
from memorylens.utils.text import normalize_entity_id
from memorylens.vocabulary import DEFAULT_VOCABULARY, Vocabulary, classify_entity

LOGGER = logging.getLogger(__name__)

SNIPPET_CAP = 5
SNIPPET_CHARS = 200


class GraphBuilder:
    """Folds per-note occurrences into canonical entities and co-mentions."""

    def __init__(
        self, vocabulary: Vocabulary = DEFAULT_VOCABULARY, *, snippet_cap: int = SNIPPET_CAP
    ) -> None:
        self.vocabulary = vocabulary
        self.snippet_cap = snippet_cap
        self.entities: Dict[str, Entity] = {}
        self.file_entities: Dict[str, Set[str]] = {}

    def add_note(self, note: Note) -> bool:
        """Fold one note in. Returns False when the note was skipped."""
        if note.content is None:
            LOGGER.debug("Skipping unreadable note %s", note.path)
            return False

        try:
            occurrences = extract_entities(note.content, note.path, self.vocabulary)
        except Exception as exc:
            LOGGER.warning("Failed to extract entities from %s: %s", note.path, exc)
            return False

        ids: Set[str] = set()
        for occurrence in occurrences:
            entity_id = normalize_entity_id(occurrence.name)
            if len(entity_id) < 2:
                continue

            entity = self.entities.get(entity_id)
            if entity is None:
                entity = Entity(
                    id=entity_id,
                    label=occurrence.name,
                    type=classify_entity(occurrence.name, self.vocabulary),
                )
                self.entities[entity_id] = entity

            entity.count += 1
            if len(entity.snippets) < self.snippet_cap:
                entity.snippets.append(
                    Snippet(file=note.path, text=occurrence.snippet[:SNIPPET_CHARS])
                )
            ids.add(entity_id)

        self.file_entities[note.path] = ids
        return True

    def build(self) -> EntityGraph:
        # Keep recurring names and anything the vocabulary recognises.
        nodes = [
            entity
            for entity in self.entities.values()
            if entity.count >= 2 or entity.type != "other"
        ]
        node_ids = {node.id for node in nodes}

        weights: Dict[Tuple[str, str], int] = {}
        for ids in self.file_entities.values():
            kept = sorted(ids & node_ids)
            for left, right in combinations(kept, 2):
                weights[(left, right)] = weights.get((left, right), 0) + 1

        edges: List[Edge] = [
            Edge(source=source, target=target, weight=weight)
            for (source, target), weight in weights.items()
        ]

        return EntityGraph(nodes=nodes, edges=edges)


def build_entity_graph(
    notes: Iterable[Note],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    *,
    snippet_cap: int = SNIPPET_CAP,
) -> EntityGraph:
    """Build the co-mention entity graph for a corpus snapshot.

    Notes are visited in path order so the first-seen label of every
    entity is stable for a given snapshot.
    """
    builder = GraphBuilder(vocabulary, snippet_cap=snippet_cap)
    for note in sorted(notes, key=lambda item: item.path):
        builder.add_note(note)
    return builder.build()
