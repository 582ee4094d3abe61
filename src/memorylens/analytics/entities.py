"""Candidate entity extraction from markdown notes."""

from __future__ import annotations

from typing import List

from memorylens.models import Occurrence
from memorylens.utils.text import heading_text, iter_bold_spans, line_around, strip_emphasis
from memorylens.vocabulary import DEFAULT_VOCABULARY, Vocabulary

MIN_NAME_CHARS = 2
MAX_NAME_CHARS = 49


def _accept(name: str) -> bool:
    return MIN_NAME_CHARS <= len(name) <= MAX_NAME_CHARS


def extract_entities(
    content: str, source: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY
) -> List[Occurrence]:
    """Collect raw entity mentions from a single note.

    Headings (levels 1-3) and ``**bold**`` spans are scanned line by line.
    Every known vocabulary term is then searched once over the whole
    content. The rules are additive and nothing is deduplicated here.
    """
    occurrences: List[Occurrence] = []

    for line in content.split("\n"):
        heading = heading_text(line)
        if heading is not None:
            name = strip_emphasis(heading)
            if _accept(name):
                occurrences.append(Occurrence(name=name, snippet=line.strip(), source=source))

        for name in iter_bold_spans(line):
            if _accept(name):
                occurrences.append(Occurrence(name=name, snippet=line.strip(), source=source))

    for _term, pattern in vocabulary.terms():
        match = pattern.search(content)
        if match is None:
            continue
        occurrences.append(
            Occurrence(
                name=match.group(0),
                snippet=line_around(content, match.start()),
                source=source,
            )
        )

    return occurrences
