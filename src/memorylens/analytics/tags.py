"""Lightweight tag index built from headings and bold text."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set

from memorylens.models import Note, TagEntry
from memorylens.utils.text import heading_text, iter_bold_spans, strip_emphasis

LOGGER = logging.getLogger(__name__)

MIN_TAG_CHARS = 2
MAX_TAG_CHARS = 39
TAG_LIMIT = 50


def _accept(tag: str) -> bool:
    return MIN_TAG_CHARS <= len(tag) <= MAX_TAG_CHARS


def extract_tags(content: str) -> Set[str]:
    """Return the case-folded heading and bold phrases of one note."""
    tags: Set[str] = set()
    for line in content.split("\n"):
        heading = heading_text(line)
        if heading is not None:
            tag = strip_emphasis(heading, "*_`#").casefold()
            if _accept(tag):
                tags.add(tag)

        for span in iter_bold_spans(line):
            tag = span.casefold()
            if _accept(tag):
                tags.add(tag)
    return tags


def build_tag_index(notes: Iterable[Note], *, limit: int = TAG_LIMIT) -> List[TagEntry]:
    """Invert per-note tags into the most widely used tags across the corpus."""
    tag_files: Dict[str, List[str]] = {}
    for note in sorted(notes, key=lambda item: item.path):
        if note.content is None:
            LOGGER.debug("Skipping unreadable note %s", note.path)
            continue
        for tag in extract_tags(note.content):
            tag_files.setdefault(tag, []).append(note.path)

    entries = [
        TagEntry(tag=tag, count=len(files), files=files) for tag, files in tag_files.items()
    ]
    entries.sort(key=lambda entry: (-entry.count, entry.tag))
    return entries[:limit]
