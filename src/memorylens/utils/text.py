"""Markdown text helpers shared by the extraction passes."""

from __future__ import annotations

import re
from typing import Iterator

HEADING_RE = re.compile(r"^#{1,3}\s+(.+)")
BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")

_WHITESPACE_RE = re.compile(r"\s+")


def strip_emphasis(text: str, markers: str = "*_`") -> str:
    """Remove emphasis marker characters and trim."""
    return text.translate({ord(ch): None for ch in markers}).strip()


def heading_text(line: str) -> str | None:
    """Return the raw text of a level 1-3 markdown heading, if ``line`` is one."""
    match = HEADING_RE.match(line)
    return match.group(1) if match else None


def iter_bold_spans(line: str) -> Iterator[str]:
    for match in BOLD_RE.finditer(line):
        yield match.group(1).strip()


def normalize_entity_id(name: str) -> str:
    """Lower-case and collapse whitespace runs into single hyphens."""
    return _WHITESPACE_RE.sub("-", name.lower())


def line_around(content: str, offset: int, *, fallback_chars: int = 100) -> str:
    """Return the trimmed line of ``content`` containing ``offset``.

    When the line has no terminating newline the result is cut to
    ``fallback_chars`` characters from the line start.
    """
    start = content.rfind("\n", 0, offset) + 1
    end = content.find("\n", offset)
    if end == -1:
        end = start + fallback_chars
    return content[start:end].strip()
